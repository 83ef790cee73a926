"""Hook file installation."""

from qsgh.hooks.install import copy_git_function, copy_hooks, set_permissions

__all__ = ["copy_git_function", "copy_hooks", "set_permissions"]
