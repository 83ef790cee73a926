import os
import stat

import pytest

from qsgh.errors import PreconditionFailure
from qsgh.hooks.install import copy_git_function, copy_hooks, set_permissions


def test_copy_hooks_copies_everything(tmp_path, clone_factory):
    clone = clone_factory(tmp_path / "clone")
    (clone / "hooks" / "lib").mkdir()
    (clone / "hooks" / "lib" / "common.sh").write_text("# shared\n")
    dest = tmp_path / "dest"

    names = copy_hooks(clone, "hooks", dest)

    assert names == ["commit-msg", "lib", "pre-commit"]
    assert (dest / "pre-commit").read_text() == "#!/bin/sh\nexit 0\n"
    assert (dest / "lib" / "common.sh").is_file()


def test_copy_hooks_overwrites_existing(tmp_path, clone_factory):
    clone = clone_factory(tmp_path / "clone")
    dest = tmp_path / "dest"
    dest.mkdir()
    (dest / "pre-commit").write_text("old")

    copy_hooks(clone, "hooks", dest)

    assert (dest / "pre-commit").read_text() == "#!/bin/sh\nexit 0\n"


def test_copy_hooks_requires_subdir(tmp_path, clone_factory):
    clone = clone_factory(tmp_path / "clone")

    with pytest.raises(PreconditionFailure, match="Hooks directory 'githooks' does not exist"):
        copy_hooks(clone, "githooks", tmp_path / "dest")


def test_copy_git_function(tmp_path, clone_factory):
    clone = clone_factory(tmp_path / "clone")
    config_dir = tmp_path / "cfg"
    config_dir.mkdir()

    target = copy_git_function(clone, "git-function.sh", config_dir)

    assert target == config_dir / "git-function.sh"
    assert "git()" in target.read_text()


def test_copy_git_function_missing(tmp_path, clone_factory):
    clone = clone_factory(tmp_path / "clone", git_function=False)

    with pytest.raises(PreconditionFailure, match="git-function.sh not found"):
        copy_git_function(clone, "git-function.sh", tmp_path)


def test_set_permissions_makes_files_executable(tmp_path, clone_factory):
    clone = clone_factory(tmp_path / "clone")
    hooks = clone / "hooks"

    changed = set_permissions(hooks)

    assert [p.name for p in changed] == ["commit-msg", "pre-commit"]
    for path in changed:
        assert path.stat().st_mode & stat.S_IXUSR
        assert os.access(path, os.X_OK)
