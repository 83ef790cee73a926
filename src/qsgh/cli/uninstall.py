"""Uninstall qsgh — remove hooks, config and the shell wiring."""

from __future__ import annotations

import shutil
from pathlib import Path

import questionary
from rich.console import Console

from qsgh.config import BootstrapSettings
from qsgh.errors import PreconditionFailure
from qsgh.shell import PROFILE_FILES, ShellProfileWriter

console = Console(highlight=False, soft_wrap=True)


def run_uninstall(assume_yes: bool = False, home: Path | None = None) -> bool:
    """Remove the config `source` line from shell profiles and delete the config dir.

    Returns True when anything was removed.
    """
    settings = BootstrapSettings.from_env()
    home_dir = home or Path.home()

    if not assume_yes:
        confirmed = questionary.confirm(
            f"Remove {settings.config_dir} and its shell configuration?",
            default=False,
        ).ask()
        if not confirmed:
            console.print("Nothing removed.")
            return False

    removed_anything = False

    for filename in PROFILE_FILES.values():
        profile = home_dir / filename
        try:
            changed = ShellProfileWriter(profile).remove(settings.config_file)
        except OSError as exc:
            raise PreconditionFailure(f"Failed to update {profile}") from exc
        if changed:
            console.print(f"Removed config source line from {profile}", markup=False)
            removed_anything = True

    if settings.config_dir.is_dir():
        try:
            shutil.rmtree(settings.config_dir)
        except OSError as exc:
            raise PreconditionFailure(f"Failed to remove {settings.config_dir}") from exc
        console.print(f"Removed {settings.config_dir}", markup=False)
        removed_anything = True
    else:
        console.print(f"No {settings.config_dir} found.", markup=False)

    if removed_anything:
        console.print("The git() helper function stays in your shell profile; delete it by hand if unwanted.")
    else:
        console.print("Nothing to remove.")
    return removed_anything
