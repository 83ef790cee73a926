"""Install the shared hook scripts and the git helper function."""

from __future__ import annotations

import shutil
import stat
from pathlib import Path

import structlog

from qsgh.errors import PreconditionFailure

logger = structlog.get_logger()

_EXEC_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


def copy_hooks(clone_dir: Path, subdir: str, dest: Path) -> list[str]:
    """Copy everything under `clone_dir/subdir` into `dest`.

    Existing files in `dest` are overwritten.

    Returns:
        Names of the top-level entries that were copied.
    """
    source = clone_dir / subdir
    if not source.is_dir():
        raise PreconditionFailure(f"Hooks directory '{subdir}' does not exist")

    dest.mkdir(parents=True, exist_ok=True)
    try:
        shutil.copytree(source, dest, dirs_exist_ok=True)
    except (OSError, shutil.Error) as exc:
        raise PreconditionFailure("Failed to copy hooks") from exc

    names = sorted(p.name for p in source.iterdir())
    logger.debug("hooks_copied", count=len(names), dest=str(dest))
    return names


def copy_git_function(clone_dir: Path, name: str, config_dir: Path) -> Path:
    """Copy the git helper function script from the clone root into `config_dir`."""
    source = clone_dir / name
    if not source.is_file():
        raise PreconditionFailure(f"{name} not found in cloned repository")
    target = config_dir / name
    try:
        shutil.copyfile(source, target)
    except OSError as exc:
        raise PreconditionFailure(f"Failed to copy {name}") from exc
    return target


def set_permissions(dest: Path) -> list[Path]:
    """Make every file directly inside `dest` executable."""
    changed: list[Path] = []
    try:
        for path in sorted(dest.iterdir()):
            if not path.is_file():
                continue
            path.chmod(path.stat().st_mode | _EXEC_BITS)
            changed.append(path)
    except OSError as exc:
        raise PreconditionFailure("Failed to set executable permissions") from exc
    return changed
