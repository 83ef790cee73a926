"""Git invocation: dependency check and cloning the shared hooks repository."""

from __future__ import annotations

import shutil
import subprocess
import tempfile
from pathlib import Path

import structlog

from qsgh.errors import PreconditionFailure

logger = structlog.get_logger()


def _run_git(*args: str) -> str:
    """Execute a git command and return stdout."""
    try:
        result = subprocess.run(
            ["git", *args],
            capture_output=True,
            text=True,
            check=False,
        )
    except FileNotFoundError as exc:
        raise PreconditionFailure("git is not installed or not on PATH") from exc
    if result.returncode != 0:
        msg = result.stderr.strip() or f"git {' '.join(args)} failed"
        raise RuntimeError(msg)
    return result.stdout


def check_dependencies() -> str:
    """Ensure git is available; return its version string."""
    if shutil.which("git") is None:
        raise PreconditionFailure("git is not installed or not on PATH")
    try:
        version = _run_git("--version").strip()
    except RuntimeError as exc:
        raise PreconditionFailure(f"Unable to run git: {exc}") from exc
    logger.debug("git_found", version=version)
    return version


def clone_repository(url: str, prefix: str = "temp_git_hooks_") -> Path:
    """Clone `url` into a fresh temporary directory and return its path.

    The directory is removed again if the clone fails.
    """
    clone_dir = Path(tempfile.mkdtemp(prefix=prefix))
    logger.debug("cloning_hooks_repo", url=url, dest=str(clone_dir))
    try:
        _run_git("clone", "--quiet", url, str(clone_dir))
    except RuntimeError as exc:
        shutil.rmtree(clone_dir, ignore_errors=True)
        logger.debug("clone_failed", url=url, reason=str(exc))
        raise PreconditionFailure("Failed to clone the hooks repository") from exc
    except PreconditionFailure:
        shutil.rmtree(clone_dir, ignore_errors=True)
        raise
    return clone_dir
