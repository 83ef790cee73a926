"""Optional Python virtual environment for hooks that need third-party packages."""

from __future__ import annotations

import subprocess
import sys
from collections.abc import Sequence
from pathlib import Path

import structlog

from qsgh.errors import PreconditionFailure

logger = structlog.get_logger()


def venv_python(venv_dir: Path) -> Path:
    """Return the path to the ``python`` executable inside `venv_dir`."""
    scripts = "Scripts" if sys.platform == "win32" else "bin"
    exe = "python.exe" if sys.platform == "win32" else "python"
    return venv_dir / scripts / exe


def _run(cmd: Sequence[str]) -> None:
    logger.debug("running", cmd=" ".join(cmd))
    result = subprocess.run(list(cmd), capture_output=True, text=True, check=False)
    if result.returncode != 0:
        logger.debug("command_failed", cmd=" ".join(cmd), stderr=result.stderr.strip())
        raise PreconditionFailure(f"Command failed: {' '.join(cmd)}")


def ensure_venv(venv_dir: Path, requirements: Path | None = None) -> Path:
    """Create `venv_dir` if needed and install `requirements` into it.

    Returns the environment's python executable.
    """
    python = venv_python(venv_dir)
    if venv_dir.exists():
        logger.debug("venv_exists", path=str(venv_dir))
    else:
        _run([sys.executable, "-m", "venv", str(venv_dir)])
        _run([str(python), "-m", "pip", "install", "--quiet", "--upgrade", "pip"])
        logger.debug("venv_created", path=str(venv_dir))

    if requirements is not None and requirements.is_file():
        _run([str(python), "-m", "pip", "install", "--quiet", "-r", str(requirements)])
        logger.debug("venv_requirements_installed", requirements=str(requirements))
    return python
