import subprocess
import sys
from unittest.mock import patch

import pytest

from qsgh.errors import PreconditionFailure
from qsgh.venv import ensure_venv, venv_python


def _ok(cmd, **kwargs):
    return subprocess.CompletedProcess(args=cmd, returncode=0, stdout="", stderr="")


def test_creates_venv_and_installs_requirements(tmp_path):
    venv_dir = tmp_path / "venv"
    requirements = tmp_path / "requirements.txt"
    requirements.write_text("requests\n")

    with patch("qsgh.venv.subprocess.run", side_effect=_ok) as run:
        python = ensure_venv(venv_dir, requirements)

    commands = [c.args[0] for c in run.call_args_list]
    assert commands[0] == [sys.executable, "-m", "venv", str(venv_dir)]
    assert commands[1][-2:] == ["--upgrade", "pip"]
    assert commands[2][-2:] == ["-r", str(requirements)]
    assert python == venv_python(venv_dir)


def test_existing_venv_is_reused(tmp_path):
    venv_dir = tmp_path / "venv"
    venv_dir.mkdir()

    with patch("qsgh.venv.subprocess.run", side_effect=_ok) as run:
        ensure_venv(venv_dir, tmp_path / "requirements.txt")

    run.assert_not_called()


def test_failed_venv_creation(tmp_path):
    failed = subprocess.CompletedProcess(args=[], returncode=1, stdout="", stderr="boom")
    with patch("qsgh.venv.subprocess.run", return_value=failed):
        with pytest.raises(PreconditionFailure, match="Command failed"):
            ensure_venv(tmp_path / "venv")
