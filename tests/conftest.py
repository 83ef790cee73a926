import os
from pathlib import Path

import pytest
import structlog

from qsgh.config import BootstrapSettings, ConfigFile
from qsgh.schema import build_schema
from qsgh.types import DependsOn, Option, VariableDescriptor

GIT_FUNCTION = 'git() {\n    command git "$@"\n}\n'


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()


@pytest.fixture
def schema():
    """PROVIDER(openai|anthropic), API_KEY, ANTHROPIC_KEY, USERNAME, PASSWORD."""
    return build_schema(
        [
            VariableDescriptor(
                name="PROVIDER",
                description="provider",
                options=(Option("openai", "OpenAI"), Option("anthropic", "Anthropic")),
            ),
            VariableDescriptor(
                name="API_KEY",
                description="OpenAI key",
                depends_on=DependsOn("PROVIDER", "openai"),
                secret=True,
            ),
            VariableDescriptor(
                name="ANTHROPIC_KEY",
                description="Anthropic key",
                depends_on=DependsOn("PROVIDER", "anthropic"),
                secret=True,
            ),
            VariableDescriptor(name="USERNAME", description="user name"),
            VariableDescriptor(name="PASSWORD", description="password", secret=True),
        ],
        selector="PROVIDER",
    )


@pytest.fixture
def store(tmp_path):
    return ConfigFile(tmp_path / "config")


@pytest.fixture
def settings(tmp_path):
    return BootstrapSettings(config_dir=tmp_path / ".qs-internal", repo_url="file:///hooks.git")


@pytest.fixture
def home(tmp_path):
    path = tmp_path / "home"
    path.mkdir()
    return path


def make_clone(root: Path, hooks=("pre-commit", "commit-msg"), git_function=True) -> Path:
    """Lay out a directory that looks like a clone of the hooks repository."""
    root.mkdir(parents=True, exist_ok=True)
    hooks_dir = root / "hooks"
    hooks_dir.mkdir()
    for name in hooks:
        (hooks_dir / name).write_text("#!/bin/sh\nexit 0\n")
        os.chmod(hooks_dir / name, 0o644)
    if git_function:
        (root / "git-function.sh").write_text(GIT_FUNCTION)
    return root


@pytest.fixture
def fake_clone(tmp_path, monkeypatch):
    """Replace git with a local directory copy; yields the list of clone dirs handed out."""
    handed_out: list[Path] = []

    def _clone(url, prefix="temp_git_hooks_"):
        clone_dir = make_clone(tmp_path / f"{prefix}{len(handed_out)}")
        handed_out.append(clone_dir)
        return clone_dir

    monkeypatch.setattr("qsgh.bootstrap.clone_repository", _clone)
    monkeypatch.setattr("qsgh.bootstrap.check_dependencies", lambda: "git version 2.45.0")
    return handed_out


@pytest.fixture
def clone_factory():
    return make_clone
