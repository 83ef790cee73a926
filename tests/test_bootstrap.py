import stat

import pytest

from qsgh.bootstrap import choose_mode, run_bootstrap
from qsgh.config import ConfigFile
from qsgh.errors import MissingValue, PreconditionFailure
from qsgh.prompt import ScriptedInput
from qsgh.types import RunMode

ANSWERS = ["1", "sk-test", "alice", "app-pw", "development"]


def test_fresh_bootstrap_installs_everything(settings, home, fake_clone):
    result = run_bootstrap(settings, RunMode.FRESH, ScriptedInput(ANSWERS), shell="/bin/zsh", home=home)

    assert result.profile == home / ".zshrc"
    assert result.hooks == ["commit-msg", "pre-commit"]
    assert result.collected == [
        "QSGH_LLM_PROVIDER",
        "QSGH_API_KEY",
        "QSGH_BITBUCKET_USERNAME",
        "QSGH_BITBUCKET_APP_PASSWORD",
        "QSGH_DEFAULT_DESTINATION_BRANCH",
    ]
    for name in result.hooks:
        assert (settings.hooks_dir / name).stat().st_mode & stat.S_IXUSR
    assert settings.git_function_path.is_file()

    assert settings.config_file.read_text() == (
        'export QSGH_LLM_PROVIDER="openai"\n'
        'export QSGH_API_KEY="sk-test"\n'
        'export QSGH_BITBUCKET_USERNAME="alice"\n'
        'export QSGH_BITBUCKET_APP_PASSWORD="app-pw"\n'
        'export QSGH_DEFAULT_DESTINATION_BRANCH="development"\n'
    )

    profile = result.profile.read_text()
    assert "git()" in profile
    assert f"source {settings.config_file}" in profile

    assert len(fake_clone) == 1
    assert not fake_clone[0].exists()


def test_rerun_is_idempotent(settings, home, fake_clone):
    run_bootstrap(settings, RunMode.FRESH, ScriptedInput(ANSWERS), shell="/bin/bash", home=home)
    config_before = settings.config_file.read_bytes()
    profile_before = (home / ".bashrc").read_bytes()

    prompt = ScriptedInput([])
    result = run_bootstrap(settings, RunMode.INCREMENTAL, prompt, shell="/bin/bash", home=home)

    assert prompt.prompts == []
    assert result.collected == []
    assert settings.config_file.read_bytes() == config_before
    assert (home / ".bashrc").read_bytes() == profile_before


def test_fresh_run_clears_previous_config(settings, home, fake_clone):
    run_bootstrap(settings, RunMode.FRESH, ScriptedInput(ANSWERS), shell="/bin/bash", home=home)

    run_bootstrap(
        settings,
        RunMode.FRESH,
        ScriptedInput(["2", "ak", "bob", "pw", "main"]),
        shell="/bin/bash",
        home=home,
    )

    values = ConfigFile(settings.config_file).load()
    assert values["QSGH_LLM_PROVIDER"] == "anthropic"
    assert "QSGH_API_KEY" not in values
    assert len(settings.config_file.read_text().splitlines()) == 5


def test_failure_keeps_partial_config_and_removes_clone(settings, home, fake_clone):
    with pytest.raises(MissingValue):
        run_bootstrap(settings, RunMode.FRESH, ScriptedInput(["1", "sk", ""]), shell="/bin/bash", home=home)

    assert ConfigFile(settings.config_file).load() == {
        "QSGH_LLM_PROVIDER": "openai",
        "QSGH_API_KEY": "sk",
    }
    assert not fake_clone[0].exists()
    assert not (home / ".bashrc").exists()


def test_unknown_shell_fails_before_any_work(settings, home, fake_clone):
    with pytest.raises(PreconditionFailure):
        run_bootstrap(settings, RunMode.FRESH, ScriptedInput(ANSWERS), shell="/usr/bin/fish", home=home)

    assert fake_clone == []
    assert not settings.config_dir.exists()


def test_missing_hooks_subdir(settings, home, fake_clone):
    settings = settings.model_copy(update={"hooks_subdir": "nope"})

    with pytest.raises(PreconditionFailure, match="Hooks directory 'nope' does not exist"):
        run_bootstrap(settings, RunMode.FRESH, ScriptedInput(ANSWERS), shell="/bin/bash", home=home)

    assert not fake_clone[0].exists()


def test_with_venv(settings, home, fake_clone, monkeypatch):
    calls = []
    monkeypatch.setattr("qsgh.bootstrap.ensure_venv", lambda path, requirements: calls.append((path, requirements)))

    result = run_bootstrap(
        settings, RunMode.FRESH, ScriptedInput(ANSWERS), shell="/bin/bash", home=home, with_venv=True
    )

    assert result.venv == settings.venv_dir
    assert calls == [(settings.venv_dir, fake_clone[0] / "requirements.txt")]


def test_choose_mode(settings):
    assert choose_mode(settings) is RunMode.FRESH
    ConfigFile(settings.config_file).append("A", "1")
    assert choose_mode(settings) is RunMode.INCREMENTAL
    assert choose_mode(settings, reset=True) is RunMode.FRESH
