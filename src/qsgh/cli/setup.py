"""Interactive setup for the shared Git hooks."""

from __future__ import annotations

import os
from pathlib import Path

import questionary
from rich.console import Console

from qsgh.bootstrap import choose_mode, run_bootstrap
from qsgh.config import BootstrapSettings, ConfigFile
from qsgh.errors import PreconditionFailure
from qsgh.prompt import ConsoleInput, InputSource, ScriptedInput
from qsgh.types import RunMode

console = Console(highlight=False, soft_wrap=True)


def _resolve_mode(
    settings: BootstrapSettings,
    reset: bool,
    incremental: bool,
    interactive: bool,
) -> RunMode:
    if reset:
        return RunMode.FRESH
    if incremental:
        return RunMode.INCREMENTAL

    mode = choose_mode(settings)
    if mode is RunMode.INCREMENTAL and interactive:
        keep = questionary.confirm(
            f"Existing configuration found in {settings.config_file}. "
            "Keep it and only ask for missing values?",
            default=True,
        ).ask()
        if keep is None:
            raise PreconditionFailure("Setup cancelled")
        if not keep:
            mode = RunMode.FRESH
    return mode


def run_setup(
    reset: bool = False,
    incremental: bool = False,
    shell: str | None = None,
    repo_url: str | None = None,
    with_venv: bool = False,
    answers_file: Path | None = None,
    assume_yes: bool = False,
) -> None:
    """Run the bootstrap and report the result."""
    settings = BootstrapSettings.from_env(repo_url=repo_url)

    prompt: InputSource
    if answers_file is not None:
        prompt = ScriptedInput.from_file(answers_file)
    else:
        prompt = ConsoleInput(console)

    interactive = answers_file is None and not assume_yes
    mode = _resolve_mode(settings, reset, incremental, interactive)

    if mode is RunMode.INCREMENTAL and not ConfigFile(settings.config_file).exists():
        mode = RunMode.FRESH

    result = run_bootstrap(
        settings,
        mode,
        prompt,
        shell=shell or os.environ.get("SHELL"),
        with_venv=with_venv,
    )

    if result.collected:
        console.print(f"Saved {', '.join(result.collected)} to {result.config_file}", markup=False)
    else:
        console.print("Configuration already complete, nothing to ask.")
    if result.venv is not None:
        console.print(f"Virtual environment ready at {result.venv}", markup=False)

    console.print("Git hooks setup completed successfully")
    console.print(
        f"Please restart your terminal or run 'source {result.profile}' to apply the changes",
        markup=False,
    )
