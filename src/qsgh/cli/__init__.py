"""qsgh CLI — Typer entrypoint."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from qsgh import __version__
from qsgh.errors import QsghError

app = typer.Typer(
    name="qsgh",
    help="Install the shared QS Git hooks and collect their configuration.",
    no_args_is_help=True,
    add_completion=False,
)

console = Console(highlight=False, soft_wrap=True)
err_console = Console(stderr=True, highlight=False, soft_wrap=True)


def fail(exc: QsghError) -> typer.Exit:
    """Print a one-line error and return the Exit to raise."""
    err_console.print(f"Error: {exc}", markup=False)
    return typer.Exit(1)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging on stderr."),
) -> None:
    from qsgh.log import configure_logging

    configure_logging(verbose)


@app.command()
def setup(
    reset: bool = typer.Option(False, "--reset", help="Discard saved values and ask for everything again."),
    incremental: bool = typer.Option(
        False, "--incremental", help="Keep saved values and only ask for missing ones."
    ),
    shell: str | None = typer.Option(None, "--shell", help="zsh or bash (default: detected from $SHELL)."),
    repo_url: str | None = typer.Option(None, "--repo-url", help="Clone hooks from this repository."),
    venv: bool = typer.Option(False, "--venv", help="Also create a Python virtual environment for the hooks."),
    answers_file: Path | None = typer.Option(
        None, "--answers-file", exists=True, dir_okay=False, help="Read answers from a file, one per line."
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
) -> None:
    """Clone the hooks, install them and configure your shell."""
    from qsgh.cli.setup import run_setup

    if reset and incremental:
        raise typer.BadParameter("--reset and --incremental are mutually exclusive")

    try:
        run_setup(
            reset=reset,
            incremental=incremental,
            shell=shell,
            repo_url=repo_url,
            with_venv=venv,
            answers_file=answers_file,
            assume_yes=yes,
        )
    except QsghError as exc:
        raise fail(exc) from exc
    except KeyboardInterrupt:
        err_console.print("\nError: Interrupted", markup=False)
        raise typer.Exit(130) from None


@app.command()
def show() -> None:
    """List the saved configuration (secrets masked)."""
    from pydantic import ValidationError

    from qsgh.config import BootstrapSettings, ConfigFile, HooksConfig
    from qsgh.schema import DEFAULT_SCHEMA

    settings = BootstrapSettings.from_env()
    store = ConfigFile(settings.config_file)
    if not store.exists():
        console.print("\n  No configuration found. Run [bold]qsgh setup[/bold] first.\n")
        raise typer.Exit(1)

    secrets = {d.name for d in DEFAULT_SCHEMA if d.secret}

    table = Table(title=str(settings.config_file))
    table.add_column("Variable", style="bold")
    table.add_column("Value")
    values = store.load()
    for name, value in values.items():
        table.add_row(name, _mask(value) if name in secrets else value)

    console.print()
    console.print(table)

    try:
        hooks_config = HooksConfig.from_persisted(values)
    except ValidationError:
        hooks_config = None
    if hooks_config is None:
        console.print("  [yellow]Unknown LLM provider saved.[/yellow] Run [bold]qsgh setup --reset[/bold].")
    elif hooks_config.provider and not hooks_config.llm_api_key:
        console.print(
            f"  [yellow]No API key saved for {hooks_config.provider}.[/yellow] "
            "Run [bold]qsgh setup[/bold] to add it."
        )
    console.print()


@app.command()
def env() -> None:
    """Print the saved configuration as export statements.

    Use as: eval "$(qsgh env)"
    """
    from pydantic import ValidationError

    from qsgh.config import BootstrapSettings, ConfigFile, HooksConfig, format_export

    settings = BootstrapSettings.from_env()
    store = ConfigFile(settings.config_file)
    try:
        hooks_config = HooksConfig.from_persisted(store.load())
    except ValidationError as exc:
        err_console.print(f"Error: Invalid configuration in {store.path}", markup=False)
        raise typer.Exit(1) from exc

    for name, value in hooks_config.to_environ().items():
        typer.echo(format_export(name, value))


@app.command()
def uninstall(
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
) -> None:
    """Remove the installed hooks, saved configuration and shell wiring."""
    from qsgh.cli.uninstall import run_uninstall

    try:
        run_uninstall(assume_yes=yes)
    except QsghError as exc:
        raise fail(exc) from exc


@app.command()
def version() -> None:
    """Show the qsgh version."""
    console.print(f"qsgh {__version__}")


def _mask(value: str) -> str:
    if len(value) <= 8:
        return "*" * len(value)
    return value[:4] + "*" * (len(value) - 4)
