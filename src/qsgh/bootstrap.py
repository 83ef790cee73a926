"""Bootstrap orchestrator — ties git, hook install, reconciler and shell profile together."""

from __future__ import annotations

import shutil
from pathlib import Path

import structlog

from qsgh.config import BootstrapSettings, ConfigFile
from qsgh.errors import PreconditionFailure
from qsgh.git import check_dependencies, clone_repository
from qsgh.hooks.install import copy_git_function, copy_hooks, set_permissions
from qsgh.prompt import InputSource
from qsgh.reconcile import reconcile
from qsgh.schema import DEFAULT_SCHEMA, ConfigSchema
from qsgh.shell import ShellProfileWriter, detect_shell_profile
from qsgh.types import BootstrapResult, RunMode
from qsgh.venv import ensure_venv

logger = structlog.get_logger()


def choose_mode(settings: BootstrapSettings, reset: bool = False) -> RunMode:
    """FRESH when a reset is requested or nothing is persisted yet."""
    if reset or not ConfigFile(settings.config_file).exists():
        return RunMode.FRESH
    return RunMode.INCREMENTAL


def _ensure_dir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise PreconditionFailure(f"Failed to create directory: {path}") from exc


def run_bootstrap(
    settings: BootstrapSettings,
    mode: RunMode,
    prompt: InputSource,
    shell: str | None,
    home: Path | None = None,
    with_venv: bool = False,
    schema: ConfigSchema = DEFAULT_SCHEMA,
) -> BootstrapResult:
    """Run a complete bootstrap.

    Args:
        settings: Local paths and the hooks repository location.
        mode: FRESH discards the persisted config, INCREMENTAL keeps it.
        prompt: Where answers for missing variables come from.
        shell: The $SHELL value used to pick the startup file.
        home: Home directory holding the startup file (default: Path.home()).
        with_venv: Also provision a virtual environment for the hooks.
        schema: Variables to collect.

    Returns:
        What was installed and where.
    """
    profile = detect_shell_profile(shell, home or Path.home())
    store = ConfigFile(settings.config_file)

    _ensure_dir(settings.config_dir)
    if mode is RunMode.FRESH:
        store.clear()
        existing: dict[str, str] = {}
    else:
        existing = store.load()
    _ensure_dir(settings.hooks_dir)

    check_dependencies()
    logger.info("bootstrap_started", mode=str(mode), repo=settings.repo_url)

    clone_dir = clone_repository(settings.repo_url, prefix=settings.temp_dir_prefix)
    try:
        hooks = copy_hooks(clone_dir, settings.hooks_subdir, settings.hooks_dir)
        copy_git_function(clone_dir, settings.git_function_name, settings.config_dir)
        set_permissions(settings.hooks_dir)

        venv = None
        if with_venv:
            venv = settings.venv_dir
            ensure_venv(venv, clone_dir / "requirements.txt")

        values = reconcile(schema, existing, mode, prompt, store)

        ShellProfileWriter(profile).install(settings.git_function_path, settings.config_file)
    finally:
        shutil.rmtree(clone_dir, ignore_errors=True)
        logger.debug("clone_removed", path=str(clone_dir))

    collected = [name for name in values if name not in existing]
    logger.info("bootstrap_finished", hooks=len(hooks), collected=len(collected))
    return BootstrapResult(
        profile=profile,
        config_file=settings.config_file,
        hooks=hooks,
        collected=collected,
        venv=venv,
    )
