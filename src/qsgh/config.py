"""Configuration: bootstrap settings and the persisted export file."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping, MutableMapping
from pathlib import Path

import structlog
from pydantic import BaseModel, Field

from qsgh.errors import PersistFailure
from qsgh.types import ProviderId

logger = structlog.get_logger()

DEFAULT_HOME_DIRNAME = ".qs-internal"
DEFAULT_REPO_URL = "git@bitbucket.org:quantspark/qs-shared-git-hooks.git"

# Ordered name → value mapping as read from (or written to) the config file
PersistedConfig = dict[str, str]

# export NAME="VALUE"; values are never escaped, so match up to the last quote
_EXPORT_RE = re.compile(r'^export ([A-Za-z_][A-Za-z0-9_]*)="(.*)"$')


class BootstrapSettings(BaseModel):
    """Where things live on the local machine and where the hooks come from."""

    config_dir: Path = Field(default_factory=lambda: Path.home() / DEFAULT_HOME_DIRNAME)
    repo_url: str = DEFAULT_REPO_URL
    hooks_subdir: str = "hooks"
    git_function_name: str = "git-function.sh"
    temp_dir_prefix: str = "temp_git_hooks_"

    @property
    def config_file(self) -> Path:
        return self.config_dir / "config"

    @property
    def hooks_dir(self) -> Path:
        return self.config_dir / "hooks"

    @property
    def git_function_path(self) -> Path:
        return self.config_dir / self.git_function_name

    @property
    def venv_dir(self) -> Path:
        return self.config_dir / "venv"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides: object) -> BootstrapSettings:
        """Build settings from QSGH_HOME / QSGH_HOOKS_REPO_URL, then explicit overrides."""
        env = os.environ if environ is None else environ
        data: dict[str, object] = {}
        if env.get("QSGH_HOME"):
            data["config_dir"] = Path(env["QSGH_HOME"]).expanduser()
        if env.get("QSGH_HOOKS_REPO_URL"):
            data["repo_url"] = env["QSGH_HOOKS_REPO_URL"]
        data.update({k: v for k, v in overrides.items() if v is not None})
        return cls.model_validate(data)


def format_export(name: str, value: str) -> str:
    """Render one persisted line. Embedded double quotes are not escaped."""
    return f'export {name}="{value}"'


def parse_export(line: str) -> tuple[str, str] | None:
    """Parse an `export NAME="VALUE"` line, or return None."""
    match = _EXPORT_RE.match(line.rstrip("\r\n"))
    if match is None:
        return None
    return match.group(1), match.group(2)


class ConfigFile:
    """Line-oriented, append-only store of export statements."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def exists(self) -> bool:
        return self.path.is_file()

    def read_lines(self) -> list[str]:
        if not self.exists():
            return []
        return self.path.read_text(encoding="utf-8").splitlines()

    def append_line(self, text: str) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as fh:
                fh.write(text + "\n")
        except OSError as exc:
            raise PersistFailure(self.path, exc.strerror or str(exc)) from exc

    def clear(self) -> None:
        """Create the file, or truncate it when it already exists."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text("", encoding="utf-8")
        except OSError as exc:
            raise PersistFailure(self.path, exc.strerror or str(exc)) from exc
        logger.debug("config_file_cleared", path=str(self.path))

    def load(self) -> PersistedConfig:
        """Read all export lines into an ordered mapping."""
        values: PersistedConfig = {}
        for lineno, line in enumerate(self.read_lines(), start=1):
            if not line.strip():
                continue
            parsed = parse_export(line)
            if parsed is None:
                logger.warning("config_line_ignored", path=str(self.path), line=lineno)
                continue
            name, value = parsed
            values[name] = value
        return values

    def append(self, name: str, value: str) -> None:
        """Persist a single accepted value immediately."""
        self.append_line(format_export(name, value))
        logger.debug("config_value_persisted", variable=name)


class HooksConfig(BaseModel):
    """Typed view of the persisted values consumed by the hooks."""

    provider: ProviderId | None = Field(None, alias="QSGH_LLM_PROVIDER")
    api_key: str | None = Field(None, alias="QSGH_API_KEY")
    anthropic_api_key: str | None = Field(None, alias="QSGH_ANTHROPIC_API_KEY")
    bitbucket_username: str | None = Field(None, alias="QSGH_BITBUCKET_USERNAME")
    bitbucket_app_password: str | None = Field(None, alias="QSGH_BITBUCKET_APP_PASSWORD")
    default_destination_branch: str | None = Field(None, alias="QSGH_DEFAULT_DESTINATION_BRANCH")

    # Variables added to the schema later are carried through untouched
    model_config = {"populate_by_name": True, "extra": "allow"}

    @classmethod
    def from_persisted(cls, values: Mapping[str, str]) -> HooksConfig:
        return cls.model_validate(dict(values))

    @property
    def llm_api_key(self) -> str | None:
        """The key matching the selected provider."""
        match self.provider:
            case "openai":
                return self.api_key
            case "anthropic":
                return self.anthropic_api_key
            case _:
                return None

    def to_environ(self) -> dict[str, str]:
        """Variable name → value for every value that is set."""
        return {k: v for k, v in self.model_dump(by_alias=True).items() if v is not None}

    def export_to(self, environ: MutableMapping[str, str] | None = None) -> None:
        """Push the values into a process environment (default: os.environ)."""
        target = os.environ if environ is None else environ
        target.update(self.to_environ())
