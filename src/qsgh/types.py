"""Core data types for qsgh."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Literal


class RunMode(StrEnum):
    """Whether previously persisted configuration is honored."""

    FRESH = "fresh"
    INCREMENTAL = "incremental"


ProviderId = Literal["openai", "anthropic"]

ShellName = Literal["zsh", "bash"]


@dataclass(frozen=True, slots=True)
class DependsOn:
    """Applicability rule: `variable` must equal `value`."""

    variable: str
    value: str


@dataclass(frozen=True, slots=True)
class Option:
    """One entry of an enumerated choice."""

    value: str
    label: str


@dataclass(frozen=True, slots=True)
class VariableDescriptor:
    """A single configurable variable."""

    name: str
    description: str
    required: bool = True
    depends_on: DependsOn | None = None
    secret: bool = False
    options: tuple[Option, ...] = ()

    @property
    def is_choice(self) -> bool:
        return bool(self.options)


@dataclass(slots=True)
class BootstrapResult:
    """Outcome of a complete bootstrap run."""

    profile: Path
    config_file: Path
    hooks: list[str] = field(default_factory=list)
    collected: list[str] = field(default_factory=list)
    venv: Path | None = None
