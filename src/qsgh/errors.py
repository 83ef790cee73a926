"""Error taxonomy for qsgh. Every error is fatal to the current run."""

from __future__ import annotations

from pathlib import Path


class QsghError(Exception):
    """Base class for all errors reported to the operator."""


class MissingValue(QsghError):
    """A required variable was answered with an empty value."""

    def __init__(self, variable: str, hint: str = "") -> None:
        msg = f"{variable} cannot be empty"
        if hint:
            msg += f"; {hint}"
        super().__init__(msg)
        self.variable = variable


class InvalidChoice(QsghError):
    """A selection (or persisted value) outside the enumerated option set."""

    def __init__(self, value: str, variable: str | None = None) -> None:
        if variable:
            msg = f"Invalid value {value!r} for {variable}"
        else:
            msg = f"Invalid choice: {value!r}"
        super().__init__(msg)
        self.value = value
        self.variable = variable


class PersistFailure(QsghError):
    """The configuration file could not be written."""

    def __init__(self, path: Path, reason: str = "") -> None:
        msg = f"Failed to write configuration file: {path}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)
        self.path = path


class PreconditionFailure(QsghError):
    """An upstream step (directories, dependencies, clone, copy) failed."""
