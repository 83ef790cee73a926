"""Line-based interactive input sources."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

from rich.console import Console


class InputSource(Protocol):
    """What the reconciler needs from the operator's terminal."""

    def write_prompt(self, text: str) -> None: ...

    def read_line(self, secret: bool = False) -> str: ...


class ConsoleInput:
    """Reads answers from the terminal through a Rich console."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(highlight=False)
        self._pending = ""

    def write_prompt(self, text: str) -> None:
        # Lines ending in ": " are input prompts and are shown by read_line
        if text.endswith(": "):
            self._pending += text
            return
        self.console.print(text, markup=False)

    def read_line(self, secret: bool = False) -> str:
        prompt, self._pending = self._pending, ""
        try:
            return self.console.input(prompt, markup=False, password=secret)
        except EOFError:
            return ""


class ScriptedInput:
    """Feeds a fixed sequence of answers; records every prompt shown."""

    def __init__(self, answers: Iterable[str]) -> None:
        self._answers = deque(answers)
        self.prompts: list[str] = []

    @classmethod
    def from_file(cls, path: Path) -> ScriptedInput:
        """One answer per line; blank lines are kept as empty answers."""
        return cls(path.read_text(encoding="utf-8").splitlines())

    @property
    def remaining(self) -> int:
        return len(self._answers)

    def write_prompt(self, text: str) -> None:
        self.prompts.append(text)

    def read_line(self, secret: bool = False) -> str:
        if not self._answers:
            return ""
        return self._answers.popleft()
