"""Shell startup-file detection and patching."""

from __future__ import annotations

from pathlib import Path

import structlog

from qsgh.errors import PreconditionFailure
from qsgh.types import ShellName

logger = structlog.get_logger()

PROFILE_FILES: dict[ShellName, str] = {
    "zsh": ".zshrc",
    "bash": ".bashrc",
}

SOURCE_COMMENT = "# Source QS Git Hooks config"
GIT_FUNCTION_MARKER = "git()"


def detect_shell(shell: str | None) -> ShellName:
    """Pick zsh or bash from a $SHELL value."""
    value = shell or ""
    if "zsh" in value:
        return "zsh"
    if "bash" in value:
        return "bash"
    raise PreconditionFailure("Unable to detect shell configuration file")


def detect_shell_profile(shell: str | None, home: Path) -> Path:
    """Return the startup file for the given $SHELL value."""
    return home / PROFILE_FILES[detect_shell(shell)]


def source_line(config_file: Path) -> str:
    return f"source {config_file}"


class ShellProfileWriter:
    """Idempotently appends blocks of text to a shell startup file."""

    def __init__(self, profile: Path) -> None:
        self.profile = profile

    def read(self) -> str:
        if not self.profile.is_file():
            return ""
        return self.profile.read_text(encoding="utf-8")

    def contains(self, marker: str) -> bool:
        return marker in self.read()

    def ensure_block(self, marker: str, text: str) -> bool:
        """Append `text` unless `marker` already occurs in the file.

        Returns True when the file was changed.
        """
        if self.contains(marker):
            logger.debug("profile_block_present", profile=str(self.profile), marker=marker)
            return False
        if not text.endswith("\n"):
            text += "\n"
        try:
            self.profile.parent.mkdir(parents=True, exist_ok=True)
            with self.profile.open("a", encoding="utf-8") as fh:
                fh.write(text)
        except OSError as exc:
            raise PreconditionFailure(f"Failed to update {self.profile}") from exc
        logger.debug("profile_block_added", profile=str(self.profile), marker=marker)
        return True

    def install(self, git_function: Path, config_file: Path) -> list[str]:
        """Add the git helper function and the config `source` line.

        Returns the markers of the blocks that were added.
        """
        added: list[str] = []
        if git_function.is_file():
            if self.ensure_block(GIT_FUNCTION_MARKER, git_function.read_text(encoding="utf-8")):
                added.append(GIT_FUNCTION_MARKER)
        else:
            logger.warning("git_function_missing", path=str(git_function))

        line = source_line(config_file)
        if self.ensure_block(line, f"\n{SOURCE_COMMENT}\n{line}\n"):
            added.append(line)
        return added

    def remove(self, config_file: Path) -> bool:
        """Strip the config `source` line and its comment. Returns True if changed."""
        if not self.profile.is_file():
            return False
        line = source_line(config_file)
        lines = self.read().splitlines(keepends=True)
        kept = [ln for ln in lines if ln.rstrip("\n") not in (line, SOURCE_COMMENT)]
        if len(kept) == len(lines):
            return False
        self.profile.write_text("".join(kept), encoding="utf-8")
        logger.debug("profile_block_removed", profile=str(self.profile))
        return True
