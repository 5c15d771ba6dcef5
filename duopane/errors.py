"""Error taxonomy for panel, tab, and session operations.

Every error here is recoverable: callers log it, surface a one-line message,
and keep the panel's previous state.
"""

from __future__ import annotations

from pathlib import Path

FORMAT_TOKEN_LIMIT = 8


class DuopaneError(Exception):
    """Base class for recoverable duopane failures."""


class FormatError(DuopaneError):
    """A display-format string could not be compiled."""

    def __init__(self, token: str, message: str | None = None) -> None:
        self.token = token[:FORMAT_TOKEN_LIMIT]
        if message is None:
            message = f"Unknown tag on display format: {self.token}"
        super().__init__(message)


class DirectoryReadError(DuopaneError):
    """The entry provider could not list a directory."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read directory contents: {path}: {reason}")


class ChdirError(DuopaneError):
    """A directory change or symlink resolution failed; nothing was switched."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot change directory to {path}: {reason}")


class SessionRestoreError(DuopaneError):
    """One section of a tab session file is malformed."""

    def __init__(self, section: str, reason: str) -> None:
        self.section = section
        self.reason = reason
        super().__init__(f"Error restoring the tabs ({section}): {reason}")


class PatternError(DuopaneError):
    """A select/unselect pattern does not compile."""

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Bad pattern {pattern!r}: {reason}")


__all__ = [
    "DuopaneError",
    "FormatError",
    "DirectoryReadError",
    "ChdirError",
    "SessionRestoreError",
    "PatternError",
]
