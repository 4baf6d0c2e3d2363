"""Exception hierarchy for tree-of-work.

Setup errors end the process before the interactive loop starts.
Store and listing errors are recoverable and surface in the error banner.
"""

from __future__ import annotations


class TowError(Exception):
    """Base exception for all tree-of-work errors."""


class SetupError(TowError):
    """Raised when the session cannot be started at all."""


class StoreError(TowError):
    """Raised when a git invocation against the bare repository fails."""

    def __init__(self, command: list[str], message: str) -> None:
        self.command = list(command)
        self.message = message
        super().__init__(message)


class ListingError(TowError):
    """Raised when a refresh cannot produce a worktree collection."""


class ParseError(ListingError):
    """Raised for a non-blank ``git worktree list`` line that cannot be parsed."""

    def __init__(self, line: str, reason: str) -> None:
        self.line = line
        self.reason = reason
        super().__init__(f"cannot parse worktree line {line!r}: {reason}")
