"""Worktree entries parsed from ``git worktree list``.

Turns report lines into immutable ``Entry`` records and orders them by the
modification date of each worktree directory.
"""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass
from pathlib import Path

from .errors import ListingError, ParseError

logger = logging.getLogger(__name__)

DETACHED_TOKEN = "(detached"


@dataclass(frozen=True)
class Entry:
    """One working tree as reported by git."""

    name: str
    revision_id: str
    branch_name: str
    modified_at: str
    path: str = ""


def modified_date(path: str) -> str:
    """Return the last-modified date of ``path`` as ``YYYY-MM-DD``."""
    try:
        mtime = Path(path).stat().st_mtime
    except OSError as exc:
        raise ListingError(f"cannot read modification time of {path}: {exc}") from exc
    return datetime.date.fromtimestamp(mtime).isoformat()


def _branch_from_token(line: str, token: str) -> str:
    if token == DETACHED_TOKEN:
        return ""
    if len(token) >= 3 and token.startswith("[") and token.endswith("]"):
        return token[1:-1]
    raise ParseError(line, f"unexpected branch token {token!r}")


def parse_line(line: str) -> Entry:
    """Parse one ``<path> <revision> [<branch>]`` line.

    Raises ``ParseError`` for lines with fewer than three fields or a path
    without a separator, and ``ListingError`` when the path cannot be stat'ed.
    """
    chunks = line.split()
    if len(chunks) < 3:
        raise ParseError(line, "expected path, revision and branch")
    path, revision_id, branch_token = chunks[0], chunks[1], chunks[2]
    if "/" not in path:
        raise ParseError(line, "path has no directory separator")
    name = path.rstrip("/").rsplit("/", 1)[-1]
    if not name:
        raise ParseError(line, "empty worktree name")

    return Entry(
        name=name,
        revision_id=revision_id,
        branch_name=_branch_from_token(line, branch_token),
        modified_at=modified_date(path),
        path=path,
    )


def sort_entries(entries: list[Entry] | tuple[Entry, ...]) -> tuple[Entry, ...]:
    """Order entries by modification date, oldest first.

    ``sorted`` is stable, so entries sharing a date keep their listing order.
    """
    return tuple(sorted(entries, key=lambda entry: entry.modified_at))


def parse_listing(text: str) -> tuple[Entry, ...]:
    """Parse a full ``git worktree list`` report into an ordered collection.

    The first line describes the bare repository itself and is skipped, as are
    blank lines. Any other malformed line aborts the whole listing.
    """
    entries: list[Entry] = []
    for line in text.splitlines()[1:]:
        if not line.strip():
            continue
        entries.append(parse_line(line))
    logger.debug("parsed %d worktree entries", len(entries))
    return sort_entries(entries)
