"""Cell-width measurement for styled terminal text.

Escape sequences occupy no cells and East Asian wide characters occupy two,
so table columns line up whatever characters worktree and branch names use.
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterator

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_STOP = 8


def char_cells(ch: str, col: int) -> int:
    """Cells taken by ``ch`` when printed at column ``col``."""
    if ch == "\t":
        return TAB_STOP - col % TAB_STOP
    if unicodedata.combining(ch):
        return 0
    return 2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1


def _tokens(text: str) -> Iterator[tuple[str, int]]:
    """Yield ``(chunk, cells)`` pairs; escapes come through whole with zero cells."""
    col = 0
    pos = 0
    while pos < len(text):
        match = ANSI_ESCAPE_RE.match(text, pos) if text[pos] == "\x1b" else None
        if match:
            yield match.group(0), 0
            pos = match.end()
            continue
        ch = text[pos]
        cells = char_cells(ch, col)
        # Tabs become spaces so later clipping stays cell-accurate.
        yield (" " * cells if ch == "\t" else ch), cells
        col += cells
        pos += 1


def display_width(text: str) -> int:
    return sum(cells for _chunk, cells in _tokens(text))


def pad_to_width(text: str, width: int) -> str:
    """Right-pad ``text`` with spaces to ``width`` cells."""
    return text + " " * max(0, width - display_width(text))


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Cut ``text`` to at most ``max_cols`` cells, keeping escapes before the cut.

    A wide character that would straddle the edge is dropped entirely.
    """
    if max_cols <= 0:
        return ""
    kept: list[str] = []
    used = 0
    for chunk, cells in _tokens(text):
        if cells and used + cells > max_cols:
            break
        kept.append(chunk)
        used += cells
    return "".join(kept)
