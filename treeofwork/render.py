"""Screen rendering for the worktree list.

Everything here is presentation-only and side-effect free: the runtime loop
hands in a session state plus terminal geometry and writes the returned text.
"""

from __future__ import annotations

from collections.abc import Sequence

from .ansi import clip_ansi_line, display_width, pad_to_width
from .session import Phase, SessionState

HEADER_TITLE = "Your worktrees"
LOADING_SUFFIX = " refreshing..."
TABLE_HEADERS: tuple[str, str, str] = ("Worktree", "Branch", "Modified at")
FOOTER = "q: Quit, Enter/Space: Select, d: Delete, D: Force delete, r: Refresh"
MIN_COLUMN_WIDTH = 10
COLUMN_GAP = "  "
# Header, error banner, table header, blank spacer and footer.
CHROME_ROWS = 5
MARKER_WIDTH = len("> [x] ")
ERROR_SGR = "\033[1;31m"
RESET_SGR = "\033[0m"


def data_row_count(terminal_rows: int) -> int:
    """Rows left for table data once the fixed chrome is drawn."""
    return max(1, terminal_rows - CHROME_ROWS)


def visible_window(total: int, cursor: int, data_rows: int) -> tuple[int, int]:
    """Return the half-open ``[start, end)`` range of rows to draw.

    The window is pinned to the top until the cursor would fall below it, then
    slides so the cursor is the last visible row.
    """
    data_rows = max(1, data_rows)
    if total <= data_rows:
        return 0, total
    start = max(0, cursor + 1 - data_rows)
    start = min(start, total - data_rows)
    return start, start + data_rows


def column_widths(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> list[int]:
    widths = [max(MIN_COLUMN_WIDTH, display_width(header)) for header in headers]
    for row in rows:
        for idx, cell in enumerate(row):
            widths[idx] = max(widths[idx], display_width(cell))
    return widths


def format_table(headers: Sequence[str], rows: Sequence[Sequence[str]], width: int) -> list[str]:
    """Lay out ``headers`` and ``rows`` as aligned text lines.

    Column widths come from every row, not just the ones later shown, so the
    table does not jitter while scrolling. Lines are clipped to ``width``.
    """
    widths = column_widths(headers, rows)

    def format_row(cells: Sequence[str]) -> str:
        padded = [pad_to_width(cell, widths[idx]) for idx, cell in enumerate(cells)]
        return clip_ansi_line(COLUMN_GAP.join(padded).rstrip(), width)

    return [format_row(headers), *(format_row(row) for row in rows)]


def _header_line(state: SessionState) -> str:
    total = len(state.entries)
    current = state.cursor + 1 if total else 0
    line = f"{HEADER_TITLE}: [{current}/{total}]"
    if state.phase is Phase.LOADING:
        line += LOADING_SUFFIX
    return line


def _error_line(state: SessionState, columns: int) -> str:
    if not state.error_message:
        return ""
    message = " ".join(state.error_message.split())
    return clip_ansi_line(f"{ERROR_SGR}{message}", columns) + RESET_SGR


def render_screen(state: SessionState, terminal_rows: int, terminal_columns: int) -> str:
    """Render the full screen for ``state`` as newline-separated text."""
    columns = max(1, terminal_columns)
    cells = [(entry.name, entry.branch_name, entry.modified_at) for entry in state.entries]
    table = format_table(TABLE_HEADERS, cells, max(0, columns - MARKER_WIDTH))

    lines = [
        clip_ansi_line(_header_line(state), columns),
        _error_line(state, columns),
        clip_ansi_line(" " * MARKER_WIDTH + table[0], columns),
    ]

    start, end = visible_window(len(cells), state.cursor, data_row_count(terminal_rows))
    for idx in range(start, end):
        cursor = ">" if idx == state.cursor else " "
        checked = "x" if idx in state.selected else " "
        lines.append(clip_ansi_line(f"{cursor} [{checked}] {table[idx + 1]}", columns))

    lines.append("")
    lines.append(clip_ansi_line(FOOTER, columns))
    return "\n".join(lines)
