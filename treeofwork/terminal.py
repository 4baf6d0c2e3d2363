"""Terminal ownership for the interactive session.

The session runs on the alternate screen with the tty in raw mode; leaving
always restores the shell's screen and the tty settings saved at startup.
"""

from __future__ import annotations

import contextlib
import os
import shutil
import termios
import tty

DEFAULT_COLUMNS = 80
DEFAULT_ROWS = 40

# Alternate screen on, cursor hidden; and the reverse.
ENTER_SCREEN = b"\x1b[?1049h\x1b[?25l"
LEAVE_SCREEN = b"\x1b[?25h\x1b[?1049l"
CURSOR_HOME = "\x1b[H"
CLEAR_TO_EOL = "\x1b[K"
CLEAR_BELOW = "\x1b[J"


def terminal_size() -> tuple[int, int]:
    """Return ``(rows, columns)``; unknown or zero sizes fall back to 40x80."""
    size = shutil.get_terminal_size((DEFAULT_COLUMNS, DEFAULT_ROWS))
    return (size.lines or DEFAULT_ROWS), (size.columns or DEFAULT_COLUMNS)


class TerminalController:
    """Raw-mode and full-screen output for one pair of tty descriptors."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        # Raises termios.error when stdin is not a tty.
        self._saved_tty_state = termios.tcgetattr(stdin_fd)

    def _write(self, payload: bytes) -> None:
        os.write(self.stdout_fd, payload)

    def enable_tui_mode(self) -> None:
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        self._write(ENTER_SCREEN)

    def disable_tui_mode(self) -> None:
        self._write(LEAVE_SCREEN)
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    def draw(self, text: str) -> None:
        """Paint ``text`` over the previous frame.

        Raw mode turns off newline translation, so rows are joined with CRLF
        and each row erases whatever the previous frame left to its right.
        """
        body = "\r\n".join(row + CLEAR_TO_EOL for row in text.split("\n"))
        self._write((CURSOR_HOME + body + CLEAR_BELOW).encode("utf-8", errors="replace"))

    @contextlib.contextmanager
    def raw_mode(self):
        """Hold the terminal in TUI mode for the ``with`` block, even if it raises."""
        self.enable_tui_mode()
        try:
            yield
        finally:
            self.disable_tui_mode()
