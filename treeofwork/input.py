"""Raw keyboard decoding and key bindings.

Bytes from the tty become key tokens (``"UP"``, ``"ENTER_CR"``, ``"q"`` ...),
and tokens become session events through ``KEY_EVENTS``.
"""

from __future__ import annotations

import os
import select

from .session import (
    CursorDown,
    CursorUp,
    DeleteRequested,
    Event,
    QuitRequested,
    RefreshRequested,
    ToggleSelection,
)

ESC_SEQUENCE_TIMEOUT_MS = 25

# Bytes read past the end of a lone ESC, replayed by the next read_key call.
_PENDING_BYTES: list[bytes] = []

CONTROL_KEYS = {
    b"\x03": "CTRL_C",
    b"\r": "ENTER_CR",
    b"\n": "ENTER_LF",
}

# Final byte of ``ESC [ x`` and ``ESC O x`` (application cursor mode).
ARROW_KEYS = {
    b"A": "UP",
    b"B": "DOWN",
    b"C": "RIGHT",
    b"D": "LEFT",
}

KEY_EVENTS: dict[str, Event] = {
    "q": QuitRequested(),
    "CTRL_C": QuitRequested(),
    "UP": CursorUp(),
    "k": CursorUp(),
    "DOWN": CursorDown(),
    "j": CursorDown(),
    "ENTER": ToggleSelection(),
    " ": ToggleSelection(),
    "d": DeleteRequested(force=False),
    "D": DeleteRequested(force=True),
    "r": RefreshRequested(),
}


def event_for_key(key: str) -> Event | None:
    return KEY_EVENTS.get(key)


def _wait_readable(fd: int, timeout_ms: int | None) -> bool:
    if timeout_ms is None:
        return True
    ready, _, _ = select.select([fd], [], [], max(0, timeout_ms) / 1000.0)
    return bool(ready)


def _next_byte(fd: int, timeout_ms: int | None) -> bytes:
    """Return one byte, or ``b""`` on timeout or end of input."""
    if _PENDING_BYTES:
        return _PENDING_BYTES.pop(0)
    if not _wait_readable(fd, timeout_ms):
        return b""
    return os.read(fd, 1)


def _decode_escape(fd: int) -> str:
    introducer = _next_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if introducer not in (b"[", b"O"):
        if introducer:
            _PENDING_BYTES.append(introducer)
        return "ESC"
    final = _next_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    return ARROW_KEYS.get(final, "ESC")


def read_key(fd: int, timeout_ms: int | None = None) -> str:
    """Read one key token, or ``""`` if ``timeout_ms`` passes with no input.

    A lone ESC is reported after a short wait for sequence bytes, so it never
    needs a second key press to arrive.
    """
    ch = _next_byte(fd, timeout_ms)
    if not ch:
        return ""
    if ch in CONTROL_KEYS:
        return CONTROL_KEYS[ch]
    if ch == b"\x1b":
        return _decode_escape(fd)
    return ch.decode("utf-8", errors="replace")
