"""Main interactive event loop for the terminal UI.

Drains background completion events, renders when the state changed, and
turns key presses into session events. All state changes go through
``session.update``; the loop only wires inputs and outputs together.
"""

from __future__ import annotations

import logging

from ..input import event_for_key, read_key
from ..render import render_screen
from ..session import Event, Quit, RefreshRequested, SessionState, update
from ..terminal import TerminalController, terminal_size
from .commands import CommandRunner

logger = logging.getLogger(__name__)

KEY_POLL_TIMEOUT_MS = 50


def run_main_loop(
    state: SessionState,
    terminal: TerminalController,
    stdin_fd: int,
    runner: CommandRunner,
) -> SessionState:
    """Run the session until a quit event arrives and return the final state.

    The initial refresh is issued before the first frame is drawn.
    """
    dirty = True

    def dispatch(event: Event) -> bool:
        """Apply one event; return ``True`` when the session should end."""
        nonlocal state, dirty
        previous = state
        state, command = update(state, event)
        if state is not previous:
            dirty = True
        if isinstance(command, Quit):
            return True
        if command is not None:
            runner.submit(command)
        return False

    with terminal.raw_mode():
        dispatch(RefreshRequested())
        last_size: tuple[int, int] | None = None
        skip_next_lf = False
        while True:
            for event in runner.drain_events():
                dispatch(event)

            size = terminal_size()
            if size != last_size:
                logger.debug("terminal is %d rows x %d columns", size[0], size[1])
                last_size = size
                dirty = True

            if dirty:
                terminal.draw(render_screen(state, size[0], size[1]))
                dirty = False

            try:
                key = read_key(stdin_fd, timeout_ms=KEY_POLL_TIMEOUT_MS)
            except KeyboardInterrupt:
                continue
            if key == "":
                continue
            if skip_next_lf and key == "ENTER_LF":
                skip_next_lf = False
                continue
            skip_next_lf = key == "ENTER_CR"
            if key in {"ENTER_CR", "ENTER_LF"}:
                key = "ENTER"

            event = event_for_key(key)
            if event is None:
                continue
            if dispatch(event):
                break

    return state
