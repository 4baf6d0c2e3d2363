"""Runtime composition layer for tree-of-work.

Checks the terminal, builds the initial state and the command runner, and
starts the loop.
"""

from __future__ import annotations

import logging
import os
import sys
import termios

from ..errors import SetupError
from ..git_store import GitStore
from ..session import initial_state
from ..terminal import TerminalController
from .commands import CommandRunner
from .loop import run_main_loop

logger = logging.getLogger(__name__)


def run_session(store: GitStore) -> None:
    """Run the interactive worktree session against ``store``."""
    stdin_fd = sys.stdin.fileno()
    stdout_fd = sys.stdout.fileno()
    if not os.isatty(stdin_fd) or not os.isatty(stdout_fd):
        raise SetupError("tow needs an interactive terminal")
    try:
        terminal = TerminalController(stdin_fd=stdin_fd, stdout_fd=stdout_fd)
    except termios.error as exc:
        raise SetupError(f"cannot configure terminal: {exc}") from exc

    logger.debug("starting session for %s", store.repo_path)
    final_state = run_main_loop(
        state=initial_state(),
        terminal=terminal,
        stdin_fd=stdin_fd,
        runner=CommandRunner(store),
    )
    logger.debug("session ended with %d entries", len(final_state.entries))
