"""Background execution of session commands.

Each command runs on its own daemon thread and posts exactly one completion
event to a queue that only the main loop consumes.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from queue import Empty, Queue

from ..errors import ListingError, StoreError
from ..git_store import GitStore
from ..session import (
    Command,
    DeleteFailed,
    DeleteSucceeded,
    DeleteWorktrees,
    Event,
    ListFailed,
    ListSucceeded,
    ListWorktrees,
)
from ..worktrees import parse_listing

logger = logging.getLogger(__name__)


def list_worktrees(store: GitStore) -> Event:
    try:
        entries = parse_listing(store.list_worktrees())
    except (StoreError, ListingError) as exc:
        return ListFailed(str(exc))
    return ListSucceeded(entries)


def delete_worktrees(store: GitStore, command: DeleteWorktrees) -> Event:
    """Remove each target worktree and its branch, stopping at the first failure.

    Targets already removed stay removed when a later one fails.
    """
    try:
        for target in command.targets:
            store.remove_worktree(target.name, force=command.force)
            if target.branch_name:
                store.delete_branch(target.branch_name)
            logger.debug("removed worktree %s", target.name)
    except StoreError as exc:
        return DeleteFailed(str(exc))
    return DeleteSucceeded(command.targets)


def run_command(command: Command, store: GitStore) -> Event:
    """Execute ``command`` synchronously and return its completion event."""
    if isinstance(command, ListWorktrees):
        return list_worktrees(store)
    if isinstance(command, DeleteWorktrees):
        return delete_worktrees(store, command)
    raise TypeError(f"command cannot run in the background: {command!r}")


def _failure_event(command: Command, message: str) -> Event:
    if isinstance(command, DeleteWorktrees):
        return DeleteFailed(message)
    return ListFailed(message)


class CommandRunner:
    """Run commands off the main loop and collect their completion events."""

    def __init__(
        self,
        store: GitStore,
        run: Callable[[Command, GitStore], Event] = run_command,
    ) -> None:
        self._store = store
        self._run = run
        self._events: Queue[Event] = Queue()

    def _worker(self, command: Command) -> None:
        try:
            event = self._run(command, self._store)
        except Exception as exc:
            logger.exception("command %r crashed", command)
            event = _failure_event(command, f"{type(exc).__name__}: {exc}")
        logger.debug("command %s finished with %s", type(command).__name__, type(event).__name__)
        self._events.put(event)

    def submit(self, command: Command) -> None:
        logger.debug("submitting %r", command)
        worker = threading.Thread(
            target=self._worker,
            args=(command,),
            name=f"tow-{type(command).__name__}",
            daemon=True,
        )
        worker.start()

    def drain_events(self) -> list[Event]:
        """Drain all completion events without blocking."""
        events: list[Event] = []
        while True:
            try:
                events.append(self._events.get_nowait())
            except Empty:
                return events

    def wait_event(self, timeout: float | None = None) -> Event | None:
        """Block for the next completion event, or ``None`` on timeout."""
        try:
            return self._events.get(timeout=timeout)
        except Empty:
            return None
