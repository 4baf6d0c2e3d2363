"""Interactive session state machine.

``update`` is a pure transition ``(state, event) -> (state, command)``. State
is immutable; every transition returns a replacement. Commands describe the
git work the runtime must perform off the main loop; their completion comes
back as another event.

Cursor and selection are positions into ``entries``. Positions are only
valid for the collection they were taken from, so every transition that
replaces or shrinks ``entries`` repairs both explicitly.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field, replace

from .worktrees import Entry

logger = logging.getLogger(__name__)


class Phase(enum.Enum):
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class SessionState:
    entries: tuple[Entry, ...] = ()
    cursor: int = 0
    selected: frozenset[int] = field(default_factory=frozenset)
    error_message: str | None = None
    phase: Phase = Phase.LOADING

    @property
    def selected_entries(self) -> tuple[Entry, ...]:
        return tuple(self.entries[index] for index in self.selected)


# Events


@dataclass(frozen=True)
class RefreshRequested:
    pass


@dataclass(frozen=True)
class ListSucceeded:
    entries: tuple[Entry, ...]


@dataclass(frozen=True)
class ListFailed:
    message: str


@dataclass(frozen=True)
class CursorUp:
    pass


@dataclass(frozen=True)
class CursorDown:
    pass


@dataclass(frozen=True)
class ToggleSelection:
    pass


@dataclass(frozen=True)
class DeleteRequested:
    force: bool = False


@dataclass(frozen=True)
class DeleteSucceeded:
    removed: tuple[Entry, ...]


@dataclass(frozen=True)
class DeleteFailed:
    message: str


@dataclass(frozen=True)
class QuitRequested:
    pass


Event = (
    RefreshRequested
    | ListSucceeded
    | ListFailed
    | CursorUp
    | CursorDown
    | ToggleSelection
    | DeleteRequested
    | DeleteSucceeded
    | DeleteFailed
    | QuitRequested
)


# Commands


@dataclass(frozen=True)
class ListWorktrees:
    pass


@dataclass(frozen=True)
class DeleteWorktrees:
    """Remove each target worktree and then its branch, stopping at the first failure."""

    targets: tuple[Entry, ...]
    force: bool = False


@dataclass(frozen=True)
class Quit:
    pass


Command = ListWorktrees | DeleteWorktrees | Quit


def initial_state() -> SessionState:
    return SessionState()


def clamp_cursor(cursor: int, count: int) -> int:
    """Clamp ``cursor`` into ``[0, count - 1]``; empty collections give 0."""
    return max(0, min(cursor, count - 1))


def _clear_error(state: SessionState) -> SessionState:
    if state.error_message is None and state.phase is not Phase.ERROR:
        return state
    phase = Phase.READY if state.phase is Phase.ERROR else state.phase
    return replace(state, error_message=None, phase=phase)


def _refresh(state: SessionState) -> tuple[SessionState, Command]:
    return replace(state, error_message=None, phase=Phase.LOADING), ListWorktrees()


def _apply_listing(state: SessionState, entries: tuple[Entry, ...]) -> SessionState:
    return replace(
        state,
        entries=entries,
        selected=frozenset(),
        cursor=clamp_cursor(state.cursor, len(entries)),
        phase=Phase.READY,
    )


def _drop_removed(state: SessionState, removed: tuple[Entry, ...]) -> SessionState:
    """Locally remove deleted entries, remapping surviving selections."""
    gone = set(removed)
    kept: list[Entry] = []
    remap: dict[int, int] = {}
    for index, entry in enumerate(state.entries):
        if entry in gone:
            continue
        remap[index] = len(kept)
        kept.append(entry)
    selected = frozenset(remap[index] for index in state.selected if index in remap)
    return replace(
        state,
        entries=tuple(kept),
        selected=selected,
        cursor=clamp_cursor(state.cursor, len(kept)),
    )


def update(state: SessionState, event: Event) -> tuple[SessionState, Command | None]:
    """Apply one event and return the next state plus any follow-up command."""
    if isinstance(event, RefreshRequested):
        return _refresh(state)

    if isinstance(event, ListSucceeded):
        logger.debug("listing replaced %d entries with %d", len(state.entries), len(event.entries))
        return _apply_listing(state, tuple(event.entries)), None

    if isinstance(event, ListFailed):
        logger.debug("listing failed: %s", event.message)
        return replace(state, error_message=event.message, phase=Phase.ERROR), None

    if isinstance(event, CursorUp):
        if state.cursor <= 0:
            return _clear_error(state), None
        return replace(_clear_error(state), cursor=state.cursor - 1), None

    if isinstance(event, CursorDown):
        if state.cursor >= len(state.entries) - 1:
            return _clear_error(state), None
        return replace(_clear_error(state), cursor=state.cursor + 1), None

    if isinstance(event, ToggleSelection):
        if not state.entries:
            return _clear_error(state), None
        selected = state.selected ^ {state.cursor}
        return replace(_clear_error(state), selected=frozenset(selected)), None

    if isinstance(event, DeleteRequested):
        if not state.selected:
            return state, None
        targets = state.selected_entries
        logger.debug("deleting %s (force=%s)", [entry.name for entry in targets], event.force)
        return _clear_error(state), DeleteWorktrees(targets=targets, force=event.force)

    if isinstance(event, DeleteSucceeded):
        # The local removal keeps the view sane until git's own listing arrives.
        return _refresh(_drop_removed(state, event.removed))

    if isinstance(event, DeleteFailed):
        logger.debug("delete failed: %s", event.message)
        return replace(state, error_message=event.message, phase=Phase.ERROR), None

    if isinstance(event, QuitRequested):
        return state, Quit()

    raise TypeError(f"unknown session event: {event!r}")
