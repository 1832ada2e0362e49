"""Per-page undo/redo stacks with debounced commits."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from textcode.config import DEFAULT_DEBOUNCE_MS, DEFAULT_HISTORY_LIMIT
from textcode.runtime import telemetry

from .position import Caret


@dataclass(frozen=True, slots=True)
class Snapshot:
    content: str
    caret: Caret

    def same_as(self, other: Optional["Snapshot"]) -> bool:
        if other is None:
            return False
        return (
            self.content == other.content
            and self.caret.line == other.caret.line
            and self.caret.column == other.caret.column
        )


@dataclass(slots=True)
class PendingCommit:
    snapshot: Snapshot
    deadline: float


class HistoryManager:
    """Undo and redo stacks for a single page.

    ``record_edit`` receives the state that is about to be replaced. Forced
    edits are pushed immediately. Ordinary keystrokes remember the first
    pre-edit snapshot and push it once no further edit has arrived for
    ``debounce_ms``; the host polls ``process_timeouts`` to let that happen.
    """

    def __init__(
        self,
        *,
        max_depth: int = DEFAULT_HISTORY_LIMIT,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
        clock: Callable[[], float] = time.monotonic,
        name: str = "page",
    ) -> None:
        if max_depth < 1:
            raise ValueError("max_depth must be positive")
        self.max_depth = max_depth
        self.debounce_ms = debounce_ms
        self.name = name
        self._clock = clock
        self._undo: List[Snapshot] = []
        self._redo: List[Snapshot] = []
        self._pending: Optional[PendingCommit] = None

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    def peek(self) -> Optional[Snapshot]:
        return self._undo[-1] if self._undo else None

    def record_edit(self, snapshot: Snapshot, *, force: bool = False) -> bool:
        """Register an edit; returns True when something was pushed or armed.

        Every ordinary edit restarts the debounce window, even when the state
        it replaces already sits on top of the undo stack.
        """

        if force:
            self.flush()
            return self._commit(snapshot, reason="forced")

        deadline = self._clock() + self.debounce_ms / 1000.0
        if self._pending is None:
            self._pending = PendingCommit(snapshot=snapshot, deadline=deadline)
        else:
            self._pending.deadline = deadline
        return True

    def process_timeouts(self) -> bool:
        """Commit the pending snapshot if its debounce window has elapsed."""

        pending = self._pending
        if pending is None or pending.deadline > self._clock():
            return False
        self._pending = None
        return self._commit(pending.snapshot, reason="debounce")

    def flush(self) -> bool:
        """Commit any pending snapshot right away and disarm the timer."""

        pending = self._pending
        if pending is None:
            return False
        self._pending = None
        return self._commit(pending.snapshot, reason="flush")

    def undo(self, current: Snapshot) -> Optional[Snapshot]:
        self.flush()
        if not self._undo:
            return None
        state = self._undo.pop()
        self._redo.append(current)
        telemetry.record_event(
            "history.undo",
            level="debug",
            data={"page": self.name, "undo": len(self._undo), "redo": len(self._redo)},
        )
        return state

    def redo(self, current: Snapshot) -> Optional[Snapshot]:
        self.flush()
        if not self._redo:
            return None
        state = self._redo.pop()
        self._undo.append(current)
        self._evict()
        telemetry.record_event(
            "history.redo",
            level="debug",
            data={"page": self.name, "undo": len(self._undo), "redo": len(self._redo)},
        )
        return state

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()
        self._pending = None

    def _commit(self, snapshot: Snapshot, *, reason: str) -> bool:
        if snapshot.same_as(self.peek()):
            return False
        self._redo.clear()
        self._undo.append(snapshot)
        self._evict()
        telemetry.record_event(
            "history.commit",
            level="debug",
            data={"page": self.name, "reason": reason, "depth": len(self._undo)},
        )
        return True

    def _evict(self) -> None:
        while len(self._undo) > self.max_depth:
            self._undo.pop(0)


__all__ = ["Snapshot", "PendingCommit", "HistoryManager"]
