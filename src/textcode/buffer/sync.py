"""Adapter boundary types for syncing the engine with host widgets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Protocol, Tuple

from .position import Caret

Selection = Tuple[int, int]  # [start, end) offsets


@dataclass(slots=True)
class BufferMirror:
    """Host-friendly snapshot describing the current editor state."""

    text: str
    caret: Caret
    selection: Optional[Selection]
    can_undo: bool = False
    can_redo: bool = False
    page_index: int = 0
    page_title: str = ""
    attributes: dict[str, str] = field(default_factory=dict)


class BufferSync(Protocol):
    """Protocol describing how adapters exchange data with the engine."""

    def pull_buffer(self) -> BufferMirror:
        """Return the latest snapshot that the host should render."""
        ...

    def push_host_edit(self, mirror: BufferMirror) -> None:
        """Submit an external edit (e.g., IME insert, clipboard paste) to the engine."""
        ...


class EditorValidationError(RuntimeError):
    """Raised when callers hand the engine input it cannot clamp."""

    def __init__(self, message: str, *, value: object | None = None) -> None:
        super().__init__(message)
        self.value = value


__all__ = ["BufferMirror", "BufferSync", "EditorValidationError", "Selection"]
