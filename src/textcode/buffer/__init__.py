"""Position model, page storage, and undo/redo data structures."""

from .pages import Page, PageChange, PageContainer
from .position import (
    Caret,
    caret_to_offset,
    line_bounds,
    line_count,
    offset_to_caret,
    resolve_caret,
    visual_width,
)
from .sync import BufferMirror, BufferSync, EditorValidationError, Selection
from .undo import HistoryManager, PendingCommit, Snapshot

__all__ = [
    "Caret",
    "caret_to_offset",
    "offset_to_caret",
    "resolve_caret",
    "line_bounds",
    "line_count",
    "visual_width",
    "HistoryManager",
    "PendingCommit",
    "Snapshot",
    "Page",
    "PageChange",
    "PageContainer",
    "BufferMirror",
    "BufferSync",
    "EditorValidationError",
    "Selection",
]
