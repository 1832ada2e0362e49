"""Editor session tying pages, history, indentation, and selection together."""

from __future__ import annotations

import time
from contextlib import AbstractContextManager, contextmanager
from typing import Any, Callable, ContextManager, Iterable, Iterator, Mapping, Optional, Union

from textcode.buffer import (
    BufferMirror,
    Caret,
    HistoryManager,
    PageContainer,
    Selection,
    Snapshot,
    caret_to_offset,
    line_count,
    offset_to_caret,
)
from textcode.config import EditorConfig
from textcode.indent import auto_indent, beautify_buffer
from textcode.runtime import telemetry
from textcode.selectors import find_next, find_previous, select_bracket_span

from .bus import EventBus
from .keys import TypingTracker

InitialContent = Union[str, Iterable[Mapping[str, Any]]]


class EditTransaction(AbstractContextManager["EditTransaction"]):
    """Wraps one edit: history bookkeeping before, notifications after."""

    def __init__(self, session: "EditorSession", label: str, *, force: bool) -> None:
        self.session = session
        self.label = label
        self.force = force
        self.changed = False
        self._before: Snapshot | None = None
        self._span_cm: Optional[ContextManager[object]] = None

    def __enter__(self) -> "EditTransaction":
        self._before = self.session.snapshot()
        self._span_cm = telemetry.span(
            name=f"editor::{self.label}",
            component="editor",
            metadata={"page": self.session.page_index, "force": self.force},
        )
        self._span_cm.__enter__()
        return self

    def commit(self, text: str, caret_offset: int) -> None:
        assert self._before is not None
        if text == self._before.content and caret_offset == self._before.caret.char_index:
            return
        if text != self._before.content:
            self.session.history.record_edit(self._before, force=self.force)
            self.changed = True
        self.session._set_state(text, caret_offset)

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        if exc_type is None and self.changed:
            self.session._emit_input()
        return False


class EditorSession:
    """One embedded code editor: pages of text plus caret and selection."""

    def __init__(
        self,
        initial: InitialContent = "",
        *,
        title: Optional[str] = None,
        config: Optional[EditorConfig] = None,
        clock: Callable[[], float] = time.monotonic,
        bus: Optional[EventBus] = None,
    ) -> None:
        self.config = config or EditorConfig()
        self.bus = bus or EventBus()
        self.typing = TypingTracker()
        if isinstance(initial, str):
            self.pages = PageContainer(config=self.config, clock=clock)
            self.pages.active.content = initial
            if title is not None:
                self.pages.rename(title)
        else:
            self.pages = PageContainer.from_values(initial, config=self.config, clock=clock)
        self.pages.subscribe(lambda change: self.bus.emit("pagechange", change.as_dict()))
        self.selection: Optional[Selection] = None
        self._caret = self._caret_at(0)

    # -- state -------------------------------------------------------------

    @property
    def text(self) -> str:
        return self.pages.active.content

    @property
    def caret(self) -> Caret:
        return self._caret

    @property
    def history(self) -> HistoryManager:
        return self.pages.active.history

    @property
    def page_index(self) -> int:
        return self.pages.active_index

    @property
    def title(self) -> str:
        return self.pages.active.title

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    @property
    def value(self) -> str:
        return self.text

    @value.setter
    def value(self, text: str) -> None:
        self.set_value(text)

    @property
    def values(self) -> list[dict[str, str]]:
        return self.pages.values()

    @values.setter
    def values(self, values: Iterable[Mapping[str, Any]]) -> None:
        self.replace_pages(values)

    @property
    def values_index(self) -> int:
        return self.page_index

    @values_index.setter
    def values_index(self, index: int) -> None:
        if not self.switch_page(index):
            telemetry.record_event(
                "page.invalid_index", level="warning", data={"index": index}
            )

    def snapshot(self) -> Snapshot:
        return Snapshot(content=self.text, caret=self._caret)

    def mirror(self, *, attributes: Optional[dict[str, str]] = None) -> BufferMirror:
        return BufferMirror(
            text=self.text,
            caret=self._caret,
            selection=self.selection,
            can_undo=self.can_undo,
            can_redo=self.can_redo,
            page_index=self.page_index,
            page_title=self.title,
            attributes=dict(attributes or {}),
        )

    def _caret_at(self, offset: int) -> Caret:
        return offset_to_caret(self.text, offset, tab_width=self.config.tab_width)

    def _set_state(self, text: str, caret_offset: int) -> None:
        self.pages.active.content = text
        self._caret = self._caret_at(caret_offset)
        self.selection = None

    def _restore(self, state: Snapshot) -> None:
        self.pages.active.content = state.content
        offset = caret_to_offset(
            state.content, state.caret.line, state.caret.column, tab_width=self.config.tab_width
        )
        self._caret = self._caret_at(offset)
        self.selection = None

    def _emit_input(self) -> None:
        self.bus.emit("input", self.text)
        self._emit_history()

    def _emit_history(self) -> None:
        self.bus.emit("history", {"can_undo": self.can_undo, "can_redo": self.can_redo})

    def _selected_range(self) -> tuple[int, int]:
        if self.selection is not None:
            return self.selection
        offset = self._caret.char_index
        return offset, offset

    def edit(self, label: str, *, force: bool = False) -> EditTransaction:
        return EditTransaction(self, label, force=force)

    # -- edits -------------------------------------------------------------

    def insert_text(self, text: str) -> None:
        """Type ``text`` at the caret, replacing the selection."""

        start, end = self._selected_range()
        with self.edit("insert_text") as tx:
            current = self.text
            tx.commit(current[:start] + text + current[end:], start + len(text))
        self.typing.note_text(text)

    def delete_backward(self) -> None:
        start, end = self._selected_range()
        if start == end:
            start = max(0, start - 1)
        with self.edit("delete_backward") as tx:
            current = self.text
            tx.commit(current[:start] + current[end:], start)
        self.typing.note("")

    def insert_tab(self) -> None:
        start, end = self._selected_range()
        with self.edit("insert_tab", force=True) as tx:
            current = self.text
            tx.commit(current[:start] + "\t" + current[end:], start + 1)
        self.typing.note("\t")

    def press_enter(self) -> None:
        with self.edit("newline", force=True) as tx:
            result = auto_indent(
                self.text,
                self._caret.char_index,
                last_typed=self.typing.last,
                second_last_typed=self.typing.second_last,
                tab_width=self.config.tab_width,
            )
            tx.commit(result.text, result.caret.char_index)
        self.typing.note("\n")

    def paste(self, text: str) -> None:
        start, end = self._selected_range()
        with self.edit("paste", force=True) as tx:
            current = self.text
            tx.commit(current[:start] + text + current[end:], start + len(text))
        self.typing.reset()

    def replace_all(self, text: str) -> None:
        with self.edit("replace_all", force=True) as tx:
            tx.commit(text, 0)
        self.typing.reset()

    def set_value(self, text: object) -> None:
        """Replace the active page programmatically, caret at the end."""

        value = text if isinstance(text, str) else str(text)
        with self.edit("set_value", force=True) as tx:
            tx.commit(value, len(value))
        self.typing.reset()

    def beautify(self) -> None:
        with self.edit("beautify", force=True) as tx:
            result = beautify_buffer(
                self.text, self._caret.char_index, tab_width=self.config.tab_width
            )
            tx.commit(result.text, result.caret.char_index)
        telemetry.record_event(
            "editor.beautify",
            level="debug",
            data={"page": self.page_index, "lines": line_count(self.text)},
        )

    def undo(self) -> bool:
        state = self.history.undo(self.snapshot())
        if state is None:
            return False
        self._restore(state)
        self._emit_input()
        return True

    def redo(self) -> bool:
        state = self.history.redo(self.snapshot())
        if state is None:
            return False
        self._restore(state)
        self._emit_input()
        return True

    def process_timeouts(self) -> bool:
        """Let expired debounce windows commit; hosts call this periodically."""

        committed = False
        for page in self.pages.pages:
            committed = page.history.process_timeouts() or committed
        if committed:
            self._emit_history()
        return committed

    def flush_history(self) -> bool:
        committed = self.history.flush()
        if committed:
            self._emit_history()
        return committed

    # -- caret and selection -----------------------------------------------

    def set_caret(self, offset: int) -> Caret:
        """Host-driven caret placement (a click); resets typing hints."""

        self._caret = self._caret_at(offset)
        self.selection = None
        self.typing.reset()
        return self._caret

    def place_caret(self, line: int, column: int) -> Caret:
        offset = caret_to_offset(self.text, line, column, tab_width=self.config.tab_width)
        return self.set_caret(offset)

    def move_caret(self, direction: str) -> Caret:
        offset = self._caret.char_index
        if direction == "left":
            target = max(0, offset - 1)
        elif direction == "right":
            target = min(len(self.text), offset + 1)
        elif direction in {"up", "down"}:
            line = self._caret.line + (-1 if direction == "up" else 1)
            if line < 1:
                target = 0
            else:
                target = caret_to_offset(
                    self.text, line, self._caret.column, tab_width=self.config.tab_width
                )
        else:
            raise ValueError(f"Unknown caret direction '{direction}'")
        self._caret = self._caret_at(target)
        self.selection = None
        self.typing.note("")
        return self._caret

    def select_all(self) -> Selection:
        self.selection = (0, len(self.text))
        self._caret = self._caret_at(len(self.text))
        return self.selection

    def select_bracket(self) -> Optional[Selection]:
        span = select_bracket_span(self.text, self._caret.char_index)
        if span is None:
            return None
        self.selection = span
        self._caret = self._caret_at(span[1])
        return span

    def selected_text(self) -> str:
        start, end = self._selected_range()
        return self.text[start:end]

    def find_next(self, query: str) -> Optional[int]:
        found = find_next(self.text, query, self._caret.char_index)
        if found is not None:
            self.set_caret(found)
        return found

    def find_previous(self, query: str) -> Optional[int]:
        found = find_previous(self.text, query, self._caret.char_index)
        if found is not None:
            self.set_caret(found)
        return found

    def go_to_line(self, line: object) -> bool:
        try:
            number = int(line)  # type: ignore[call-overload]
        except (TypeError, ValueError):
            return False
        if number < 1 or number > line_count(self.text):
            return False
        self.place_caret(number, 1)
        return True

    # -- pages -------------------------------------------------------------

    def switch_page(self, index: int) -> bool:
        state = self.pages.switch_to(index, current=self.snapshot())
        if state is None:
            return False
        self._restore(state)
        self.typing.reset()
        self._emit_history()
        return True

    def next_page(self) -> int:
        """Move to the next page, creating ``Untitled N`` past the last one."""

        if self.page_index >= len(self.pages) - 1:
            title = f"{self.config.default_title} {len(self.pages) + 1}"
            self.pages.append("", title)
        self.switch_page(self.page_index + 1)
        return self.page_index

    def previous_page(self) -> int:
        if self.page_index > 0:
            self.switch_page(self.page_index - 1)
        return self.page_index

    def add_page(self, content: str = "", title: Optional[str] = None) -> int:
        return self.pages.append(content, title)

    def rename_page(self, title: str) -> None:
        self.pages.rename(title)

    def replace_pages(self, values: Iterable[Mapping[str, Any]]) -> None:
        state = self.pages.replace_all_pages(values)
        self._restore(state)
        self.typing.reset()
        self._emit_history()

    @contextmanager
    def bulk_load(self) -> Iterator["EditorSession"]:
        """Suppress page-change notifications while pages are loaded in bulk."""

        previous = self.pages.initializing
        self.pages.initializing = True
        try:
            yield self
        finally:
            self.pages.initializing = previous

    # -- host notifications ------------------------------------------------

    def commit_change(self) -> None:
        self.bus.emit("change", self.text)

    def request_save(self) -> None:
        self.bus.emit("save", {"values": self.values})

    def request_run(self) -> None:
        self.bus.emit("run", {"value": self.value})

    def request_close(self) -> None:
        self.bus.emit("close", {"value": self.value})


__all__ = ["EditorSession", "EditTransaction", "InitialContent"]
