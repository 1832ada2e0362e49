"""Ordered page collection with per-page history."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, List, Mapping, Optional

from textcode.config import EditorConfig
from textcode.runtime import telemetry

from .position import Caret, offset_to_caret
from .sync import EditorValidationError
from .undo import HistoryManager, Snapshot

PageListener = Callable[["PageChange"], None]


@dataclass(frozen=True, slots=True)
class PageChange:
    index: int
    title: str
    content: str

    def as_dict(self) -> dict[str, object]:
        return {"index": self.index, "title": self.title, "content": self.content}


@dataclass(slots=True)
class Page:
    title: str
    content: str
    history: HistoryManager
    last_state: Optional[Snapshot] = None

    def restore_state(self, tab_width: int) -> Snapshot:
        if self.last_state is not None and self.last_state.content == self.content:
            return self.last_state
        return Snapshot(
            content=self.content, caret=offset_to_caret(self.content, 0, tab_width=tab_width)
        )


@dataclass(slots=True)
class PageContainer:
    """Owns the pages of one editor and the index of the active one."""

    config: EditorConfig = field(default_factory=EditorConfig)
    clock: Callable[[], float] = time.monotonic
    pages: List[Page] = field(default_factory=list)
    active_index: int = 0
    initializing: bool = False
    _listeners: List[PageListener] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.pages:
            self.pages.append(self.new_page("", self.config.default_title))

    @classmethod
    def from_values(
        cls,
        values: Iterable[Mapping[str, Any]],
        *,
        config: Optional[EditorConfig] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> "PageContainer":
        container = cls(config=config or EditorConfig(), clock=clock)
        container.pages = [container._page_from_value(value) for value in values]
        if not container.pages:
            container.pages.append(container.new_page("", container.config.default_title))
        return container

    @property
    def active(self) -> Page:
        return self.pages[self.active_index]

    def __len__(self) -> int:
        return len(self.pages)

    def subscribe(self, listener: PageListener) -> None:
        self._listeners.append(listener)

    def new_page(self, content: str = "", title: Optional[str] = None) -> Page:
        page_title = title if title is not None else self.config.default_title
        return Page(
            title=page_title,
            content=content,
            history=HistoryManager(
                max_depth=self.config.history_limit,
                debounce_ms=self.config.debounce_ms,
                clock=self.clock,
                name=page_title,
            ),
        )

    def append(self, content: str = "", title: Optional[str] = None) -> int:
        self.pages.append(self.new_page(content, title))
        return len(self.pages) - 1

    def switch_to(
        self, index: int, *, current: Optional[Snapshot] = None
    ) -> Optional[Snapshot]:
        """Activate ``index`` and return the state the host should display.

        ``current`` is the outgoing page's live (content, caret); it is stored
        on that page before the switch. Out-of-range indices are ignored.
        """

        if index < 0 or index >= len(self.pages):
            return None
        previous = self.active_index
        outgoing = self.pages[previous]
        outgoing.history.flush()
        if current is not None:
            outgoing.content = current.content
            outgoing.last_state = current

        self.active_index = index
        incoming = self.pages[index]
        state = incoming.restore_state(self.config.tab_width)
        if index != previous:
            telemetry.record_event(
                "page.switch", data={"from": previous, "to": index, "title": incoming.title}
            )
            self._notify()
        return state

    def replace_all_pages(self, values: Iterable[Mapping[str, Any]]) -> Snapshot:
        pages = [self._page_from_value(value) for value in values]
        if not pages:
            raise EditorValidationError("At least one page is required", value=pages)
        for page in self.pages:
            page.history.clear()
        previous = self.active_index
        self.pages = pages
        self.active_index = 0
        telemetry.record_event("pages.replace", data={"count": len(pages)})
        if previous != 0:
            self._notify()
        return self.active.restore_state(self.config.tab_width)

    def rename(self, title: str, index: Optional[int] = None) -> None:
        if not isinstance(title, str):
            raise EditorValidationError("Page title must be a string", value=title)
        page = self.pages[self.active_index if index is None else index]
        page.title = title
        page.history.name = title

    def values(self) -> list[dict[str, str]]:
        return [{"title": page.title, "content": page.content} for page in self.pages]

    def _page_from_value(self, value: Mapping[str, Any]) -> Page:
        try:
            title = value["title"]
            content = value["content"]
        except (KeyError, TypeError) as exc:
            raise EditorValidationError(
                "Page entries need 'title' and 'content'", value=value
            ) from exc
        if not isinstance(title, str) or not isinstance(content, str):
            raise EditorValidationError("Page title and content must be strings", value=value)
        return self.new_page(content, title)

    def _notify(self) -> None:
        if self.initializing:
            return
        page = self.active
        change = PageChange(index=self.active_index, title=page.title, content=page.content)
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception as exc:
                telemetry.log_exception("pagechange listener failed", exc)


__all__ = ["Page", "PageChange", "PageContainer", "PageListener"]
