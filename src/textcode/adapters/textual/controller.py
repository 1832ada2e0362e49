"""Minimal Textual adapter that wires EditorSession events into UI callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from typing import Callable, Dict, Iterable, Optional

from textcode.buffer import BufferMirror, BufferSync
from textcode.host import EditorSession


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_buffer: Callable[[BufferMirror], None]
    update_status: Callable[[str], None] = _noop
    handle_event: Callable[[str, object | None], None] = _noop
    log: Callable[[str], None] = _noop


class TextualEditorAdapter(BufferSync):
    """Bridges an EditorSession and its bus events to a Textual-friendly surface."""

    EVENTS = ("pagechange", "save", "run", "close", "change")

    def __init__(self, session: EditorSession, hooks: TextualUIHooks) -> None:
        self.session = session
        self.hooks = hooks
        self._commands: Dict[str, Callable[[], object]] = {
            "ENTER": session.press_enter,
            "TAB": session.insert_tab,
            "BACKSPACE": session.delete_backward,
            "LEFT": lambda: session.move_caret("left"),
            "RIGHT": lambda: session.move_caret("right"),
            "UP": lambda: session.move_caret("up"),
            "DOWN": lambda: session.move_caret("down"),
            "CTRL+Z": session.undo,
            "CTRL+Y": session.redo,
            "CTRL+B": session.beautify,
            "CTRL+E": session.select_bracket,
            "CTRL+A": session.select_all,
            "CTRL+S": session.request_save,
            "CTRL+R": session.request_run,
            "CTRL+PAGEUP": session.previous_page,
            "CTRL+PAGEDOWN": session.next_page,
        }
        self._listeners: Dict[str, Callable[[object], None]] = {}
        self._subscribe_events()
        self._refresh_buffer()

    def handle_textual_key(
        self,
        key: str,
        *,
        text: Optional[str] = None,
        modifiers: Iterable[str] = (),
    ) -> bool:
        """Translate a Textual key event into a session call; True when handled."""

        normalized_modifiers = tuple(str(mod).upper() for mod in modifiers)
        token = "+".join(normalized_modifiers + (key.upper(),))
        self._log_state("key ->", key=key, text=text, mods=normalized_modifiers)

        command = self._commands.get(token)
        if command is not None:
            command()
            self.hooks.update_status(token.lower())
        elif text and "CTRL" not in normalized_modifiers:
            self.session.insert_text(text)
        else:
            return False
        self._refresh_buffer()
        return True

    def pull_buffer(self) -> BufferMirror:
        return self.session.mirror()

    def push_host_edit(self, mirror: BufferMirror) -> None:
        """Adopt an edit made by the widget itself (IME, clipboard)."""

        if mirror.text != self.session.text:
            with self.session.edit("host_edit", force=True) as tx:
                tx.commit(mirror.text, mirror.caret.char_index)
        else:
            self.session.set_caret(mirror.caret.char_index)
        self._refresh_buffer()

    def handle_click(self, line: int, column: int) -> None:
        self.session.place_caret(line, column)
        self._refresh_buffer()

    def process_timeouts(self) -> bool:
        """Forward expired debounce windows and refresh undo/redo availability."""

        committed = self.session.process_timeouts()
        if committed:
            self._log_state("timeout ->", committed=True)
            self._refresh_buffer()
        return committed

    def detach(self) -> None:
        """Stop relaying session events; the host calls this on teardown."""

        bus = self.session.bus
        for event, listener in self._listeners.items():
            bus.unsubscribe(event, listener)
        self._listeners.clear()

    def _subscribe_events(self) -> None:
        bus = self.session.bus
        for event in self.EVENTS:
            listener = partial(self._handle_event, event)
            self._listeners[event] = listener
            bus.subscribe(event, listener)

    def _handle_event(self, name: str, payload: object | None) -> None:
        self._log_state("event ->", event=name)
        self.hooks.handle_event(name, payload)
        if name == "pagechange" and isinstance(payload, dict):
            self.hooks.update_status(f"page::{payload.get('title', '')}")

    def _refresh_buffer(self) -> None:
        self.hooks.update_buffer(self.session.mirror())

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = self._state_metadata()
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        self.hooks.log(" ".join(parts))

    def _state_metadata(self) -> Dict[str, object]:
        session = self.session
        return {
            "page": session.page_index,
            "caret": (session.caret.line, session.caret.column),
            "selection": session.selection,
            "pending_history": session.history.has_pending,
            "can_undo": session.can_undo,
            "can_redo": session.can_redo,
        }


__all__ = ["TextualEditorAdapter", "TextualUIHooks"]
