"""Executable Textual app that hosts the editing engine."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Sequence, Tuple

try:  # pragma: no cover - imported only when demo is run
    from rich.text import Text
    from textual import events
    from textual.app import App, ComposeResult
    from textual.containers import Vertical
    from textual.widgets import Footer, Header, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use textcode.adapters.textual.app"
    ) from exc

from textcode.buffer import BufferMirror
from textcode.config import EditorConfig
from textcode.host import EditorSession
from textcode.runtime import telemetry

from .controller import TextualEditorAdapter, TextualUIHooks


def create_default_session(path: Optional[Path] = None) -> EditorSession:
    """Build an EditorSession, optionally seeded with a file's contents."""

    config = EditorConfig.from_env()
    if path is None:
        return EditorSession("", config=config)
    return EditorSession(path.read_text(encoding="utf-8"), title=path.name, config=config)


def render_mirror(mirror: BufferMirror, tab_width: int) -> Text:
    """Render the buffer with tabs expanded and the caret/selection highlighted."""

    text = mirror.text
    caret = mirror.caret.char_index
    start, end = mirror.selection or (caret, caret + 1)
    rendered = Text()
    for offset, char in enumerate(text):
        style = "reverse" if start <= offset < end else ""
        if char == "\n":
            if style:
                rendered.append(" ", style=style)
            rendered.append("\n")
        else:
            rendered.append(" " * tab_width if char == "\t" else char, style=style)
    if mirror.selection is None and caret == len(text):
        rendered.append(" ", style="reverse")
    return rendered


@dataclass
class UIState:
    status_text: str = ""


class TextCodeApp(App[None]):
    """Minimal Textual UI embedding the editing engine."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#buffer-view {
		height: 1fr;
		border: round $accent;
		padding: 1 1;
		content-align: left top;
		overflow: auto;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, *, path: Optional[Path] = None) -> None:
        super().__init__()
        self._state = UIState()
        self._path = path
        self.session: EditorSession | None = None
        self.adapter: TextualEditorAdapter | None = None
        self._buffer_widget: Static | None = None
        self._status_widget: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="buffer-area"):
            self._buffer_widget = Static("", id="buffer-view")
            yield self._buffer_widget
        self._status_widget = Static("", id="status-line")
        yield self._status_widget
        yield Footer()

    async def on_mount(self) -> None:
        self.session = create_default_session(self._path)
        hooks = TextualUIHooks(
            update_buffer=self._update_buffer,
            update_status=self._update_status,
            handle_event=self._handle_event,
        )
        self.adapter = TextualEditorAdapter(self.session, hooks)
        self.set_interval(0.1, self._process_timeouts)

    async def on_unmount(self) -> None:
        if self.adapter:
            self.adapter.detach()

    def _process_timeouts(self) -> None:
        if self.adapter:
            self.adapter.process_timeouts()

    async def on_key(self, event: events.Key) -> None:
        if not self.adapter:
            return
        normalized = self._normalize_key(event)
        if normalized is None:
            return
        key, text, modifiers = normalized
        if self.adapter.handle_textual_key(key, text=text, modifiers=modifiers):
            event.stop()

    def _update_buffer(self, mirror: BufferMirror) -> None:
        if self._buffer_widget and self.session:
            self._buffer_widget.update(render_mirror(mirror, self.session.config.tab_width))
        caret = mirror.caret
        history = f"undo:{int(mirror.can_undo)} redo:{int(mirror.can_redo)}"
        self._update_status(
            f"{mirror.page_title} [{mirror.page_index + 1}]  "
            f"Ln {caret.line}, Col {caret.column}  {history}"
        )

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        if self._status_widget:
            self._status_widget.update(status)

    def _handle_event(self, name: str, payload: Any | None) -> None:
        if name == "save" and self._path and self.session:
            self._path.write_text(self.session.value, encoding="utf-8")
            self._update_status(f"saved {self._path}")

    @staticmethod
    def _normalize_key(
        event: events.Key,
    ) -> Optional[Tuple[str, Optional[str], Tuple[str, ...]]]:
        key = event.key
        if key == "ctrl+q":
            return None
        parts = key.split("+")
        modifiers = tuple(part.upper() for part in parts[:-1])
        base = parts[-1]
        if base in {"enter", "return"}:
            return ("ENTER", None, modifiers)
        if base == "tab":
            return ("TAB", None, modifiers)
        if event.character and len(event.character) == 1 and event.is_printable:
            return (event.character, event.character, ())
        return (base.upper(), None, modifiers)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the textcode Textual demo.")
    parser.add_argument(
        "path",
        nargs="?",
        default=os.environ.get("TEXTCODE_FILE"),
        help="File to open; CTRL+S writes it back",
    )
    parser.add_argument(
        "--log-preset",
        choices=sorted(telemetry.PRESETS),
        default=None,
        help="telelog preset; defaults to TEXTCODE_LOG_PRESET or TEXTCODE_LOG_* settings",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    if args.log_preset:
        telemetry.configure(preset=args.log_preset)
    app = TextCodeApp(path=Path(args.path) if args.path else None)
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
