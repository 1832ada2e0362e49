"""Embeddable plain-text code editing engine."""

from textcode.config import EditorConfig
from textcode.host import EditorSession

__all__ = [
    "adapters",
    "buffer",
    "config",
    "host",
    "indent",
    "runtime",
    "selectors",
    "EditorConfig",
    "EditorSession",
]

__version__ = "0.1.0"
