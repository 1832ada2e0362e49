"""Bracket lexer and indentation engine."""

from .engine import IndentResult, auto_indent, beautify, beautify_buffer, beautify_lines
from .lexer import CODE, LexState, LineScan, lex_state_at, scan_line, thread_state

__all__ = [
    "CODE",
    "LexState",
    "LineScan",
    "scan_line",
    "thread_state",
    "lex_state_at",
    "IndentResult",
    "auto_indent",
    "beautify",
    "beautify_buffer",
    "beautify_lines",
]
