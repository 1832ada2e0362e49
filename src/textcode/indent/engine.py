"""Whole-buffer re-indentation and Enter-key auto-indent."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from textcode.buffer.position import Caret, line_bounds, offset_to_caret, resolve_caret
from textcode.config import DEFAULT_TAB_WIDTH

from .lexer import CLOSERS, CODE, LexState, lex_state_at, scan_line

INDENT = "\t"


@dataclass(frozen=True, slots=True)
class IndentResult:
    text: str
    caret: Caret


def _is_closer(char: str) -> bool:
    return bool(char) and char in CLOSERS


def beautify_lines(lines: List[str], state: LexState = CODE) -> List[str]:
    level = 0
    output: List[str] = []
    for line in lines:
        trimmed = line.strip()
        if not trimmed:
            output.append("")
            continue

        skip = 0
        if state.is_code and trimmed[0] in CLOSERS:
            level = max(0, level - 1)
            skip = 1

        if state.in_block_comment:
            output.append(line)
        else:
            output.append(INDENT * level + trimmed)

        scan = scan_line(trimmed, state, start=skip)
        level = max(0, scan.apply(level))
        state = scan.final_state
    return output


def beautify(text: str) -> str:
    """Re-indent every line by bracket depth, one tab per level.

    Block comment bodies are emitted untouched and blank lines come out empty.
    """

    return "\n".join(beautify_lines(text.split("\n")))


def beautify_buffer(
    text: str, caret_offset: int, *, tab_width: int = DEFAULT_TAB_WIDTH
) -> IndentResult:
    """Beautify ``text`` and map the caret to the same (line, column) afterwards."""

    before = offset_to_caret(text, caret_offset, tab_width=tab_width)
    result = beautify(text)
    caret = resolve_caret(result, before.line, before.column, tab_width=tab_width)
    return IndentResult(text=result, caret=caret)


def leading_tabs(segment: str) -> int:
    return len(segment) - len(segment.lstrip(INDENT))


def auto_indent(
    text: str,
    caret_offset: int,
    *,
    last_typed: str = "",
    second_last_typed: str = "",
    tab_width: int = DEFAULT_TAB_WIDTH,
) -> IndentResult:
    """Split the caret's line at the caret and indent the new line.

    The new line starts at the indent of the current line. After an opening
    bracket, or right after a closing bracket was typed, the bracket balance
    of the text before the caret is added. A closing bracket that moves onto
    the new line pulls it back one level, and a closer just typed on an
    over-indented line loses one leading tab on that line.
    """

    caret_offset = max(0, min(caret_offset, len(text)))
    start, end = line_bounds(text, caret_offset)
    before = text[start:caret_offset]
    after = text[caret_offset:end]

    scan = scan_line(before, lex_state_at(text, start))
    typed_closer = _is_closer(last_typed) or _is_closer(second_last_typed)

    level = leading_tabs(before)
    if typed_closer or scan.ends_with_opener(len(before)):
        level += scan.openers - scan.closers

    stripped_after = after.strip()
    if stripped_after and stripped_after[0] in CLOSERS:
        level = max(0, level - 1)
    level = max(0, level)

    if typed_closer and scan.closers > scan.openers and before.startswith(INDENT):
        before = before[1:]

    indent = INDENT * level
    updated = text[:start] + before + "\n" + indent + after + text[end:]
    caret = offset_to_caret(
        updated, start + len(before) + 1 + len(indent), tab_width=tab_width
    )
    return IndentResult(text=updated, caret=caret)


__all__ = [
    "INDENT",
    "IndentResult",
    "auto_indent",
    "beautify",
    "beautify_buffer",
    "beautify_lines",
    "leading_tabs",
]
