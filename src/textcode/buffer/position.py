"""Conversions between linear offsets and tab-aware (line, column) carets."""

from __future__ import annotations

from dataclasses import dataclass

from textcode.config import DEFAULT_TAB_WIDTH


@dataclass(frozen=True, slots=True)
class Caret:
    """Caret location in both representations.

    ``line`` and ``column`` are 1-indexed; ``column`` is a visual column where
    a tab spans ``tab_width`` cells. ``char_index`` is the absolute offset.
    """

    line: int = 1
    column: int = 1
    char_index: int = 0


def char_width(char: str, tab_width: int = DEFAULT_TAB_WIDTH) -> int:
    return tab_width if char == "\t" else 1


def visual_width(segment: str, tab_width: int = DEFAULT_TAB_WIDTH) -> int:
    return sum(char_width(char, tab_width) for char in segment)


def offset_to_caret(
    text: str, offset: int, *, tab_width: int = DEFAULT_TAB_WIDTH
) -> Caret:
    offset = max(0, min(offset, len(text)))
    before = text[:offset]
    line = before.count("\n") + 1
    line_start = before.rfind("\n") + 1
    column = visual_width(before[line_start:], tab_width) + 1
    return Caret(line=line, column=column, char_index=offset)


def column_to_index(line_text: str, column: int, tab_width: int = DEFAULT_TAB_WIDTH) -> int:
    """Return the first index in ``line_text`` whose visual column reaches ``column``."""

    target = column - 1
    width = 0
    for index, char in enumerate(line_text):
        if width >= target:
            return index
        width += char_width(char, tab_width)
    return len(line_text)


def caret_to_offset(
    text: str, line: int, column: int, *, tab_width: int = DEFAULT_TAB_WIDTH
) -> int:
    lines = text.split("\n")
    if line > len(lines):
        return len(text)
    row = max(line, 1) - 1
    offset = sum(len(lines[i]) + 1 for i in range(row))
    return offset + column_to_index(lines[row], column, tab_width)


def resolve_caret(
    text: str, line: int, column: int, *, tab_width: int = DEFAULT_TAB_WIDTH
) -> Caret:
    """Clamp a requested (line, column) and return the caret actually reached."""

    offset = caret_to_offset(text, line, column, tab_width=tab_width)
    return offset_to_caret(text, offset, tab_width=tab_width)


def line_bounds(text: str, offset: int) -> tuple[int, int]:
    """Return ``(start, end)`` offsets of the line containing ``offset``."""

    offset = max(0, min(offset, len(text)))
    start = text.rfind("\n", 0, offset) + 1
    end = text.find("\n", offset)
    return start, len(text) if end == -1 else end


def line_count(text: str) -> int:
    return text.count("\n") + 1


__all__ = [
    "Caret",
    "char_width",
    "visual_width",
    "offset_to_caret",
    "caret_to_offset",
    "column_to_index",
    "resolve_caret",
    "line_bounds",
    "line_count",
]
