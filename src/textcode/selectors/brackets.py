"""Bracket-pair selection around the caret."""

from __future__ import annotations

from typing import Optional

from textcode.buffer.sync import Selection

BRACKET_PAIRS = {
    "{": "}",
    "[": "]",
    "(": ")",
    "<": ">",
    "}": "{",
    "]": "[",
    ")": "(",
    ">": "<",
}
OPENING = frozenset("{[(<")


def is_bracket(char: str) -> bool:
    return char in BRACKET_PAIRS


def find_anchor(text: str, caret_offset: int) -> Optional[int]:
    """Prefer the bracket just before the caret, then the one under it."""

    if 0 < caret_offset <= len(text) and is_bracket(text[caret_offset - 1]):
        return caret_offset - 1
    if 0 <= caret_offset < len(text) and is_bracket(text[caret_offset]):
        return caret_offset
    return None


def find_match(text: str, anchor: int) -> Optional[int]:
    target = text[anchor]
    complement = BRACKET_PAIRS[target]
    step = 1 if target in OPENING else -1
    count = 1
    index = anchor + step
    while 0 <= index < len(text):
        char = text[index]
        if char == target:
            count += 1
        elif char == complement:
            count -= 1
        if count == 0:
            return index
        index += step
    return None


def select_bracket_span(text: str, caret_offset: int) -> Optional[Selection]:
    """Return ``(start, end)`` covering both brackets, or None without a match.

    Brackets are taken literally, including ones inside strings or comments.
    """

    anchor = find_anchor(text, caret_offset)
    if anchor is None:
        return None
    match = find_match(text, anchor)
    if match is None:
        return None
    return (min(anchor, match), max(anchor, match) + 1)


__all__ = [
    "BRACKET_PAIRS",
    "find_anchor",
    "find_match",
    "is_bracket",
    "select_bracket_span",
]
