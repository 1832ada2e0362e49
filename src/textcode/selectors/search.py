"""Plain substring search with wrap-around."""

from __future__ import annotations

from typing import Optional


def find_next(text: str, query: str, caret_offset: int) -> Optional[int]:
    """Offset of the next ``query`` after the caret, wrapping to the top.

    A match that starts exactly at the caret is skipped so repeated calls
    walk through successive matches.
    """

    if not query:
        return None
    start = caret_offset
    if text[start : start + len(query)] == query:
        start += len(query)
    found = text.find(query, start)
    if found == -1:
        found = text.find(query)
    return None if found == -1 else found


def find_previous(text: str, query: str, caret_offset: int) -> Optional[int]:
    """Offset of the closest ``query`` starting before the caret, wrapping to the end.

    At offset 0 a match sitting right at the caret still counts.
    """

    if not query:
        return None
    end = max(caret_offset - 1, 0)
    found = text.rfind(query, 0, end + len(query))
    if found == -1:
        found = text.rfind(query)
    return None if found == -1 else found


__all__ = ["find_next", "find_previous"]
