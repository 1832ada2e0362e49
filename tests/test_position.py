from __future__ import annotations

import pytest

from textcode.buffer import (
    Caret,
    caret_to_offset,
    line_bounds,
    offset_to_caret,
    resolve_caret,
)

SAMPLES = [
    "",
    "plain",
    "a\tb\n\t\tc\n\nxyz",
    "\t{\n\t\treturn 1;\n\t}\n",
]


def test_offset_to_caret_expands_tabs() -> None:
    caret = offset_to_caret("\t\tX", 2)

    assert caret == Caret(line=1, column=9, char_index=2)


def test_offset_to_caret_empty_buffer() -> None:
    assert offset_to_caret("", 0) == Caret(line=1, column=1, char_index=0)


def test_offset_to_caret_counts_lines() -> None:
    caret = offset_to_caret("ab\ncd", 4)

    assert (caret.line, caret.column) == (2, 2)


def test_offset_to_caret_custom_tab_width() -> None:
    assert offset_to_caret("\tX", 1, tab_width=8).column == 9


def test_caret_to_offset_clamps_column_to_line_end() -> None:
    assert caret_to_offset("ab\ncd", 1, 99) == 2


def test_caret_to_offset_clamps_line_to_end_of_text() -> None:
    assert caret_to_offset("ab\ncd", 5, 1) == 5


def test_caret_to_offset_line_below_one_uses_first_line() -> None:
    assert caret_to_offset("ab\ncd", 0, 2) == 1


@pytest.mark.parametrize(
    ("column", "expected"),
    [(1, 0), (2, 1), (3, 1), (5, 1), (6, 2)],
)
def test_caret_to_offset_mid_tab_resolves_forward(column: int, expected: int) -> None:
    assert caret_to_offset("\tX", 1, column) == expected


@pytest.mark.parametrize("text", SAMPLES)
def test_offset_round_trip(text: str) -> None:
    for offset in range(len(text) + 1):
        caret = offset_to_caret(text, offset)
        assert caret_to_offset(text, caret.line, caret.column) == offset


def test_resolve_caret_reports_clamped_position() -> None:
    caret = resolve_caret("ab\ncd", 2, 40)

    assert caret == Caret(line=2, column=3, char_index=5)


def test_line_bounds() -> None:
    assert line_bounds("ab\ncd\nef", 4) == (3, 5)
    assert line_bounds("ab\ncd\nef", 8) == (6, 8)
