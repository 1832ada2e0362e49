from __future__ import annotations

import pytest

from textcode.indent import auto_indent, beautify, beautify_buffer

NESTED = "function f() {\nif (x) {\ny();\n}\n}"
NESTED_EXPECTED = "function f() {\n\tif (x) {\n\t\ty();\n\t}\n}"


def test_beautify_indents_by_bracket_depth() -> None:
    assert beautify(NESTED) == NESTED_EXPECTED


def test_beautify_replaces_existing_indentation() -> None:
    messy = "function f() {\n        if (x) {\n  y();\n            }\n   }"

    assert beautify(messy) == NESTED_EXPECTED


@pytest.mark.parametrize(
    "text",
    [
        NESTED,
        "a = [\n1,\n2\n];\n\n  \nb();",
        "/* start\n   keep   { \n end */\nz();",
        "s = `{\n  (\n`;\nq",
        "}}}\n{",
    ],
)
def test_beautify_is_idempotent(text: str) -> None:
    once = beautify(text)

    assert beautify(once) == once


def test_beautify_blank_lines_become_empty() -> None:
    assert beautify("a {\n   \nb\n}") == "a {\n\n\tb\n}"


def test_beautify_ignores_brackets_in_strings() -> None:
    assert beautify('x = "{";\n  y();') == 'x = "{";\ny();'


def test_beautify_ignores_brackets_after_line_comment() -> None:
    assert beautify("a { // }\nb\n}") == "a { // }\n\tb\n}"


def test_beautify_keeps_block_comment_bodies_verbatim() -> None:
    text = "/* start\n   keep   { \n end */\nz();"

    assert beautify(text) == text


def test_beautify_does_not_dedent_inside_multiline_string() -> None:
    assert beautify("s = `{\n  (\n`;\nq") == "s = `{\n(\n`;\nq"


def test_beautify_never_goes_negative() -> None:
    assert beautify("}\n}\nx") == "}\n}\nx"


def test_beautify_buffer_keeps_caret_line_and_column() -> None:
    text = "if (x) {\ny();\n}"
    result = beautify_buffer(text, text.index("y"))

    assert result.text == "if (x) {\n\ty();\n}"
    assert (result.caret.line, result.caret.column) == (2, 1)
    assert result.caret.char_index == 9


def test_enter_after_opening_bracket_indents() -> None:
    result = auto_indent("if (x) {", 8)

    assert result.text == "if (x) {\n\t"
    assert result.caret.char_index == 10
    assert (result.caret.line, result.caret.column) == (2, 5)


def test_enter_between_brackets_aligns_closer() -> None:
    result = auto_indent("\tfoo {}", 6)

    assert result.text == "\tfoo {\n\t}"
    assert result.text[result.caret.char_index] == "}"


def test_enter_keeps_current_indent() -> None:
    result = auto_indent("\t\tx = 1;", 8)

    assert result.text == "\t\tx = 1;\n\t\t"
    assert result.caret.char_index == 11


def test_enter_after_typed_closer_dedents_line() -> None:
    result = auto_indent("\t\t}", 3, last_typed="}")

    assert result.text == "\t}\n\t"
    assert result.caret.char_index == 4


def test_enter_uses_second_last_typed_closer() -> None:
    result = auto_indent("\t\t});", 5, last_typed=";", second_last_typed=")")

    assert result.text == "\t});\n"


def test_enter_without_typing_hint_keeps_indent() -> None:
    assert auto_indent("\t\t}", 3).text == "\t\t}\n\t\t"


def test_enter_ignores_opener_inside_string() -> None:
    assert auto_indent('x = "(', 6).text == 'x = "(\n'


def test_enter_threads_state_from_previous_lines() -> None:
    assert auto_indent("/*\n{", 4).text == "/*\n{\n"


def test_enter_in_middle_of_buffer() -> None:
    result = auto_indent("a {\nb\nc", 5)

    assert result.text == "a {\nb\n\nc"
    assert result.caret.char_index == 6
