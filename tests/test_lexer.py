from __future__ import annotations

from textcode.indent import CODE, LexState, lex_state_at, scan_line


def test_brackets_inside_strings_are_ignored() -> None:
    scan = scan_line('foo("}")bar')

    assert scan.net_delta == 0
    assert (scan.openers, scan.closers) == (1, 1)
    assert scan.final_state == CODE


def test_line_comment_stops_counting() -> None:
    assert scan_line("a { // }").net_delta == 1


def test_comment_markers_inside_strings_are_text() -> None:
    scan = scan_line('url = "http://x" + (')

    assert scan.net_delta == 1


def test_all_quote_styles_open_strings() -> None:
    assert scan_line("x = '{' + `(` + \"[\"").net_delta == 0


def test_escaped_quote_does_not_close_string() -> None:
    scan = scan_line('"a\\"{" (')

    assert scan.net_delta == 1
    assert scan.final_state.is_code


def test_escaped_backslash_before_quote_closes_string() -> None:
    assert scan_line('"a\\\\" {').net_delta == 1


def test_block_comment_spans_lines() -> None:
    first = scan_line("/* {")
    assert first.net_delta == 0
    assert first.final_state.in_block_comment

    second = scan_line("} */ )", first.final_state)
    assert second.net_delta == -1
    assert second.final_state == CODE


def test_inline_block_comment() -> None:
    assert scan_line("/* { */ {").net_delta == 1


def test_unterminated_string_stays_open() -> None:
    scan = scan_line("'abc {")

    assert scan.final_state == LexState(in_string=True, string_delim="'")
    assert scan.net_delta == 0


def test_net_delta_is_unclamped_but_depth_is_floored() -> None:
    scan = scan_line(") (")

    assert scan.net_delta == 0
    assert scan.depth == 1
    assert scan.closers_before(1) == 1
    assert scan.openers_before(2) == 0
    assert scan.openers_before(3) == 1


def test_scan_can_start_after_consumed_bracket() -> None:
    assert scan_line("}{", start=1).net_delta == 1


def test_lex_state_at_threads_previous_lines() -> None:
    text = "/* a\nb */ c\nd"

    assert lex_state_at(text, text.index("b")).in_block_comment
    assert lex_state_at(text, text.index("d")) == CODE
    assert lex_state_at(text, 0) == CODE
