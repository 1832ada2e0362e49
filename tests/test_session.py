from __future__ import annotations

from typing import Any, List

import pytest

from textcode import EditorSession


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms / 1000.0


def make_session(initial: Any = "") -> tuple[EditorSession, FakeClock]:
    clock = FakeClock()
    return EditorSession(initial, clock=clock), clock


def record(session: EditorSession, event: str) -> List[Any]:
    seen: List[Any] = []
    session.bus.subscribe(event, seen.append)
    return seen


def test_typing_is_coalesced_until_debounce_expires() -> None:
    session, clock = make_session()
    session.insert_text("a")
    clock.advance(50)
    session.insert_text("b")
    session.insert_text("c")

    assert not session.can_undo
    clock.advance(400)
    assert session.process_timeouts() is True
    assert session.can_undo

    assert session.undo() is True
    assert session.text == ""
    assert session.caret.char_index == 0

    assert session.redo() is True
    assert session.text == "abc"
    assert session.caret.char_index == 3


def test_typing_back_to_last_undo_state_keeps_debounce_open() -> None:
    session, clock = make_session("ab")
    session.set_caret(2)
    session.paste("XY")

    session.delete_backward()
    clock.advance(100)
    session.delete_backward()
    clock.advance(100)
    session.insert_text("z")

    clock.advance(250)
    assert session.process_timeouts() is False
    clock.advance(100)
    assert session.process_timeouts() is True
    assert session.history.undo_depth == 2


def test_undo_right_after_typing_restores_previous_state() -> None:
    session, _ = make_session("start")
    session.set_caret(5)
    session.insert_text("!")

    session.undo()

    assert session.text == "start"
    assert session.caret.char_index == 5


def test_undo_and_redo_on_empty_history_are_noops() -> None:
    session, _ = make_session("x")

    assert session.undo() is False
    assert session.redo() is False
    assert session.text == "x"


def test_enter_sequence_indents_and_dedents() -> None:
    session, _ = make_session()

    session.insert_text("if (x) {")
    session.press_enter()
    assert session.text == "if (x) {\n\t"

    session.insert_text("y();")
    session.press_enter()
    session.insert_text("}")
    session.press_enter()

    assert session.text == "if (x) {\n\ty();\n}\n"
    assert session.caret.char_index == len(session.text)

    session.undo()
    assert session.text == "if (x) {\n\ty();\n\t}"


def test_click_resets_typed_bracket_hint() -> None:
    session, _ = make_session("\t\t")
    session.set_caret(2)
    session.insert_text("}")
    session.set_caret(3)

    session.press_enter()

    assert session.text == "\t\t}\n\t\t"


def test_typed_bracket_hint_dedents_without_click() -> None:
    session, _ = make_session("\t\t")
    session.set_caret(2)
    session.insert_text("}")

    session.press_enter()

    assert session.text == "\t}\n\t"


def test_set_value_places_caret_at_end() -> None:
    session, _ = make_session()

    session.set_value("a\nbc")

    assert (session.caret.line, session.caret.column) == (2, 3)
    assert session.caret.char_index == 4
    assert session.can_undo

    session.value = 12
    assert session.value == "12"


def test_forced_edits_commit_immediately() -> None:
    session, _ = make_session()
    session.insert_tab()
    assert session.text == "\t"
    assert session.can_undo

    session.paste("abc")
    session.replace_all("fresh")
    assert session.caret.char_index == 0
    assert session.history.undo_depth == 3


def test_delete_backward() -> None:
    session, _ = make_session("abc")
    session.set_caret(3)
    session.delete_backward()
    assert session.text == "ab"

    session.set_caret(0)
    session.history.flush()
    session.delete_backward()
    assert session.text == "ab"
    assert not session.history.has_pending


def test_beautify_is_undoable() -> None:
    session, _ = make_session("if (x) {\ny();\n}")
    session.set_caret(9)

    session.beautify()

    assert session.text == "if (x) {\n\ty();\n}"
    assert (session.caret.line, session.caret.column) == (2, 1)
    session.undo()
    assert session.text == "if (x) {\ny();\n}"


def test_select_bracket_and_replace_selection() -> None:
    session, _ = make_session("a{b[c]d}e")
    session.set_caret(2)

    assert session.select_bracket() == (1, 8)
    assert session.selected_text() == "{b[c]d}"
    assert session.caret.char_index == 8

    session.insert_text("X")
    assert session.text == "aXe"
    assert session.selection is None


def test_select_bracket_without_match_leaves_selection() -> None:
    session, _ = make_session("abc")
    session.select_all()

    assert session.select_bracket() is None
    assert session.selection == (0, 3)


def test_go_to_line_validates_input() -> None:
    session, _ = make_session("a\n\tb\nc")

    assert session.go_to_line(2) is True
    assert (session.caret.line, session.caret.column) == (2, 1)
    assert session.caret.char_index == 2
    assert session.go_to_line(9) is False
    assert session.go_to_line(0) is False
    assert session.go_to_line("x") is False


def test_vertical_moves_keep_visual_column() -> None:
    session, _ = make_session("\tab\nxyz")
    session.set_caret(3)

    assert session.move_caret("down").char_index == 7
    assert session.move_caret("up").char_index == 1
    assert session.move_caret("left").char_index == 0
    assert session.move_caret("left").char_index == 0
    with pytest.raises(ValueError):
        session.move_caret("diagonal")


def test_find_moves_caret() -> None:
    session, _ = make_session("foo bar foo")

    assert session.find_next("foo") == 8
    assert session.caret.char_index == 8
    assert session.find_previous("foo") == 0
    assert session.find_next("missing") is None
    assert session.caret.char_index == 0


def test_values_and_values_index() -> None:
    session, _ = make_session(
        [{"title": "a", "content": "1"}, {"title": "b", "content": "2"}]
    )
    changes = record(session, "pagechange")

    session.values_index = 1
    assert session.text == "2"
    assert changes == [{"index": 1, "title": "b", "content": "2"}]

    session.values_index = 9
    assert session.values_index == 1

    session.values = [{"title": "z", "content": "new"}]
    assert session.values_index == 0
    assert session.text == "new"
    assert len(changes) == 2


def test_next_page_creates_untitled_page() -> None:
    session, _ = make_session("one")

    assert session.next_page() == 1
    assert session.values == [
        {"title": "Untitled", "content": "one"},
        {"title": "Untitled 2", "content": ""},
    ]
    assert session.previous_page() == 0
    assert session.text == "one"


def test_page_history_isolation() -> None:
    session, _ = make_session("one")
    session.add_page("two", "second")
    session.paste("!")

    session.switch_page(1)
    assert not session.can_undo
    assert session.text == "two"

    session.switch_page(0)
    assert session.can_undo
    assert session.text == "!one"


def test_bulk_load_suppresses_page_change() -> None:
    session, _ = make_session(
        [{"title": "a", "content": "1"}, {"title": "b", "content": "2"}]
    )
    changes = record(session, "pagechange")

    with session.bulk_load():
        session.switch_page(1)

    assert changes == []
    assert not session.pages.initializing


def test_notifications_reach_host() -> None:
    session, clock = make_session()
    inputs = record(session, "input")
    history = record(session, "history")
    saves = record(session, "save")
    runs = record(session, "run")
    closes = record(session, "close")
    changes = record(session, "change")

    session.insert_text("x")
    clock.advance(1000)
    session.process_timeouts()
    session.commit_change()
    session.request_save()
    session.request_run()
    session.request_close()

    assert inputs == ["x"]
    assert history[-1] == {"can_undo": True, "can_redo": False}
    assert changes == ["x"]
    assert saves == [{"values": [{"title": "Untitled", "content": "x"}]}]
    assert runs == [{"value": "x"}]
    assert closes == [{"value": "x"}]


def test_failing_listener_does_not_break_edits() -> None:
    session, _ = make_session()

    def broken(payload: object) -> None:
        raise RuntimeError("listener failed")

    session.bus.subscribe("input", broken)
    session.insert_text("ok")

    assert session.text == "ok"


def test_mirror_reports_state() -> None:
    session, _ = make_session("abc")
    session.rename_page("script")
    session.paste("x")

    mirror = session.mirror(attributes={"lang": "js"})

    assert mirror.text == "xabc"
    assert mirror.caret.char_index == 1
    assert mirror.can_undo is True
    assert mirror.page_title == "script"
    assert mirror.attributes == {"lang": "js"}


def test_title_keyword_names_first_page() -> None:
    session = EditorSession("body", title="main.js")

    assert session.title == "main.js"
    assert session.values == [{"title": "main.js", "content": "body"}]


def test_history_limit_from_config() -> None:
    from textcode import EditorConfig

    session = EditorSession("", config=EditorConfig(history_limit=2))
    for char in "abcd":
        session.paste(char)

    assert session.history.undo_depth == 2
