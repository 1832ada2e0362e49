"""Line scanner that counts brackets outside strings and comments."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

OPENERS = "{[("
CLOSERS = "}])"
QUOTES = "'\"`"


@dataclass(frozen=True, slots=True)
class LexState:
    """Lexical context carried from one line to the next."""

    in_string: bool = False
    string_delim: Optional[str] = None
    in_block_comment: bool = False

    @property
    def is_code(self) -> bool:
        return not self.in_string and not self.in_block_comment


CODE = LexState()


@dataclass(frozen=True, slots=True)
class LineScan:
    """Result of scanning one line.

    ``brackets`` holds ``(index, step)`` for every bracket seen in code, with
    ``step`` being +1 for openers and -1 for closers.
    """

    final_state: LexState
    brackets: Tuple[Tuple[int, int], ...] = ()

    @property
    def net_delta(self) -> int:
        return sum(step for _, step in self.brackets)

    @property
    def openers(self) -> int:
        return sum(1 for _, step in self.brackets if step > 0)

    @property
    def closers(self) -> int:
        return sum(1 for _, step in self.brackets if step < 0)

    @property
    def depth(self) -> int:
        """Line-local depth, never allowed below zero."""

        return self.apply(0)

    def openers_before(self, index: int) -> int:
        return sum(1 for pos, step in self.brackets if pos < index and step > 0)

    def closers_before(self, index: int) -> int:
        return sum(1 for pos, step in self.brackets if pos < index and step < 0)

    def ends_with_opener(self, length: int) -> bool:
        if not self.brackets:
            return False
        pos, step = self.brackets[-1]
        return step > 0 and pos == length - 1

    def apply(self, level: int) -> int:
        """Replay the brackets on top of ``level``, flooring at zero per step."""

        for _, step in self.brackets:
            level = max(0, level + step)
        return level


def scan_line(line: str, state: LexState = CODE, *, start: int = 0) -> LineScan:
    in_string = state.in_string
    delim = state.string_delim
    in_comment = state.in_block_comment
    escaped = False
    brackets: list[Tuple[int, int]] = []

    index = start
    length = len(line)
    while index < length:
        char = line[index]
        following = line[index + 1] if index + 1 < length else ""
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == delim:
                in_string = False
                delim = None
        elif in_comment:
            if char == "*" and following == "/":
                in_comment = False
                index += 1
        elif char in QUOTES:
            in_string = True
            delim = char
        elif char == "/" and following == "/":
            break
        elif char == "/" and following == "*":
            in_comment = True
            index += 1
        elif char in OPENERS:
            brackets.append((index, 1))
        elif char in CLOSERS:
            brackets.append((index, -1))
        index += 1

    final = LexState(
        in_string=in_string,
        string_delim=delim if in_string else None,
        in_block_comment=in_comment,
    )
    return LineScan(final_state=final, brackets=tuple(brackets))


def thread_state(lines: Iterable[str], state: LexState = CODE) -> LexState:
    """Carry ``state`` through ``lines`` and return the state after the last one."""

    for line in lines:
        state = scan_line(line, state).final_state
    return state


def lex_state_at(text: str, offset: int) -> LexState:
    """Return the lexical state at the start of the line containing ``offset``."""

    line_start = text.rfind("\n", 0, max(offset, 0)) + 1
    if line_start == 0:
        return CODE
    return thread_state(text[: line_start - 1].split("\n"))


__all__ = [
    "OPENERS",
    "CLOSERS",
    "QUOTES",
    "CODE",
    "LexState",
    "LineScan",
    "scan_line",
    "thread_state",
    "lex_state_at",
]
