"""Tracks the most recent typed characters for closing-bracket heuristics."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class TypingTracker:
    last: str = ""
    second_last: str = ""

    def note(self, char: str) -> None:
        self.second_last = self.last
        self.last = char

    def note_text(self, text: str) -> None:
        # multi-character inserts only leave their final character behind
        if text:
            self.note(text[-1])

    def reset(self) -> None:
        self.last = ""
        self.second_last = ""


__all__ = ["TypingTracker"]
