"""Session layer that hosts embed: pages, caret, and notifications."""

from .bus import EventBus
from .keys import TypingTracker
from .session import EditorSession, EditTransaction

__all__ = ["EditorSession", "EditTransaction", "EventBus", "TypingTracker"]
