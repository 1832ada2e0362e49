"""Editor settings with environment overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

ENV_PREFIX = "TEXTCODE_"

DEFAULT_TAB_WIDTH = 4
DEFAULT_DEBOUNCE_MS = 300
DEFAULT_HISTORY_LIMIT = 20
DEFAULT_TITLE = "Untitled"


def _env_int(env: Mapping[str, str], name: str, fallback: int) -> int:
    value = env.get(f"{ENV_PREFIX}{name}")
    if value is None:
        return fallback
    try:
        parsed = int(value)
    except ValueError:
        return fallback
    return parsed if parsed > 0 else fallback


@dataclass(frozen=True, slots=True)
class EditorConfig:
    """Tunables shared by the session, history, and position model."""

    tab_width: int = DEFAULT_TAB_WIDTH
    debounce_ms: int = DEFAULT_DEBOUNCE_MS
    history_limit: int = DEFAULT_HISTORY_LIMIT
    default_title: str = DEFAULT_TITLE

    def __post_init__(self) -> None:
        if self.tab_width < 1:
            raise ValueError("tab_width must be positive")
        if self.debounce_ms < 0:
            raise ValueError("debounce_ms cannot be negative")
        if self.history_limit < 1:
            raise ValueError("history_limit must be positive")

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "EditorConfig":
        source = os.environ if env is None else env
        return cls(
            tab_width=_env_int(source, "TAB_WIDTH", DEFAULT_TAB_WIDTH),
            debounce_ms=_env_int(source, "DEBOUNCE_MS", DEFAULT_DEBOUNCE_MS),
            history_limit=_env_int(source, "HISTORY_LIMIT", DEFAULT_HISTORY_LIMIT),
            default_title=source.get(f"{ENV_PREFIX}DEFAULT_TITLE", DEFAULT_TITLE),
        )


__all__ = [
    "EditorConfig",
    "DEFAULT_TAB_WIDTH",
    "DEFAULT_DEBOUNCE_MS",
    "DEFAULT_HISTORY_LIMIT",
    "DEFAULT_TITLE",
]
