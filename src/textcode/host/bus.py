"""Minimal event bus used to notify hosts of editor changes."""

from __future__ import annotations

from typing import Callable, Dict

from textcode.runtime import telemetry

Listener = Callable[[object], None]


class EventBus:
    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Listener]] = {}

    def subscribe(self, event: str, callback: Listener) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def unsubscribe(self, event: str, callback: Listener) -> None:
        listeners = self._subscribers.get(event, [])
        if callback in listeners:
            listeners.remove(callback)

    def listener_count(self, event: str) -> int:
        return len(self._subscribers.get(event, []))

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in list(self._subscribers.get(event, [])):
            try:
                callback(payload)
            except Exception as exc:
                telemetry.log_exception(f"{event} listener failed", exc)


__all__ = ["EventBus", "Listener"]
