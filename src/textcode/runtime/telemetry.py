"""Structured logging for the editing engine, built on telelog.

``configure(...)`` -- pick a preset or hand over a ``tl.Config``
``get_logger(name)`` -- cached logger bound to the active configuration
``record_event(name, ...)`` -- one ``event::<name>`` line with key/value data
``log_exception(message, exc)`` -- error event for failures the engine absorbs
``span(name, ...)`` -- profile an edit and track it as a component
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, MutableMapping, Optional, Tuple, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "TEXTCODE_"
DEFAULT_LOGGER_NAME = "textcode"

# level, console, json, buffered, profiling, default log file
PRESETS: Dict[str, Tuple[str, bool, bool, bool, bool, str]] = {
    "development": ("DEBUG", True, False, False, False, ""),
    "production": ("INFO", False, False, True, False, "textcode.log"),
    "performance": ("DEBUG", False, True, True, True, "textcode-performance.log"),
}

# telelog spells a few levels differently across releases
_LEVEL_ALIASES = {"warning": ("warning", "warn"), "warn": ("warn", "warning")}

_LOGGER_CACHE: MutableMapping[str, Any] = {}
_ACTIVE_CONFIG: Optional[Any] = None
_ACTIVE_PRESET: Optional[str] = None


def _env(name: str) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}")


def _env_flag(name: str, default: bool) -> bool:
    raw = _env(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def _stringify(value: Any) -> str:
    return value if isinstance(value, str) else repr(value)


def _pairs(data: Dict[str, Any]) -> list[tuple[str, str]]:
    return [(str(key), _stringify(value)) for key, value in data.items()]


def _preset_config(preset: str) -> Any:
    try:
        level, console, json_lines, buffered, profiling, log_file = PRESETS[preset.lower()]
    except KeyError:
        raise ValueError(f"Unknown log preset '{preset}'.") from None

    config = tl.Config()
    config.with_min_level(level)
    config.with_console_output(console)
    if console:
        config.with_colored_output(not _env_flag("NO_COLOR", False))
    config.with_json_format(json_lines)
    config.with_buffering(buffered)
    config.with_profiling(profiling)
    target = _env("LOG_FILE") or log_file
    if target:
        config.with_file_output(target)
    return config


def _env_config() -> Any:
    config = tl.Config()
    config.with_min_level((_env("LOG_LEVEL") or "INFO").upper())
    console = not _env_flag("DISABLE_CONSOLE", False)
    config.with_console_output(console)
    if console:
        config.with_colored_output(not _env_flag("NO_COLOR", False))
    if _env_flag("LOG_JSON", False):
        config.with_json_format(True)
    log_file = _env("LOG_FILE")
    if log_file:
        config.with_file_output(log_file)
    config.with_profiling(_env_flag("PROFILE", True))
    return config


def configure(*, config: Optional[Any] = None, preset: Optional[str] = None) -> None:
    """Replace the active telelog configuration and drop cached loggers.

    Without arguments the preset named by ``TEXTCODE_LOG_PRESET`` is used,
    falling back to the individual ``TEXTCODE_LOG_*`` variables.
    """

    global _ACTIVE_CONFIG, _ACTIVE_PRESET
    if config is not None and preset:
        raise ValueError("Provide either `config` or `preset`, not both.")

    if config is None:
        preset = preset or _env("LOG_PRESET")
        config = _preset_config(preset) if preset else _env_config()
    _ACTIVE_CONFIG = config
    _ACTIVE_PRESET = preset.lower() if preset else None
    _LOGGER_CACHE.clear()


def active_preset() -> Optional[str]:
    return _ACTIVE_PRESET


def get_logger(name: Optional[str] = None) -> Any:
    logger_name = name or _env("LOGGER") or DEFAULT_LOGGER_NAME
    if logger_name not in _LOGGER_CACHE:
        if _ACTIVE_CONFIG is None:
            configure()
        _LOGGER_CACHE[logger_name] = tl.Logger.with_config(logger_name, _ACTIVE_CONFIG)
    return _LOGGER_CACHE[logger_name]


def _level_method(logger: Any, level: str) -> Tuple[Any, bool]:
    name = level.lower()
    candidates = _LEVEL_ALIASES.get(name, (name,))
    for candidate in candidates:
        method = getattr(logger, f"{candidate}_with", None)
        if method is not None:
            return method, True
    for candidate in candidates:
        method = getattr(logger, candidate, None)
        if method is not None:
            return method, False
    raise ValueError(f"Unsupported log level '{level}'.")


def _emit(logger: Any, level: str, message: str, data: Dict[str, Any]) -> None:
    method, structured = _level_method(logger, level)
    if structured:
        method(message, _pairs(data))
    else:
        method(f"{message} {data}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    _emit(get_logger(logger_name), level, f"event::{name}", {"event": name, **(data or {})})


def log_exception(
    message: str, exc: BaseException, *, logger_name: Optional[str] = None
) -> None:
    """Report a failure the engine absorbed, such as a raising listener."""

    record_event(
        "error",
        level="error",
        data={"message": message, "error": type(exc).__name__, "detail": str(exc)},
        logger_name=logger_name,
    )


@dataclass
class SpanHandle:
    logger: Any
    name: str
    component: Optional[str] = None

    def fail(self, reason: str) -> None:
        data = {"span": self.name, "reason": reason}
        if self.component:
            data["component"] = self.component
        _emit(self.logger, "error", "span::fail", data)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile a block under ``name``; ``metadata`` is logger context meanwhile."""

    log = get_logger(logger_name)
    keys = list(metadata or {})
    for key in keys:
        log.add_context(key, _stringify(metadata[key]))  # type: ignore[index]

    handle = SpanHandle(logger=log, name=name, component=component)
    with ExitStack() as stack:
        if component:
            stack.enter_context(log.track_component(component))
        stack.enter_context(log.profile(name))
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise
        finally:
            for key in keys:
                log.remove_context(key)


__all__ = [
    "PRESETS",
    "SpanHandle",
    "active_preset",
    "configure",
    "get_logger",
    "log_exception",
    "record_event",
    "span",
]
