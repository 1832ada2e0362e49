from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest

from textcode.runtime import telemetry


@pytest.fixture(autouse=True)
def reset_telemetry(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.delenv("TEXTCODE_LOG_PRESET", raising=False)
    yield
    monkeypatch.delenv("TEXTCODE_LOG_PRESET", raising=False)
    monkeypatch.delenv("TEXTCODE_LOG_FILE", raising=False)
    telemetry.configure()


def test_configure_with_named_preset() -> None:
    telemetry.configure(preset="Development")

    assert telemetry.active_preset() == "development"
    assert telemetry.get_logger() is telemetry.get_logger()
    telemetry.record_event("test.preset", level="debug", data={"preset": "development"})


def test_preset_from_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TEXTCODE_LOG_PRESET", "production")
    monkeypatch.setenv("TEXTCODE_LOG_FILE", str(tmp_path / "textcode.log"))

    telemetry.configure()

    assert telemetry.active_preset() == "production"


def test_environment_settings_without_preset() -> None:
    telemetry.configure()

    assert telemetry.active_preset() is None


def test_invalid_configuration_is_rejected() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(preset="verbose")
    with pytest.raises(ValueError):
        telemetry.configure(config=object(), preset="development")


def test_span_reraises_failures() -> None:
    with pytest.raises(RuntimeError):
        with telemetry.span("test::span", component="editor", metadata={"page": 0}):
            raise RuntimeError("edit failed")


def test_demo_accepts_log_preset() -> None:
    from textcode.adapters.textual.app import _parse_args

    args = _parse_args(["notes.js", "--log-preset", "performance"])

    assert args.path == "notes.js"
    assert args.log_preset == "performance"
