from __future__ import annotations

import pytest

from modal_engine.config import EngineConfig
from modal_engine.runtime import telemetry


def test_config_defaults() -> None:
    config = EngineConfig()

    assert config.chord_timeout_ms == 500
    assert config.command_history == 10
    assert (config.min_view_rows, config.min_view_cols) == (3, 20)


def test_config_rejects_bad_values() -> None:
    with pytest.raises(ValueError):
        EngineConfig(chord_timeout_ms=0)
    with pytest.raises(ValueError):
        EngineConfig(command_history=-1)


def test_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MODAL_ENGINE_CHORD_TIMEOUT_MS", "750")
    monkeypatch.setenv("MODAL_ENGINE_COMMAND_HISTORY", "4")

    config = EngineConfig.from_env()

    assert config.chord_timeout_ms == 750
    assert config.command_history == 4


def test_config_from_env_ignores_invalid(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MODAL_ENGINE_CHORD_TIMEOUT_MS", "soon")
    monkeypatch.setenv("MODAL_ENGINE_COMMAND_HISTORY", "-3")

    config = EngineConfig.from_env()

    assert config.chord_timeout_ms == 500
    assert config.command_history == 0


def test_span_reraises_and_yields_handle() -> None:
    with telemetry.span("tests::ok", component=True, metadata={"key": "x"}) as handle:
        handle.add_metadata("rows", [1, 2])
    assert handle.metadata == {"key": "x", "rows": "[1, 2]"}

    with pytest.raises(RuntimeError):
        with telemetry.span("tests::boom"):
            raise RuntimeError("boom")


def test_record_event_and_notice() -> None:
    telemetry.record_event("tests.event", data={"count": 1})
    telemetry.notice("Saved", level="warning", buffer="default")

    with pytest.raises(ValueError):
        telemetry.record_event("tests.event", level="loud")


def test_configure_validates_arguments() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(preset="verbose")
    with pytest.raises(ValueError):
        telemetry.configure(config=object(), preset="quiet")
