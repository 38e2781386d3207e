"""Engine tunables, read from ``MODAL_ENGINE_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass

ENV_PREFIX = "MODAL_ENGINE_"


def _env_int(key: str, fallback: int) -> int:
    value = os.environ.get(f"{ENV_PREFIX}{key}")
    if value is None:
        return fallback
    try:
        return int(value)
    except ValueError:
        return fallback


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Settings a session is built with."""

    chord_timeout_ms: int = 500
    command_history: int = 10
    min_view_rows: int = 3
    min_view_cols: int = 20
    view_rows: int = 24
    view_cols: int = 80

    def __post_init__(self) -> None:
        if self.chord_timeout_ms <= 0:
            raise ValueError("chord_timeout_ms must be positive")
        if self.command_history < 0:
            raise ValueError("command_history cannot be negative")

    @classmethod
    def from_env(cls) -> "EngineConfig":
        defaults = cls()
        timeout = _env_int("CHORD_TIMEOUT_MS", defaults.chord_timeout_ms)
        history = _env_int("COMMAND_HISTORY", defaults.command_history)
        return cls(
            chord_timeout_ms=timeout if timeout > 0 else defaults.chord_timeout_ms,
            command_history=max(0, history),
            min_view_rows=_env_int("MIN_VIEW_ROWS", defaults.min_view_rows),
            min_view_cols=_env_int("MIN_VIEW_COLS", defaults.min_view_cols),
        )


__all__ = ["EngineConfig"]
