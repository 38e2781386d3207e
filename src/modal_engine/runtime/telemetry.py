"""Structured logging and profiling for the editing engine, backed by telelog.

Everything the engine logs goes through four calls:

``record_event(name, ...)`` -- one ``event::<name>`` line with key/value data
``notice(message, ...)`` -- a status-line message, logged as an event
``span(name, ...)`` -- profile a block, optionally as a tracked component
``get_logger(name)`` -- the cached telelog logger behind the other three

``configure`` swaps the active settings. At import time they come from the
``MODAL_ENGINE_*`` environment variables.
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "MODAL_ENGINE_"
DEFAULT_LOGGER_NAME = os.getenv(f"{ENV_PREFIX}LOGGER", "modal_engine")
TRUTHY = frozenset({"1", "true", "yes", "on"})


def _env(name: str) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}")


def _env_flag(name: str) -> bool:
    return (_env(name) or "").strip().lower() in TRUTHY


@dataclass(frozen=True)
class LogSettings:
    """Knobs translated one-to-one onto a ``telelog.Config``."""

    level: str = "INFO"
    console: bool = True
    colored: bool = True
    json: bool = False
    file: Optional[str] = None
    buffered: bool = False
    buffer_size: Optional[int] = None

    @classmethod
    def from_env(cls) -> "LogSettings":
        buffered = _env_flag("LOG_BUFFERED")
        return cls(
            level=(_env("LOG_LEVEL") or "INFO").upper(),
            console=not _env_flag("DISABLE_CONSOLE"),
            colored=not _env_flag("NO_COLOR"),
            json=_env_flag("LOG_JSON"),
            file=_env("LOG_FILE") or None,
            buffered=buffered,
            buffer_size=int(_env("LOG_BUFFER_SIZE") or "2048") if buffered else None,
        )

    def to_config(self) -> Any:
        config = tl.Config()
        config.with_min_level(self.level)
        config.with_console_output(self.console)
        if self.console:
            config.with_colored_output(self.colored)
        if self.json:
            config.with_json_format(True)
        if self.file:
            config.with_file_output(self.file)
        if self.buffered:
            config.with_buffering(True)
            if self.buffer_size:
                config.with_buffer_size(self.buffer_size)
        config.with_profiling(True)
        return config


def _preset(name: str) -> LogSettings:
    key = name.lower()
    if key == "development":
        return LogSettings(level="DEBUG")
    if key == "session":
        # Interactive hosts own the terminal, so nothing goes to the console.
        log_file = _env("LOG_FILE") or "modal_engine.log"
        return LogSettings(console=False, file=log_file, buffered=True)
    if key == "quiet":
        return LogSettings(level="ERROR", console=False)
    raise ValueError(f"Unknown preset '{name}'.")


class _State:
    config: Optional[Any] = None
    loggers: Dict[str, Any] = {}


def configure(*, config: Optional[Any] = None, preset: Optional[str] = None) -> None:
    """Replace the active telelog configuration.

    Parameters
    ----------
    config:
        A ready ``telelog.Config``; profiling is switched on for it.
    preset:
        ``"development"``, ``"session"`` or ``"quiet"``. Cannot be combined
        with ``config``. With neither, the environment decides.
    """

    if config is not None and preset:
        raise ValueError("Provide either `config` or `preset`, not both.")
    if preset:
        config = _preset(preset).to_config()
    elif config is None:
        config = LogSettings.from_env().to_config()
    else:
        config.with_profiling(True)
    _State.config = config
    _State.loggers.clear()


def get_logger(name: Optional[str] = None) -> Any:
    """Cached ``telelog.Logger`` bound to the active configuration."""

    key = name or DEFAULT_LOGGER_NAME
    logger = _State.loggers.get(key)
    if logger is None:
        if _State.config is None:
            configure()
        logger = tl.Logger.with_config(key, _State.config)
        _State.loggers[key] = logger
    return logger


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list, tuple, set)):
        return repr(value)
    return str(value)


def _write(logger: Any, level: Any, message: str, fields: Mapping[str, Any]) -> None:
    """Log at ``level``, preferring telelog's ``<level>_with`` data variant."""

    name = str(level).lower()
    structured = getattr(logger, f"{name}_with", None)
    if structured is not None:
        structured(message, [(str(key), _text(val)) for key, val in fields.items()])
        return
    plain = getattr(logger, name, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {dict(fields)}")


def record_event(
    name: str,
    *,
    level: str | Any = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Emit ``event::<name>`` with ``data`` as key/value pairs."""

    fields: Dict[str, Any] = {"event": name}
    fields.update(data or {})
    _write(get_logger(logger_name), level, f"event::{name}", fields)


def notice(message: str, *, level: str = "info", **data: Any) -> None:
    """Log a status-line notice shown to the user."""

    record_event("status.notice", level=level, data={"message": message, **data})


@dataclass
class SpanHandle:
    """Yielded by ``span``; metadata added here rides along on failure reports."""

    logger: Any
    span_name: str
    component_name: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _text(value)

    def fail(self, reason: str) -> None:
        self._report("error", "span::fail", reason)

    def cancel(self, reason: str | None = None) -> None:
        self._report("warning", "span::cancel", reason)

    def _report(self, level: str, message: str, reason: Optional[str]) -> None:
        fields: Dict[str, Any] = {"span": self.span_name, **self.metadata}
        if self.component_name:
            fields["component"] = self.component_name
        if reason:
            fields["reason"] = reason
        _write(self.logger, level, message, fields)


@contextmanager
def _logger_context(logger: Any, values: Mapping[str, str]) -> Iterator[None]:
    added: List[str] = []
    try:
        for key, value in values.items():
            logger.add_context(key, value)
            added.append(key)
        yield
    finally:
        for key in added:
            logger.remove_context(key)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile a block and optionally track it as a telelog component.

    ``component=True`` reuses ``name`` as the component id; a string names it
    explicitly. ``metadata`` is pushed as logger context for the duration of
    the block. Exceptions are reported through ``SpanHandle.fail`` and
    re-raised.
    """

    logger = get_logger(logger_name)
    component_name: Optional[str] = None
    if component is True:
        component_name = name
    elif isinstance(component, str):
        component_name = component
    values = {key: _text(value) for key, value in (metadata or {}).items()}
    handle = SpanHandle(
        logger=logger,
        span_name=name,
        component_name=component_name,
        metadata=dict(values),
    )
    with ExitStack() as stack:
        stack.enter_context(_logger_context(logger, values))
        if handle.component_name:
            stack.enter_context(logger.track_component(handle.component_name))
        stack.enter_context(logger.profile(name))
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise


configure()
logger = get_logger()

__all__ = [
    "LogSettings",
    "SpanHandle",
    "configure",
    "get_logger",
    "notice",
    "record_event",
    "span",
    "logger",
]
