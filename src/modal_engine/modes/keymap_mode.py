"""Shared key resolution loop for modes driven by the keymap registry."""

from __future__ import annotations

from typing import List, Optional

from modal_engine.runtime import telemetry

from .base_mode import KeyInput, Mode, ModeContext, ModeResult
from .keymap_helpers import (
    execute_match,
    key_to_token,
    keymap_flag_context,
    require_keymap_resolver,
)


class KeymapMode(Mode):
    """Resolves keys against this mode's bindings, buffering chord prefixes.

    Keys that match nothing go to ``fallback``. When a chord is broken, the
    buffered prefix is handled as ordinary input and the breaking key is
    handed back through ``ModeResult.replay`` so it is read again fresh.
    """

    def __init__(self, context: ModeContext) -> None:
        super().__init__(context)
        self.logger = telemetry.get_logger(f"modal_engine.modes.{self.name}")
        self._resolver = require_keymap_resolver(context)
        self._flags = keymap_flag_context(context)
        self._pending: List[KeyInput] = []

    @property
    def has_pending(self) -> bool:
        return bool(self._pending)

    @property
    def pending_tokens(self) -> tuple[str, ...]:
        return tuple(key_to_token(key) for key in self._pending)

    def on_exit(self, next_mode: Optional[str]) -> None:
        del next_mode
        self._pending.clear()

    def handle_key(self, key: KeyInput) -> ModeResult:
        self._pending.append(key)
        result = self._resolver.resolve(
            self.name, self.pending_tokens, context=self._flags
        )

        if result.status == "match" and result.match:
            self._pending.clear()
            return execute_match(self.context, result.match)

        if result.status == "pending":
            return ModeResult(
                consumed=True,
                status="pending",
                message="awaiting_sequence",
                timeout_ms=result.timeout_ms or self.context.config.chord_timeout_ms,
            )

        if len(self._pending) == 1:
            self._pending.clear()
            return self.fallback(key)

        prefix = self._pending[:-1]
        self._pending.clear()
        outcome = self._flush(prefix)
        outcome.status = "chord_miss"
        outcome.replay = key
        return outcome

    def handle_timeout(self) -> ModeResult:
        if not self._pending:
            return ModeResult(consumed=False, status="timeout")
        prefix = list(self._pending)
        self._pending.clear()
        outcome = self._flush(prefix)
        outcome.status = "timeout"
        return outcome

    def fallback(self, key: KeyInput) -> ModeResult:
        """Handle a key no binding claimed; unbound keys are ignored by default."""

        del key
        return ModeResult(consumed=False, status="miss", message="unbound")

    def _flush(self, keys: List[KeyInput]) -> ModeResult:
        outcome = ModeResult(consumed=False)
        for key in keys:
            outcome = self.fallback(key)
        return outcome


__all__ = ["KeymapMode"]
