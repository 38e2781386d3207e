"""Mode manager: the active mode, transitions, and chord deadlines."""

from __future__ import annotations

import itertools
import time
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Type

from modal_engine.keymaps import (
    GLOBAL_MODE,
    KeymapRegistry,
    KeymapResolver,
    load_default_keymaps,
)
from modal_engine.runtime import telemetry

from .base_mode import KeyInput, Mode, ModeContext, ModeResult
from .keymap_helpers import (
    execute_match,
    key_to_token,
    keymap_flag_context,
    update_flag,
)


@dataclass(frozen=True)
class PendingTimeout:
    """Deadline for a chord a mode is waiting to complete.

    ``generation`` tells a re-armed chord apart from the one a stale timer
    was set for.
    """

    deadline: float
    timeout_ms: int
    generation: int

    def expired(self, now: float) -> bool:
        return self.deadline <= now


class ModeManager:
    """Routes keys to the active mode and applies the transitions it asks for.

    Every key is first offered to the ``global`` keymap (quit, copy, paste,
    help) unless the active mode is in the middle of a chord.
    """

    def __init__(
        self,
        context: ModeContext,
        *,
        keymap_registry: KeymapRegistry | None = None,
        keymap_resolver: KeymapResolver | None = None,
        load_defaults: bool = True,
    ) -> None:
        self.context = context
        self.logger = telemetry.get_logger("modal_engine.modes")
        if keymap_registry is None:
            keymap_registry = KeymapRegistry(logger_name="modal_engine.keymaps")
            if load_defaults:
                load_default_keymaps(
                    keymap_registry,
                    default_sequence_timeout_ms=context.config.chord_timeout_ms,
                )
        self.keymap_registry = keymap_registry
        self.keymap_resolver = keymap_resolver or KeymapResolver(
            keymap_registry, logger_name="modal_engine.keymaps"
        )
        for key, value in (
            ("keymap_registry", self.keymap_registry),
            ("keymap_resolver", self.keymap_resolver),
            ("keymap_flags", {}),
            ("mode_manager", self),
        ):
            context.extras.setdefault(key, value)
        self._modes: Dict[str, Mode] = {}
        self._active: Optional[str] = None
        self._deadlines: Dict[str, PendingTimeout] = {}
        self._generations = itertools.count(1)

    # modes

    @property
    def active_mode(self) -> Optional[Mode]:
        return self._modes.get(self._active) if self._active else None

    @property
    def active_name(self) -> str:
        return self._active or ""

    def register_mode(
        self,
        mode_cls: Type[Mode],
        /,
        *mode_args: object,
        **mode_kwargs: object,
    ) -> Mode:
        """Instantiate and add a mode; the first one registered starts active."""

        mode = mode_cls(self.context, *mode_args, **mode_kwargs)
        if mode.name in self._modes:
            raise ValueError(f"Mode '{mode.name}' already registered")
        self._modes[mode.name] = mode
        if self._active is None:
            self._active = mode.name
            mode.on_enter(None)
        return mode

    def switch_mode(self, name: str) -> None:
        target = self._modes.get(name)
        if target is None:
            raise KeyError(f"Unknown mode '{name}'")
        leaving = self.active_mode
        if leaving is target:
            return
        previous = leaving.name if leaving else None
        if leaving:
            self.cancel_timeout(leaving.name)
            leaving.on_exit(name)
        self._active = name
        target.on_enter(previous)
        self.cancel_timeout(name)
        telemetry.record_event(
            "mode.switch", data={"mode": name, "previous": previous}
        )

    # keys

    def handle_key(self, key: KeyInput) -> ModeResult:
        mode = self.active_mode
        if mode is None:
            raise RuntimeError("No active mode registered")
        update_flag(self.context, "selection_set", self.context.engine.selection.is_set)
        token = key_to_token(key)
        with telemetry.span(
            name=f"mode::{mode.name}",
            component=True,
            metadata={"key": token, "mode": mode.name},
        ):
            result = None if mode.has_pending else self._handle_global(token)
            if result is None:
                result = mode.handle_key(key)
        return self._apply(mode, result)

    def _handle_global(self, token: str) -> Optional[ModeResult]:
        resolution = self.keymap_resolver.resolve(
            GLOBAL_MODE, (token,), context=keymap_flag_context(self.context)
        )
        if resolution.match is None:
            return None
        return execute_match(self.context, resolution.match)

    def _apply(self, mode: Mode, result: ModeResult) -> ModeResult:
        if result.timeout_ms:
            self.arm_timeout(mode.name, result.timeout_ms)
        else:
            self.cancel_timeout(mode.name)
        if result.switch_to:
            self.switch_mode(result.switch_to)
        return result

    # chord deadlines

    def arm_timeout(self, mode_name: str, timeout_ms: int) -> None:
        self._deadlines[mode_name] = PendingTimeout(
            deadline=time.monotonic() + timeout_ms / 1000.0,
            timeout_ms=timeout_ms,
            generation=next(self._generations),
        )

    def cancel_timeout(self, mode_name: str) -> None:
        self._deadlines.pop(mode_name, None)

    def next_deadline(self) -> Optional[float]:
        return min((t.deadline for t in self._deadlines.values()), default=None)

    def seconds_until_timeout(self) -> Optional[float]:
        """How long a blocking read may wait before a chord has to expire."""

        deadline = self.next_deadline()
        if deadline is None:
            return None
        return max(0.0, deadline - time.monotonic())

    def process_timeouts(self) -> Dict[str, ModeResult]:
        """Expire every chord whose deadline has passed."""

        now = time.monotonic()
        return self._expire(
            name for name, timer in self._deadlines.items() if timer.expired(now)
        )

    def force_timeout(self, mode_name: Optional[str] = None) -> Dict[str, ModeResult]:
        """Expire pending chords now, regardless of their deadlines."""

        if mode_name is None:
            return self._expire(self._deadlines)
        return self._expire([mode_name] if mode_name in self._deadlines else [])

    def _expire(self, names: Iterable[str]) -> Dict[str, ModeResult]:
        snapshot = {name: self._deadlines[name] for name in list(names)}
        results: Dict[str, ModeResult] = {}
        for name, timer in snapshot.items():
            if self._deadlines.get(name) != timer:
                # Re-armed or cancelled by an earlier expiry in this pass.
                continue
            del self._deadlines[name]
            mode = self._modes.get(name)
            if mode is None:
                continue
            with telemetry.span(
                name=f"mode_timeout::{name}",
                component=True,
                metadata={"mode": name, "after_ms": timer.timeout_ms},
            ):
                result = mode.handle_timeout()
            results[name] = self._apply(mode, result)
        return results


__all__ = ["ModeManager", "PendingTimeout"]
