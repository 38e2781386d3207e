"""Keymap registry: actions by id, and bindings indexed by mode and keys."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import DefaultDict, Dict, Iterable, Iterator, List, Optional, Tuple

from modal_engine.runtime.telemetry import span

from .models import ActionRef, Binding

_Slot = Tuple[str, str]


@dataclass(frozen=True, slots=True)
class RegistryStats:
    action_count: int
    binding_count: int
    modes: tuple[str, ...]


class KeymapConflictError(RuntimeError):
    """A binding's keys are already taken in a context that overlaps its own."""

    def __init__(self, binding: Binding, conflicts: Iterable[Binding]):
        self.binding = binding
        self.conflicts = tuple(conflicts)
        names = ", ".join(other.id for other in self.conflicts)
        super().__init__(
            f"Binding '{binding.id}' ({binding.mode}: {binding.key_signature}) "
            f"conflicts with {names}"
        )


def _slot(binding: Binding) -> _Slot:
    return binding.mode, binding.key_signature


def when_overlaps(left: Binding, right: Binding) -> bool:
    """True when both bindings could be live for the same flag context.

    Unconditional bindings only clash with other unconditional ones; a flag
    both sides test with opposite values keeps them apart.
    """

    ours, theirs = left.when_map, right.when_map
    if any(theirs.get(flag, expected) != expected for flag, expected in ours.items()):
        return False
    if bool(ours) != bool(theirs):
        return False
    return ours == theirs


class KeymapRegistry:
    """Holds actions and bindings; ``revision()`` changes on every mutation."""

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._logger_name = logger_name
        self._actions: Dict[str, ActionRef] = {}
        self._bindings: Dict[str, Binding] = {}
        self._by_slot: DefaultDict[_Slot, List[str]] = defaultdict(list)
        self._revision = 0

    def revision(self) -> int:
        return self._revision

    def _touch(self) -> None:
        self._revision += 1

    # actions

    def register_action(self, action: ActionRef, *, replace: bool = False) -> ActionRef:
        if action.id in self._actions and not replace:
            raise ValueError(f"Action '{action.id}' already registered")
        self._actions[action.id] = action
        return action

    def get_action(self, action_id: str) -> ActionRef:
        action = self._actions.get(action_id)
        if action is None:
            raise KeyError(f"Action '{action_id}' is not registered")
        return action

    # bindings

    def get_binding(self, binding_id: str) -> Binding:
        binding = self._bindings.get(binding_id)
        if binding is None:
            raise KeyError(f"Binding '{binding_id}' is not registered")
        return binding

    def iter_bindings(self, mode: Optional[str] = None) -> Iterator[Binding]:
        snapshot = list(self._bindings.values())
        return iter([b for b in snapshot if mode is None or b.mode == mode])

    def detect_conflicts(self, binding: Binding) -> list[Binding]:
        return [
            self._bindings[other_id]
            for other_id in self._by_slot.get(_slot(binding), ())
            if when_overlaps(binding, self._bindings[other_id])
        ]

    def register_binding(self, binding: Binding, *, replace: bool = False) -> Binding:
        """Add ``binding``. With ``replace`` it evicts whatever it collides with."""

        with span(
            "keymaps::register_binding",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"binding_id": binding.id, "mode": binding.mode},
        ) as handle:
            if binding.action_id not in self._actions:
                handle.add_metadata("missing_action", binding.action_id)
                raise KeyError(
                    f"Binding '{binding.id}' references unknown action "
                    f"'{binding.action_id}'"
                )
            clashes = [
                other
                for other in self.detect_conflicts(binding)
                if other.id != binding.id
            ]
            if not replace:
                if binding.id in self._bindings:
                    raise ValueError(f"Binding id '{binding.id}' already registered")
                if clashes:
                    handle.add_metadata("conflicts", ",".join(c.id for c in clashes))
                    raise KeymapConflictError(binding, clashes)
            evicted = [other.id for other in clashes]
            if binding.id in self._bindings:
                evicted.append(binding.id)
            for other_id in evicted:
                self._remove(other_id)
            self._add(binding)
            self._touch()
            return binding

    def unregister_binding(self, binding_id: str) -> Optional[Binding]:
        if binding_id not in self._bindings:
            return None
        removed = self._remove(binding_id)
        self._touch()
        return removed

    def override_sequence_timeouts(
        self, *, timeout_ms: int, mode: Optional[str] = None
    ) -> int:
        """Retime every chord binding (optionally only in ``mode``)."""

        if timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")
        chords = [b for b in self.iter_bindings(mode) if b.sequence.is_chord]
        for binding in chords:
            self._bindings[binding.id] = binding.retimed(timeout_ms)
        if chords:
            self._touch()
        return len(chords)

    def stats(self) -> RegistryStats:
        return RegistryStats(
            action_count=len(self._actions),
            binding_count=len(self._bindings),
            modes=tuple(sorted({mode for mode, _ in self._by_slot})),
        )

    def _add(self, binding: Binding) -> None:
        self._bindings[binding.id] = binding
        self._by_slot[_slot(binding)].append(binding.id)

    def _remove(self, binding_id: str) -> Binding:
        binding = self._bindings.pop(binding_id)
        slot = _slot(binding)
        remaining = [i for i in self._by_slot.get(slot, ()) if i != binding_id]
        if remaining:
            self._by_slot[slot] = remaining
        else:
            self._by_slot.pop(slot, None)
        return binding


__all__ = [
    "KeymapConflictError",
    "KeymapRegistry",
    "RegistryStats",
    "when_overlaps",
]
