"""Value types for keymaps: strokes, sequences, conditions, actions, bindings."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Iterable, Mapping

DEFAULT_CHORD_TIMEOUT_MS = 500

_set = object.__setattr__


def canonical_modifiers(modifiers: Iterable[str]) -> tuple[str, ...]:
    """Lower-case, de-duplicate and sort modifier names."""

    cleaned = {name.strip().lower() for name in modifiers}
    cleaned.discard("")
    return tuple(sorted(cleaned))


def split_token(token: str) -> tuple[str, tuple[str, ...]]:
    """Split ``"ctrl+shift+h"`` into ``("h", ("ctrl", "shift"))``.

    A trailing ``++`` means the ``+`` key itself.
    """

    if len(token) > 1 and token.endswith("++"):
        return "+", tuple(token[:-2].split("+"))
    head, sep, key = token.rpartition("+")
    if not sep or not key:
        return token, ()
    return key, tuple(head.split("+"))


@dataclass(frozen=True, slots=True)
class KeyStroke:
    """One key plus its modifiers.

    Letters under a modifier are case-folded (``ctrl+K`` is ``ctrl+k``);
    bare letters keep their case.
    """

    key: str
    modifiers: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("key cannot be empty")
        mods = canonical_modifiers(self.modifiers)
        _set(self, "modifiers", mods)
        if mods and len(self.key) == 1:
            _set(self, "key", self.key.lower())

    @classmethod
    def parse(cls, token: str) -> "KeyStroke":
        key, modifiers = split_token(token)
        return cls(key, modifiers)

    @property
    def token(self) -> str:
        return "+".join((*self.modifiers, self.key))

    def __str__(self) -> str:
        return self.token


@dataclass(frozen=True, slots=True)
class KeySequence:
    """Strokes that must arrive in order, each within ``timeout_ms``."""

    strokes: tuple[KeyStroke, ...]
    timeout_ms: int = DEFAULT_CHORD_TIMEOUT_MS

    def __post_init__(self) -> None:
        if not self.strokes:
            raise ValueError("KeySequence requires at least one stroke")
        if self.timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")

    @classmethod
    def from_strings(
        cls, *keys: str, timeout_ms: int = DEFAULT_CHORD_TIMEOUT_MS
    ) -> "KeySequence":
        return cls(tuple(map(KeyStroke.parse, filter(None, keys))), timeout_ms)

    def with_timeout(self, timeout_ms: int) -> "KeySequence":
        return KeySequence(self.strokes, timeout_ms)

    @property
    def tokens(self) -> tuple[str, ...]:
        return tuple(str(stroke) for stroke in self.strokes)

    @property
    def is_chord(self) -> bool:
        return len(self.strokes) > 1

    def __len__(self) -> int:
        return len(self.strokes)


@dataclass(frozen=True, slots=True)
class WhenClause:
    """``flag`` or ``!flag``, tested against the mode's flag context."""

    flag: str
    expected: bool = True

    def __post_init__(self) -> None:
        if not self.flag:
            raise ValueError("flag cannot be empty")

    @classmethod
    def parse(cls, expression: str) -> "WhenClause":
        text = expression.strip()
        negated = text.startswith("!")
        return cls(text[1:] if negated else text, not negated)

    def evaluate(self, flags: Mapping[str, bool]) -> bool:
        return bool(flags.get(self.flag, False)) == self.expected


@dataclass(frozen=True, slots=True)
class ActionRef:
    """A named handler that bindings refer to by id."""

    id: str
    handler: Callable[..., object]
    description: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("ActionRef id cannot be empty")
        if not callable(self.handler):
            raise TypeError("handler must be callable")

    def __call__(self, *args: object, **kwargs: object) -> object:
        return self.handler(*args, **kwargs)


@dataclass(frozen=True, slots=True)
class Binding:
    """A key sequence in one mode, bound to an action id."""

    id: str
    mode: str
    sequence: KeySequence
    action_id: str
    description: str = ""
    when: tuple[WhenClause, ...] = ()
    priority: int = 0

    def __post_init__(self) -> None:
        for name in ("id", "mode", "action_id"):
            if not getattr(self, name):
                raise ValueError(f"binding {name} cannot be empty")
        _set(
            self,
            "when",
            tuple(
                item if isinstance(item, WhenClause) else WhenClause.parse(str(item))
                for item in self.when
            ),
        )

    def retimed(self, timeout_ms: int) -> "Binding":
        return Binding(
            id=self.id,
            mode=self.mode,
            sequence=self.sequence.with_timeout(timeout_ms),
            action_id=self.action_id,
            description=self.description,
            when=self.when,
            priority=self.priority,
        )

    @property
    def when_map(self) -> Mapping[str, bool]:
        return MappingProxyType({item.flag: item.expected for item in self.when})

    def allows(self, flags: Mapping[str, bool]) -> bool:
        return all(item.evaluate(flags) for item in self.when)

    @property
    def key_signature(self) -> str:
        return " ".join(self.sequence.tokens)


__all__ = [
    "DEFAULT_CHORD_TIMEOUT_MS",
    "ActionRef",
    "Binding",
    "KeySequence",
    "KeyStroke",
    "WhenClause",
    "canonical_modifiers",
    "split_token",
]
