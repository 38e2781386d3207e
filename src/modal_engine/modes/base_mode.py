"""Types shared by every mode: key input, results, effects, context, bus."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, DefaultDict, Dict, List, Optional, Tuple

from modal_engine.buffer import EditEngine
from modal_engine.config import EngineConfig
from modal_engine.keymaps.models import split_token

NAMED_TEXT = {"TAB": "\t", "SPACE": " "}

Listener = Callable[[object], None]


@dataclass(slots=True)
class KeyInput:
    """A key as modes see it.

    ``text`` is what the key types in Insert or Command mode; modified keys
    and most named keys (``ESC``, ``ENTER``) type nothing.
    """

    key: str
    modifiers: Tuple[str, ...] = ()
    text: Optional[str] = None

    @classmethod
    def parse(cls, token: str) -> "KeyInput":
        """``"x"``, ``"ENTER"``, ``"TAB"``, ``"ctrl+k"`` and the like."""

        if not token:
            raise ValueError("key token cannot be empty")
        if len(token) == 1:
            return cls(token, text=token)
        key, modifiers = split_token(token)
        modifiers = tuple(name for name in modifiers if name)
        if modifiers:
            return cls(key, modifiers)
        return cls(key, text=key if len(key) == 1 else NAMED_TEXT.get(key))

    @classmethod
    def coerce(cls, code: "KeyInput | str") -> "KeyInput":
        if isinstance(code, KeyInput):
            return code
        return cls.parse(code)


class EffectKind(str, Enum):
    NONE = "none"
    QUIT = "quit"
    QUIT_BLOCKED = "quit_blocked"


@dataclass(frozen=True, slots=True)
class EditorEffect:
    """Instruction for the host loop once a key has been handled."""

    kind: EffectKind = EffectKind.NONE
    reason: Optional[str] = None

    @classmethod
    def none(cls) -> "EditorEffect":
        return cls()

    @classmethod
    def quit(cls) -> "EditorEffect":
        return cls(EffectKind.QUIT)

    @classmethod
    def quit_blocked(cls, reason: str) -> "EditorEffect":
        return cls(EffectKind.QUIT_BLOCKED, reason)


@dataclass(slots=True)
class ModeResult:
    """What a mode did with a key.

    ``timeout_ms`` asks the manager to arm a chord deadline. ``replay`` is a
    key the mode gave back unconsumed, to be read again as fresh input.
    """

    consumed: bool
    switch_to: Optional[str] = None
    status: str = "ok"
    message: Optional[str] = None
    timeout_ms: Optional[int] = None
    effect: Optional[EditorEffect] = None
    replay: Optional[KeyInput] = None


@dataclass(slots=True)
class ModeContext:
    engine: EditEngine
    bus: "ModeBus"
    config: EngineConfig = field(default_factory=EngineConfig)
    extras: Dict[str, object] = field(default_factory=dict)


class ModeBus:
    """Named events fanned out to subscribers in subscription order."""

    def __init__(self) -> None:
        self._listeners: DefaultDict[str, List[Listener]] = defaultdict(list)

    def subscribe(self, event: str, callback: Listener) -> None:
        self._listeners[event].append(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for listener in tuple(self._listeners.get(event, ())):
            listener(payload)


class Mode:
    """One editor mode. Subclasses set ``name`` and implement ``handle_key``."""

    name: str = "mode"

    def __init__(self, context: ModeContext) -> None:
        self.context = context

    @property
    def has_pending(self) -> bool:
        """True while part of a chord is buffered."""

        return False

    def on_enter(self, previous: Optional[str]) -> None:
        pass

    def on_exit(self, next_mode: Optional[str]) -> None:
        pass

    def handle_key(self, key: KeyInput) -> ModeResult:
        raise NotImplementedError(f"{type(self).__name__} must handle keys")

    def handle_timeout(self) -> ModeResult:
        return ModeResult(consumed=False, status="timeout")
