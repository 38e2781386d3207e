"""Textual adapter that feeds key events to an EditorSession and repaints."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional

from modal_engine.buffer import ViewSnapshot
from modal_engine.modes import EditorEffect, KeyInput
from modal_engine.session import EditorSession

# Textual key names that differ from the engine's key tokens.
TEXTUAL_KEYS: Dict[str, str] = {
    "escape": "ESC",
    "enter": "ENTER",
    "return": "ENTER",
    "backspace": "BACKSPACE",
    "tab": "TAB",
    "left": "LEFT",
    "right": "RIGHT",
    "up": "UP",
    "down": "DOWN",
    "home": "HOME",
    "end": "END",
    "pageup": "PAGEUP",
    "pagedown": "PAGEDOWN",
}


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


def normalize_textual_key(
    key: str, text: Optional[str] = None, modifiers: Iterable[str] = ()
) -> Optional[KeyInput]:
    """Turn a Textual key name (``"escape"``, ``"ctrl+k"``, ``"a"``) into a KeyInput.

    Engine tokens such as ``"ESC"`` pass through unchanged. Returns ``None``
    for keys with nothing to dispatch.
    """

    if not key:
        return None
    extra = tuple(str(mod).lower() for mod in modifiers)
    named = TEXTUAL_KEYS.get(key.lower()) if len(key) > 1 else None
    if named is not None:
        parsed = KeyInput.parse(named)
        if extra:
            return KeyInput(parsed.key, extra)
        return parsed
    if len(key) > 1 and "+" in key[1:]:
        parsed = KeyInput.parse(key)
        return KeyInput(parsed.key, tuple(dict.fromkeys(parsed.modifiers + extra)))
    if extra:
        return KeyInput(key, extra)
    # Punctuation arrives by name ("colon", "dollar_sign"); the character is
    # the engine's key.
    if text is not None and len(text) == 1 and text.isprintable():
        return KeyInput(text, text=text)
    if text is None and len(key) == 1:
        text = key
    if text is not None and not text.isprintable() and text != "\t":
        text = None
    return KeyInput(key, text=text)


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_view: Callable[[ViewSnapshot], None]
    update_status: Callable[[str], None] = _noop
    show_command: Callable[[str], None] = _noop
    handle_event: Callable[[str, object | None], None] = _noop
    log: Callable[[str], None] = _noop


class TextualEditorAdapter:
    """Bridges an EditorSession and its bus events to a Textual-friendly surface."""

    def __init__(self, session: EditorSession, hooks: TextualUIHooks) -> None:
        self.session = session
        self.hooks = hooks
        self._subscribe_events()
        self.refresh()

    def handle_textual_key(
        self,
        key: str,
        *,
        text: Optional[str] = None,
        modifiers: Iterable[str] = (),
    ) -> EditorEffect:
        """Translate a Textual key event and dispatch it to the session."""

        key_input = normalize_textual_key(key, text, modifiers)
        if key_input is None:
            return EditorEffect.none()
        return self.dispatch(key_input)

    def dispatch(self, key: KeyInput | str) -> EditorEffect:
        self._log_state("key ->", key=key)
        effect = self.session.dispatch_key(key)
        self.refresh()
        self._log_state("effect <-", effect=effect.kind.value, reason=effect.reason)
        return effect

    def process_timeouts(self) -> EditorEffect:
        effect = self.session.process_timeouts()
        self.refresh()
        return effect

    def resize(self, rows: int, cols: int) -> None:
        self.session.update_viewport_size(rows, cols)
        self.refresh()

    def refresh(self) -> ViewSnapshot:
        snapshot = self.session.render_view()
        self.hooks.update_view(snapshot)
        self.hooks.update_status(snapshot.status)
        self.hooks.show_command(snapshot.command)
        return snapshot

    def _subscribe_events(self) -> None:
        bus = self.session.context.bus
        for event in (
            "selection.extend",
            "command.start",
            "command.end",
            "command.submit",
            "command.error",
        ):
            bus.subscribe(
                event, lambda payload, name=event: self._handle_event(name, payload)
            )

    def _handle_event(self, name: str, payload: object | None) -> None:
        self._log_state("event ->", event=name, payload=payload)
        self.hooks.handle_event(name, payload)

    def _log_state(self, prefix: str, **fields: object) -> None:
        engine = self.session.engine
        snapshot: Dict[str, object] = {
            "mode": self.session.mode,
            "cursor": engine.cursor,
            "selection": engine.selection.normalized(),
            "buffer_version": engine.buffer.version,
        }
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix] + [f"{key}={value!r}" for key, value in snapshot.items()]
        self.hooks.log(" ".join(parts))


__all__ = ["TextualEditorAdapter", "TextualUIHooks", "normalize_textual_key"]
