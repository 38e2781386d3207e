"""Helper utilities for keymap-driven modes."""

from __future__ import annotations

from typing import Mapping, MutableMapping, cast

from modal_engine.keymaps import KeymapResolver, KeyStroke, ResolutionMatch
from modal_engine.runtime import telemetry

from .base_mode import KeyInput, ModeContext, ModeResult


def key_to_token(key: KeyInput) -> str:
    """Token form of ``key`` as used in binding sequences (``"ctrl+k"``)."""

    return KeyStroke(key.key, key.modifiers).token


def is_text_key(key: KeyInput) -> bool:
    """True for printable ASCII and tab without ctrl/alt held."""

    if {"ctrl", "alt", "meta"} & {mod.lower() for mod in key.modifiers}:
        return False
    text = key.text
    return text is not None and len(text) == 1 and (" " <= text <= "~" or text == "\t")


def require_keymap_resolver(context: ModeContext) -> KeymapResolver:
    resolver = context.extras.get("keymap_resolver")
    if not isinstance(resolver, KeymapResolver):
        raise RuntimeError("ModeContext.extras missing 'keymap_resolver'")
    return resolver


def keymap_flag_context(context: ModeContext) -> Mapping[str, bool]:
    flags = context.extras.setdefault("keymap_flags", {})
    return cast(Mapping[str, bool], flags)


def update_flag(context: ModeContext, key: str, value: bool) -> None:
    flags = cast(
        MutableMapping[str, bool], context.extras.setdefault("keymap_flags", {})
    )
    flags[key] = value


def execute_match(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    with telemetry.span(
        "keymaps::execute",
        component="keymaps",
        metadata={"binding_id": match.binding.id, "action": match.action.id},
    ):
        outcome = match.action(context, match)
    if isinstance(outcome, ModeResult):
        return outcome
    return ModeResult(consumed=True)


__all__ = [
    "key_to_token",
    "is_text_key",
    "require_keymap_resolver",
    "keymap_flag_context",
    "update_flag",
    "execute_match",
]
