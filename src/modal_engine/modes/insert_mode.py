"""Insert mode: typed text goes straight into the buffer."""

from __future__ import annotations

from .base_mode import KeyInput, ModeResult
from .keymap_helpers import is_text_key
from .keymap_mode import KeymapMode


class InsertMode(KeymapMode):
    name = "insert"

    def fallback(self, key: KeyInput) -> ModeResult:
        text = key.text
        if text is None or not is_text_key(key):
            return ModeResult(consumed=False, status="miss", message="unhandled")
        applied = self.context.engine.insert_char(text)
        return ModeResult(consumed=True, status="edit" if applied else "noop")


__all__ = ["InsertMode"]
