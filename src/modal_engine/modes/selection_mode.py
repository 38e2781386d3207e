"""Selection mode: cursor motions stretch the selection from its anchor."""

from __future__ import annotations

from typing import Optional

from .keymap_helpers import update_flag
from .keymap_mode import KeymapMode


class SelectionMode(KeymapMode):
    name = "selection"

    def on_enter(self, previous: Optional[str]) -> None:
        del previous
        update_flag(self.context, "selection_active", True)

    def on_exit(self, next_mode: Optional[str]) -> None:
        super().on_exit(next_mode)
        update_flag(self.context, "selection_active", False)
        self.context.engine.selections.clear()


__all__ = ["SelectionMode"]
