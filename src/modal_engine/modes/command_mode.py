"""Command-line mode: collects a ``:`` command and hands it to the executor."""

from __future__ import annotations

from typing import Optional

from modal_engine.actions.command import append_command_char, command_state

from .base_mode import KeyInput, ModeContext, ModeResult
from .keymap_helpers import is_text_key, update_flag
from .keymap_mode import KeymapMode


class CommandMode(KeymapMode):
    name = "command"

    def __init__(self, context: ModeContext) -> None:
        super().__init__(context)
        command_state(context)

    @property
    def current_command(self) -> str:
        return str(command_state(self.context)["text"])

    def on_enter(self, previous: Optional[str]) -> None:
        del previous
        command_state(self.context)["text"] = ""
        update_flag(self.context, "command_active", True)
        self.context.bus.emit("command.start", None)

    def on_exit(self, next_mode: Optional[str]) -> None:
        super().on_exit(next_mode)
        update_flag(self.context, "command_active", False)
        self.context.bus.emit("command.end", self.current_command)
        command_state(self.context)["text"] = ""

    def fallback(self, key: KeyInput) -> ModeResult:
        text = key.text
        if text is None or text == "\t" or not is_text_key(key):
            return ModeResult(consumed=False, status="miss", message="unhandled")
        append_command_char(self.context, text)
        return ModeResult(consumed=True, status="editing")


__all__ = ["CommandMode"]
