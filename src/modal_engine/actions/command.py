"""Actions that evaluate ``:`` command lines."""

from __future__ import annotations

from collections import deque
from functools import partial
from typing import Callable, Deque, Dict, MutableMapping, Optional, cast

from modal_engine import fileio
from modal_engine.errors import InvalidCommand
from modal_engine.keymaps.resolver import ResolutionMatch
from modal_engine.modes.base_mode import EditorEffect, ModeContext, ModeResult

CommandHandler = Callable[[ModeContext, str], ModeResult]

UNSAVED_CHANGES = "No write since last change (add ! to override)"
_DISPLAY_LIMIT = 59


def command_state(context: ModeContext) -> MutableMapping[str, object]:
    """Per-session command line state: the typed text and recent commands."""

    state = cast(
        MutableMapping[str, object], context.extras.setdefault("command_state", {})
    )
    state.setdefault("text", "")
    if "history" not in state:
        state["history"] = deque(maxlen=context.config.command_history)
    return state


def command_history(context: ModeContext) -> Deque[str]:
    return cast(Deque[str], command_state(context)["history"])


def normalize_command(raw: str) -> str:
    """Drop surrounding whitespace and any run of leading colons."""

    return raw.strip().lstrip(":").strip()


def append_command_char(context: ModeContext, char: str) -> None:
    """Add ``char`` to the command line; a leading ``:`` is not doubled."""

    state = command_state(context)
    text = str(state["text"])
    if char == ":" and not text:
        return
    state["text"] = text + char


def command_backspace(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    state = command_state(context)
    state["text"] = str(state["text"])[:-1]
    return ModeResult(consumed=True, status="command_edit")


def submit_command_line(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    state = command_state(context)
    text = normalize_command(str(state.get("text", "")))
    state["text"] = ""
    context.bus.emit("command.submit", text)
    if not text:
        return ModeResult(consumed=True, switch_to="normal", status="command_empty")
    command_history(context).append(text)
    return execute_command(context, text)


def execute_command(context: ModeContext, text: str) -> ModeResult:
    """Run one normalized command such as ``"w notes.txt"`` or ``"q!"``."""

    text = normalize_command(text)
    name, _, argument = text.partition(" ")
    handler = _COMMAND_HANDLERS.get(name)
    try:
        if handler is None:
            raise InvalidCommand(
                f"Unknown command: :{text[:_DISPLAY_LIMIT - 1]}", command=name
            )
        return handler(context, argument.strip())
    except InvalidCommand as exc:
        context.bus.emit("command.error", exc.command)
        context.engine.notify(str(exc), level="warning")
        return ModeResult(
            consumed=True, switch_to="normal", status="command_error", message=name
        )


def _done(status: str, effect: Optional[EditorEffect] = None) -> ModeResult:
    return ModeResult(consumed=True, switch_to="normal", status=status, effect=effect)


def _handle_quit(
    context: ModeContext, argument: str, *, force: bool = False
) -> ModeResult:
    del argument
    if context.engine.modified and not force:
        context.engine.notify(UNSAVED_CHANGES, level="warning")
        blocked = EditorEffect.quit_blocked(UNSAVED_CHANGES)
        return _done("command_quit_blocked", blocked)
    return _done("command_quit", EditorEffect.quit())


def _handle_write(context: ModeContext, argument: str) -> ModeResult:
    result = fileio.write_from(context.engine, argument or None)
    return _done("command_write" if result.ok else "command_write_failed")


def _handle_write_quit(context: ModeContext, argument: str) -> ModeResult:
    result = fileio.write_from(context.engine, argument or None)
    if not result.ok:
        return _done("command_write_failed")
    return _done("command_write_quit", EditorEffect.quit())


def _handle_edit(
    context: ModeContext, argument: str, *, force: bool = False
) -> ModeResult:
    engine = context.engine
    if not argument:
        engine.notify("Error: No filename", level="error")
        return _done("command_edit_failed")
    if engine.modified and not force:
        engine.notify(UNSAVED_CHANGES, level="warning")
        return _done("command_edit_blocked")
    opened = fileio.open_into(engine, argument)
    return _done("command_edit" if opened else "command_edit_failed")


_COMMAND_HANDLERS: Dict[str, CommandHandler] = {
    "q": _handle_quit,
    "quit": _handle_quit,
    "q!": partial(_handle_quit, force=True),
    "quit!": partial(_handle_quit, force=True),
    "w": _handle_write,
    "write": _handle_write,
    "wq": _handle_write_quit,
    "sq": _handle_write_quit,
    "e": _handle_edit,
    "edit": _handle_edit,
    "e!": partial(_handle_edit, force=True),
    "edit!": partial(_handle_edit, force=True),
}


__all__ = [
    "UNSAVED_CHANGES",
    "command_state",
    "append_command_char",
    "command_backspace",
    "command_history",
    "normalize_command",
    "submit_command_line",
    "execute_command",
]
