"""Core action implementations shared across modes."""

from __future__ import annotations

from modal_engine.keymaps.resolver import ResolutionMatch
from modal_engine.modes.base_mode import EditorEffect, ModeContext, ModeResult

HELP_TEXT = "HELP: cc=insert | Ctrl+Z=undo | Ctrl+Y=redo | Ctrl+A=select | Ctrl+K=copy"
ABOUT_TEXT = "ABC Vi v0.0.3 - A difficult terminal-based text editor"


def enter_insert_mode(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.engine.notify("-- INSERT --")
    return ModeResult(consumed=True, switch_to="insert", message="enter_insert")


def exit_insert_mode(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    """Back to Normal, stepping the cursor one column left like vi does."""

    del match
    engine = context.engine
    row, col = engine.cursor
    if col > 0 and not engine.buffer.is_empty:
        engine.set_cursor(row, col - 1)
    engine.notify("-- NORMAL --")
    return ModeResult(consumed=True, switch_to="normal", message="exit_insert")


def exit_to_normal_mode(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.engine.notify("-- NORMAL --")
    return ModeResult(consumed=True, switch_to="normal", message="exit_to_normal")


def enter_selection_mode(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.engine.selections.start()
    context.engine.notify("-- VISUAL --")
    return ModeResult(consumed=True, switch_to="selection", message="enter_selection")


def enter_command_mode(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return ModeResult(consumed=True, switch_to="command", message="enter_command")


def cancel_command_line(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.engine.status = ""
    return ModeResult(consumed=True, switch_to="normal", message="cancel_command")


def quit_editor(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del context, match
    return ModeResult(consumed=True, status="quit", effect=EditorEffect.quit())


def show_help(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.engine.notify(HELP_TEXT)
    return ModeResult(consumed=True, status="help")


def show_about(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.engine.notify(ABOUT_TEXT)
    return ModeResult(consumed=True, status="about")


def noop_action(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del context, match
    return ModeResult(consumed=True, status="noop")


__all__ = [
    "HELP_TEXT",
    "ABOUT_TEXT",
    "enter_insert_mode",
    "exit_insert_mode",
    "exit_to_normal_mode",
    "enter_selection_mode",
    "enter_command_mode",
    "cancel_command_line",
    "quit_editor",
    "show_help",
    "show_about",
    "noop_action",
]
