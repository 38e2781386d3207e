"""Buffer editing, history, clipboard and cursor actions."""

from __future__ import annotations

from modal_engine.keymaps.resolver import ResolutionMatch
from modal_engine.modes.base_mode import ModeContext, ModeResult


def _edited(applied: bool) -> ModeResult:
    return ModeResult(consumed=True, status="edit" if applied else "noop")


def insert_newline(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return _edited(context.engine.insert_newline())


def delete_backward(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return _edited(context.engine.delete_char())


def delete_under_cursor(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return _edited(context.engine.delete_under_cursor())


def undo(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return _edited(context.engine.undo())


def redo(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return _edited(context.engine.redo())


def paste_clipboard(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return _edited(context.engine.selections.paste())


def copy_selection(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    """Copy and drop the selection; a notice is shown when nothing is selected."""

    del match
    selections = context.engine.selections
    copied = selections.copy()
    if copied:
        selections.clear()
    return ModeResult(consumed=True, status="copy" if copied else "noop")


def select_all(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    if not context.engine.selections.select_all():
        return ModeResult(consumed=True, status="noop")
    return ModeResult(consumed=True, switch_to="selection", message="select_all")


def move_cursor(
    context: ModeContext, match: ResolutionMatch, *, direction: str
) -> ModeResult:
    del match
    context.engine.move_cursor(direction)
    return ModeResult(consumed=True, status="motion", message=direction)


__all__ = [
    "insert_newline",
    "delete_backward",
    "delete_under_cursor",
    "undo",
    "redo",
    "paste_clipboard",
    "copy_selection",
    "select_all",
    "move_cursor",
]
