"""Actions dedicated to Selection mode."""

from __future__ import annotations

from modal_engine.keymaps.resolver import ResolutionMatch
from modal_engine.modes.base_mode import ModeContext, ModeResult


def extend_selection(
    context: ModeContext, match: ResolutionMatch, *, direction: str
) -> ModeResult:
    del match
    engine = context.engine
    engine.move_cursor(direction)
    engine.selections.update()
    context.bus.emit(
        "selection.extend",
        {"anchor": engine.selection.start, "cursor": engine.cursor},
    )
    return ModeResult(consumed=True, status="selection_extend", message=direction)


def yank_selection(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    selections = context.engine.selections
    selections.copy()
    selections.clear()
    return ModeResult(consumed=True, switch_to="normal", status="selection_yank")


def delete_selection(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    """Copy the selection, then cut it out of the buffer."""

    del match
    engine = context.engine
    engine.selections.copy()
    applied = engine.delete_selection()
    return ModeResult(
        consumed=True,
        switch_to="normal",
        status="selection_delete" if applied else "noop",
    )


__all__ = ["extend_selection", "yank_selection", "delete_selection"]
