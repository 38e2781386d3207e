from __future__ import annotations

import pytest

from modal_engine.buffer import EditEngine, OperationRecord, OpKind, UndoLog
from modal_engine.errors import EmptyHistory
from modal_engine.runtime import telemetry


def edit_session(engine: EditEngine) -> int:
    """Apply a mixed run of edits and return how many records it logged."""

    engine.set_cursor(0, 5)
    engine.insert_char(" ")
    engine.insert_char("x")
    engine.insert_newline()
    engine.delete_char()
    engine.delete_char()
    engine.set_cursor(1, 0)
    engine.delete_under_cursor()
    return engine.undo_log.undo_depth


def test_undo_log_stacks() -> None:
    log = UndoLog()
    entry = OperationRecord(OpKind.INSERT_CHAR, 0, 0, char="a")

    log.record(entry)
    assert log.undo() == entry
    log.push_redo(entry)
    assert log.can_redo()

    log.record(entry)
    assert log.can_redo() is False
    with pytest.raises(EmptyHistory, match="Nothing to redo"):
        log.redo()


def test_undo_all_restores_loaded_text() -> None:
    engine = EditEngine.from_text("hello\nworld")
    loaded = engine.buffer.snapshot()

    edit_session(engine)
    assert engine.buffer.snapshot() == ("hello ", "orld")

    while engine.undo():
        pass

    assert engine.buffer.snapshot() == loaded
    assert engine.status == "Nothing to undo"


def test_redo_replays_every_undone_edit() -> None:
    engine = EditEngine.from_text("hello\nworld")
    depth = edit_session(engine)
    edited = engine.buffer.snapshot()

    for _ in range(depth):
        assert engine.undo()
    for _ in range(depth):
        assert engine.redo()

    assert engine.buffer.snapshot() == edited
    assert engine.undo_log.redo_depth == 0


def test_fresh_edit_clears_redo() -> None:
    engine = EditEngine()
    engine.insert_char("a")
    engine.insert_char("b")

    engine.undo()
    engine.insert_char("c")

    assert engine.redo() is False
    assert engine.status == "Nothing to redo"
    assert engine.buffer.snapshot() == ("ac",)


def test_undo_from_empty_document_removes_rows() -> None:
    engine = EditEngine()
    engine.insert_char("a")
    engine.insert_newline()

    while engine.undo():
        pass

    assert engine.buffer.snapshot() == ()
    assert engine.cursor == (0, 0)


def test_delete_selection_is_undoable() -> None:
    engine = EditEngine.from_text("hello\nworld")
    engine.selection.set((1, 3), (0, 2))

    assert engine.delete_selection() is True
    assert engine.buffer.snapshot() == ("held",)
    assert engine.cursor == (0, 2)
    assert engine.selection.is_set is False

    for _ in range(3):
        engine.undo()
    assert engine.buffer.snapshot() == ("hello", "world")


def test_delete_selection_without_selection() -> None:
    engine = EditEngine.from_text("hello")

    assert engine.delete_selection() is False
    assert engine.status == "No selection to delete"


def test_paste_is_undoable_per_character() -> None:
    engine = EditEngine.from_text("ab\ncd")
    engine.selection.set((0, 0), (1, 1))
    engine.selections.copy()
    engine.selections.clear()
    engine.set_cursor(1, 2)
    before = engine.undo_log.undo_depth

    assert engine.selections.paste() is True

    assert engine.buffer.snapshot() == ("ab", "cdab", "c")
    assert engine.undo_log.undo_depth - before == 4
    assert engine.status == "Pasted 2 lines"
    for _ in range(4):
        engine.undo()
    assert engine.buffer.snapshot() == ("ab", "cd")


def test_redo_newline_over_changed_row_keeps_recorded_tail(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    events: list[tuple[str, dict]] = []
    monkeypatch.setattr(
        telemetry,
        "record_event",
        lambda name, **kwargs: events.append((name, kwargs.get("data") or {})),
    )
    engine = EditEngine.from_text("abcd")
    engine.set_cursor(0, 2)
    engine.insert_newline()
    engine.undo()
    # Edited behind the log's back, so the redo stack survives.
    engine.buffer.replace_row(0, "abXYZ")

    assert engine.redo() is True

    assert engine.buffer.snapshot() == ("ab", "cd")
    assert engine.cursor == (1, 0)
    stale = [data for name, data in events if name == "history.stale_newline"]
    assert stale == [{"row": 0, "col": 2, "displaced": "XYZ"}]
