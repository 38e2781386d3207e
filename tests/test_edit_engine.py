from __future__ import annotations

import pytest

from modal_engine.buffer import Buffer, EditEngine, OpKind
from modal_engine.errors import AllocationFailure


def type_text(engine: EditEngine, text: str) -> None:
    for char in text:
        engine.insert_char(char)


def test_insert_on_empty_document(engine: EditEngine) -> None:
    type_text(engine, "hi")

    assert engine.buffer.snapshot() == ("hi",)
    assert engine.cursor == (0, 2)
    assert engine.modified


def test_newline_on_empty_document(engine: EditEngine) -> None:
    engine.insert_newline()

    assert engine.buffer.snapshot() == ("", "")
    assert engine.cursor == (1, 0)
    kinds = [engine.undo_log.undo().kind for _ in range(2)]
    assert kinds == [OpKind.NEWLINE, OpKind.INSERT_LINE]


def test_newline_splits_row_at_cursor() -> None:
    engine = EditEngine.from_text("hello")
    engine.set_cursor(0, 2)

    engine.insert_char("\n")

    assert engine.buffer.snapshot() == ("he", "llo")
    assert engine.cursor == (1, 0)


def test_backspace_at_origin_is_noop() -> None:
    engine = EditEngine.from_text("abc")

    assert engine.delete_char() is False
    assert engine.buffer.snapshot() == ("abc",)
    assert engine.undo_log.undo_depth == 0


def test_backspace_at_row_start_joins_rows() -> None:
    engine = EditEngine.from_text("ab\ncd")
    engine.set_cursor(1, 0)

    engine.delete_char()

    assert engine.buffer.snapshot() == ("abcd",)
    assert engine.cursor == (0, 2)

    engine.undo()
    assert engine.buffer.snapshot() == ("ab", "cd")
    assert engine.cursor == (1, 0)


def test_delete_under_cursor() -> None:
    engine = EditEngine.from_text("abc")
    engine.set_cursor(0, 1)

    assert engine.delete_under_cursor() is True
    assert engine.buffer.snapshot() == ("ac",)
    assert engine.cursor == (0, 1)

    engine.set_cursor(0, 2)
    assert engine.delete_under_cursor() is False


def test_cursor_is_clamped_before_editing() -> None:
    engine = EditEngine.from_text("ab")
    engine.cursor = (7, 9)

    engine.insert_char("x")

    assert engine.buffer.snapshot() == ("ab", "x")
    assert engine.cursor == (1, 1)


def test_move_cursor_wraps_and_clamps() -> None:
    engine = EditEngine.from_text("abc\nd\nefgh")

    engine.set_cursor(1, 0)
    assert engine.move_cursor("left") == (0, 3)
    assert engine.move_cursor("right") == (1, 0)
    engine.set_cursor(0, 3)
    assert engine.move_cursor("down") == (1, 1)
    assert engine.move_cursor("end") == (1, 1)
    assert engine.move_cursor("down") == (2, 1)
    assert engine.move_cursor("home") == (2, 0)
    assert engine.move_cursor("down") == (2, 0)
    assert engine.move_cursor("page_up") == (0, 0)
    assert engine.move_cursor("page_down") == (2, 0)

    with pytest.raises(ValueError):
        engine.move_cursor("sideways")


def test_load_resets_history_and_cursor() -> None:
    engine = EditEngine()
    type_text(engine, "abc")

    engine.load(Buffer.from_lines(["x"]))

    assert engine.cursor == (0, 0)
    assert engine.undo_log.can_undo() is False
    assert engine.modified is False


def test_allocation_failure_leaves_document_unchanged(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    engine = EditEngine.from_text("ab")
    engine.set_cursor(0, 1)

    def fail(self: Buffer, row: int, col: int, text: str) -> None:
        raise AllocationFailure("Memory allocation failed")

    monkeypatch.setattr(Buffer, "insert_text", fail)

    assert engine.insert_char("x") is False
    assert engine.buffer.snapshot() == ("ab",)
    assert engine.cursor == (0, 1)
    assert engine.status == "Memory allocation failed"
    assert engine.undo_log.undo_depth == 0


def test_insert_char_rejects_multiple_characters(engine: EditEngine) -> None:
    with pytest.raises(ValueError):
        engine.insert_char("ab")


def test_allocation_failure_rolls_back_partial_edit(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    engine = EditEngine.from_text("ab")
    engine.insert_char("c")
    engine.undo()
    modified = engine.buffer.modified
    engine.set_cursor(1, 0)

    def fail(self: Buffer, row: int, col: int, text: str) -> None:
        raise AllocationFailure("Memory allocation failed")

    monkeypatch.setattr(Buffer, "insert_text", fail)

    # Row 1 does not exist yet: the row is added, then the character fails.
    assert engine.insert_char("x") is False
    assert engine.buffer.snapshot() == ("ab",)
    assert engine.cursor == (1, 0)
    assert engine.buffer.modified == modified
    assert engine.undo_log.undo_depth == 0
    assert engine.undo_log.redo_depth == 1


def test_newline_failure_removes_added_row(monkeypatch: pytest.MonkeyPatch) -> None:
    engine = EditEngine()

    def fail(self: Buffer, row: int, col: int) -> str:
        raise AllocationFailure("Memory allocation failed")

    monkeypatch.setattr(Buffer, "split_row", fail)

    assert engine.insert_newline() is False
    assert engine.buffer.snapshot() == ()
    assert engine.modified is False
    assert engine.undo_log.undo_depth == 0
