from __future__ import annotations

from modal_engine.buffer import UNSET, EditEngine, SelectionRange, Viewport


def test_selection_range_normalizes_without_mutating() -> None:
    selection = SelectionRange()
    assert selection.normalized() is None

    selection.set((2, 1), (0, 4))

    assert selection.normalized() == ((0, 4), (2, 1))
    assert selection.start == (2, 1)

    selection.clear()
    assert (selection.start, selection.end, selection.active) == (UNSET, UNSET, False)


def test_start_and_update_follow_cursor() -> None:
    engine = EditEngine.from_text("hello\nworld")
    engine.set_cursor(0, 1)
    engine.selections.start()

    engine.set_cursor(1, 2)
    engine.selections.update()

    assert engine.selections.normalize() == ((0, 1), (1, 2))


def test_update_without_active_selection_is_ignored() -> None:
    engine = EditEngine.from_text("hello")

    engine.selections.update()

    assert engine.selection.is_set is False


def test_select_all_spans_document() -> None:
    engine = EditEngine.from_text("ab\nc")

    assert engine.selections.select_all() is True
    assert engine.selection.normalized() == ((0, 0), (1, 1))
    assert engine.status == "Selected all text"

    assert EditEngine().selections.select_all() is False


def test_copy_slices_first_and_last_lines() -> None:
    engine = EditEngine.from_text("hello\nbig\nworld")
    engine.selection.set((0, 2), (2, 3))

    assert engine.selections.copy() is True

    assert engine.clipboard.lines() == ("llo", "big", "wor")
    assert engine.status == "Copied 3 lines"


def test_copy_replaces_previous_clipboard() -> None:
    engine = EditEngine.from_text("one\ntwo")
    engine.selection.set((0, 0), (0, 3))
    engine.selections.copy()

    engine.selection.set((1, 0), (1, 2))
    engine.selections.copy()

    assert engine.clipboard.lines() == ("tw",)
    assert engine.status == "Copied 1 line"


def test_copy_and_paste_empty_states() -> None:
    engine = EditEngine.from_text("abc")

    assert engine.selections.copy() is False
    assert engine.status == "No selection to copy"
    assert engine.selections.paste() is False
    assert engine.status == "Nothing to paste"


def test_viewport_scrolls_to_keep_cursor_visible() -> None:
    viewport = Viewport(rows=3, cols=20)

    viewport.scroll_to((5, 25))
    assert (viewport.row_offset, viewport.col_offset) == (3, 6)

    viewport.scroll_to((1, 0))
    assert (viewport.row_offset, viewport.col_offset) == (1, 0)

    viewport.reset()
    assert (viewport.row_offset, viewport.col_offset) == (0, 0)
