"""Edit engine: cursor-relative edits that log their own inverse."""

from __future__ import annotations

from contextlib import AbstractContextManager
from pathlib import Path
from typing import ContextManager, List, Optional

from modal_engine.errors import AllocationFailure, EmptyHistory
from modal_engine.runtime import telemetry

from .document import Buffer
from .registers import Clipboard
from .selection import SelectionController
from .state import Cursor, SelectionRange, Viewport
from .undo import OperationRecord, OpKind, UndoLog
from .validation import clamp_cursor, clamp_span

MOVES = frozenset(
    {"left", "right", "up", "down", "home", "end", "page_up", "page_down"}
)


class EditEngine:
    """Owns one document plus its cursor, history, selection and clipboard.

    Edits never raise for bad coordinates: the cursor is clamped first and
    impossible operations are no-ops. Each fresh edit records exactly the
    primitive mutations it made, so ``undo`` can walk them back one by one.
    """

    def __init__(
        self,
        *,
        name: str = "default",
        buffer: Optional[Buffer] = None,
        undo_log: Optional[UndoLog] = None,
        clipboard: Optional[Clipboard] = None,
        viewport: Optional[Viewport] = None,
    ) -> None:
        self.name = name
        self.buffer = buffer or Buffer()
        self.undo_log = undo_log or UndoLog()
        self.clipboard = clipboard or Clipboard()
        self.viewport = viewport or Viewport()
        self.selection = SelectionRange()
        self.selections = SelectionController(self)
        self.cursor: Cursor = (0, 0)
        self.path: Optional[Path] = None
        self.status = ""

    @classmethod
    def from_text(cls, text: str, *, name: str = "default") -> "EditEngine":
        return cls(name=name, buffer=Buffer.from_text(text))

    @property
    def modified(self) -> bool:
        return self.buffer.dirty

    def notify(self, message: str, *, level: str = "info") -> None:
        self.status = message
        telemetry.notice(message, level=level, buffer=self.name)

    def set_cursor(self, row: int, col: int) -> Cursor:
        self.cursor = clamp_cursor(self.buffer, (row, col))
        return self.cursor

    def load(self, buffer: Buffer, *, path: Optional[Path] = None) -> None:
        """Swap in a freshly read document and forget all history."""

        self.buffer = buffer
        self.buffer.mark_clean()
        self.undo_log.clear()
        self.selection.clear()
        self.viewport.reset()
        self.cursor = (0, 0)
        self.path = path

    # fresh edits

    def insert_char(self, char: str) -> bool:
        if char == "\n":
            return self.insert_newline()
        if len(char) != 1:
            raise ValueError("insert_char expects a single character")
        row, col = self._edit_cursor()
        with Transaction(self, "insert_char") as tx:
            if row == self.buffer.line_count:
                self.buffer.insert_row(row, "")
                tx.record(OperationRecord(OpKind.INSERT_LINE, row, line=""))
            self.buffer.insert_text(row, col, char)
            tx.record(OperationRecord(OpKind.INSERT_CHAR, row, col, char=char))
            self.cursor = (row, col + 1)
        return tx.ok

    def delete_char(self) -> bool:
        """Backspace: remove the character left of the cursor."""

        row, col = self._edit_cursor()
        if row >= self.buffer.line_count or (row == 0 and col == 0):
            return False
        with Transaction(self, "delete_char") as tx:
            if col > 0:
                removed = self.buffer.delete_char(row, col - 1)
                tx.record(
                    OperationRecord(OpKind.DELETE_CHAR, row, col - 1, char=removed)
                )
                self.cursor = (row, col - 1)
            else:
                # Row boundary: the deleted character is the line break.
                join_at = self.buffer.join_rows(row - 1)
                tx.record(
                    OperationRecord(OpKind.DELETE_CHAR, row - 1, join_at, char="\n")
                )
                self.cursor = (row - 1, join_at)
        return tx.ok

    def delete_under_cursor(self) -> bool:
        row, col = self._edit_cursor()
        if row >= self.buffer.line_count or col >= self.buffer.row_length(row):
            return False
        with Transaction(self, "delete_under_cursor") as tx:
            removed = self.buffer.delete_char(row, col)
            tx.record(OperationRecord(OpKind.DELETE_CHAR, row, col, char=removed))
        return tx.ok

    def insert_newline(self) -> bool:
        row, col = self._edit_cursor()
        with Transaction(self, "insert_newline") as tx:
            if row == self.buffer.line_count:
                self.buffer.insert_row(row, "")
                tx.record(OperationRecord(OpKind.INSERT_LINE, row, line=""))
            tail = self.buffer.split_row(row, col)
            tx.record(OperationRecord(OpKind.NEWLINE, row, col, line=tail))
            self.cursor = (row + 1, 0)
        return tx.ok

    def delete_selection(self) -> bool:
        """Remove the selected span and merge its boundary rows.

        Logged as one ``DELETE_LINE`` per touched row followed by an
        ``INSERT_LINE`` of the merged row.
        """

        span = self.selection.normalized()
        if span is None:
            self.notify("No selection to delete")
            return False
        span = clamp_span(self.buffer, span)
        self.selection.clear()
        if span is None:
            return False
        (start_row, start_col), (end_row, end_col) = span
        if (start_row, start_col) == (end_row, end_col):
            self.cursor = (start_row, start_col)
            return False

        head = self.buffer.get_line(start_row)[:start_col]
        tail = self.buffer.get_line(end_row)[end_col:]
        with Transaction(self, "delete_selection") as tx:
            for _ in range(end_row - start_row + 1):
                removed = self.buffer.delete_row(start_row)
                tx.record(OperationRecord(OpKind.DELETE_LINE, start_row, line=removed))
            self.buffer.insert_row(start_row, head + tail)
            tx.record(OperationRecord(OpKind.INSERT_LINE, start_row, line=head + tail))
            self.cursor = (start_row, start_col)
        return tx.ok

    # history

    def undo(self) -> bool:
        try:
            entry = self.undo_log.undo()
        except EmptyHistory as exc:
            self.notify(str(exc))
            return False
        with Transaction(self, "undo") as tx:
            self._revert(entry)
        if tx.ok:
            self.undo_log.push_redo(entry)
        else:
            self.undo_log.push_undo(entry)
        return tx.ok

    def redo(self) -> bool:
        try:
            entry = self.undo_log.redo()
        except EmptyHistory as exc:
            self.notify(str(exc))
            return False
        with Transaction(self, "redo") as tx:
            self._replay(entry)
        if tx.ok:
            self.undo_log.push_undo(entry)
        else:
            self.undo_log.push_redo(entry)
        return tx.ok

    def _revert(self, entry: OperationRecord) -> None:
        buffer = self.buffer
        row, col = entry.row, entry.col
        count = buffer.line_count
        if entry.kind is OpKind.INSERT_CHAR:
            if row < count and col < buffer.row_length(row):
                buffer.delete_char(row, col)
            self.set_cursor(row, col)
        elif entry.kind is OpKind.DELETE_CHAR:
            if row >= count:
                return
            col = min(col, buffer.row_length(row))
            if entry.char == "\n":
                buffer.split_row(row, col)
                self.set_cursor(row + 1, 0)
            else:
                buffer.insert_text(row, col, entry.char)
                self.set_cursor(row, col)
        elif entry.kind is OpKind.INSERT_LINE:
            if row < count:
                buffer.delete_row(row)
            self.set_cursor(row, 0)
        elif entry.kind is OpKind.DELETE_LINE:
            buffer.insert_row(min(row, count), entry.line or "")
            self.set_cursor(row, 0)
        elif entry.kind is OpKind.NEWLINE:
            if row + 1 < count:
                buffer.join_rows(row)
            self.set_cursor(row, col)

    def _replay(self, entry: OperationRecord) -> None:
        buffer = self.buffer
        row, col = entry.row, entry.col
        count = buffer.line_count
        if entry.kind is OpKind.INSERT_LINE:
            buffer.insert_row(min(row, count), entry.line or "")
            self.set_cursor(row, 0)
            return
        if row >= count:
            return
        col = min(col, buffer.row_length(row))
        if entry.kind is OpKind.INSERT_CHAR:
            buffer.insert_text(row, col, entry.char)
            self.set_cursor(row, col + 1)
        elif entry.kind is OpKind.DELETE_CHAR:
            if entry.char == "\n":
                if row + 1 < count:
                    buffer.join_rows(row)
            elif col < buffer.row_length(row):
                buffer.delete_char(row, col)
            self.set_cursor(row, col)
        elif entry.kind is OpKind.DELETE_LINE:
            buffer.delete_row(row)
            self.set_cursor(row, 0)
        elif entry.kind is OpKind.NEWLINE:
            displaced = buffer.split_row(row, col)
            restored = entry.line or ""
            if displaced != restored:
                # Rows changed since the undo; the recorded tail wins.
                telemetry.record_event(
                    "history.stale_newline",
                    level="warning",
                    data={"row": row, "col": col, "displaced": displaced},
                )
                buffer.replace_row(row + 1, restored)
            self.set_cursor(row + 1, 0)

    # cursor movement

    def move_cursor(self, direction: str) -> Cursor:
        if direction not in MOVES:
            raise ValueError(f"Unknown direction '{direction}'")
        buffer = self.buffer
        count = buffer.line_count
        row, col = clamp_cursor(buffer, self.cursor)

        def length(index: int) -> int:
            return buffer.row_length(index) if index < count else 0

        if direction == "left":
            if col > 0:
                col -= 1
            elif row > 0:
                row -= 1
                col = length(row)
        elif direction == "right":
            if row < count and col < length(row):
                col += 1
            elif row < count - 1:
                row, col = row + 1, 0
        elif direction == "up":
            if row > 0:
                row -= 1
                col = min(col, length(row))
        elif direction == "down":
            if row < count - 1:
                row += 1
                col = min(col, length(row))
        elif direction == "home":
            col = 0
        elif direction == "end":
            col = length(row)
        elif direction == "page_up":
            row = max(0, self.viewport.row_offset - self.viewport.rows)
            col = min(col, length(row))
        elif direction == "page_down":
            bottom = self.viewport.row_offset + self.viewport.rows - 1
            row = max(0, min(bottom + self.viewport.rows, count - 1))
            col = min(col, length(row))

        return self.set_cursor(row, col)

    def _edit_cursor(self) -> Cursor:
        self.cursor = clamp_cursor(self.buffer, self.cursor)
        return self.cursor


class Transaction(AbstractContextManager["Transaction"]):
    """Wraps one logical edit in a telemetry span.

    ``AllocationFailure`` raised inside is reported as a notice and
    swallowed: records already applied are reverted and dropped from the
    undo log, so the document, cursor and history are left as they were.
    """

    def __init__(self, engine: EditEngine, label: str) -> None:
        self.engine = engine
        self.label = label
        self.ok = True
        self.records: List[OperationRecord] = []
        self._span_cm: Optional[ContextManager[object]] = None
        self._before_cursor: Cursor | None = None
        self._before_modified = 0

    def __enter__(self) -> "Transaction":
        self._before_cursor = self.engine.cursor
        self._before_modified = self.engine.buffer.modified
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            component=True,
            metadata={"buffer": self.engine.name},
        )
        self._span_cm.__enter__()
        return self

    def record(self, entry: OperationRecord) -> None:
        self.engine.undo_log.push_undo(entry)
        self.records.append(entry)

    def _rollback(self) -> None:
        engine = self.engine
        for entry in reversed(self.records):
            engine.undo_log.undo()
            engine._revert(entry)
        self.records.clear()
        engine.buffer.modified = self._before_modified
        if self._before_cursor is not None:
            engine.cursor = self._before_cursor

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        if exc_type is not None and issubclass(exc_type, AllocationFailure):
            self.ok = False
            self._rollback()
            self.engine.notify(str(exc), level="error")
            return True
        if exc_type is None and self.records:
            # A fresh edit invalidates whatever could be redone.
            self.engine.undo_log.drop_redo()
        return False


__all__ = ["EditEngine", "Transaction", "MOVES"]
