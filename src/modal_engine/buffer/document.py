"""Row storage for a single document."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence

from modal_engine.errors import AllocationFailure, BufferValidationError

from .row import Row


@dataclass(slots=True)
class Buffer:
    """Ordered rows of a document, indexed ``0..line_count-1``.

    An empty document has no rows at all. ``version`` increases on every
    mutation and ``modified`` counts mutations since the last load or save.
    Index checks raise ``BufferValidationError``; callers that must never
    fail (the edit engine) validate first.
    """

    _rows: List[Row] = field(default_factory=list)
    version: int = 0
    modified: int = 0

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "Buffer":
        return cls(_rows=[Row(line) for line in lines])

    @classmethod
    def from_text(cls, text: str) -> "Buffer":
        if not text:
            return cls()
        lines = text.split("\n")
        if text.endswith("\n"):
            lines.pop()
        return cls.from_lines(lines)

    @property
    def line_count(self) -> int:
        return len(self._rows)

    @property
    def is_empty(self) -> bool:
        return not self._rows

    @property
    def dirty(self) -> bool:
        return self.modified > 0

    def snapshot(self) -> Sequence[str]:
        """Return the current lines as an immutable tuple."""

        return tuple(row.text for row in self._rows)

    def text(self) -> str:
        return "\n".join(self.snapshot())

    def row(self, index: int) -> Row:
        self._check_row(index)
        return self._rows[index]

    def get_line(self, index: int) -> str:
        return self.row(index).text

    def row_length(self, index: int) -> int:
        return len(self.row(index))

    def insert_row(self, at: int, text: str = "") -> None:
        if at < 0 or at > len(self._rows):
            raise BufferValidationError("Row insert out of range", cursor=(at, 0))
        try:
            self._rows.insert(at, Row(text))
        except MemoryError as exc:
            raise AllocationFailure("Memory allocation failed") from exc
        self._touch()

    def delete_row(self, at: int) -> str:
        self._check_row(at)
        removed = self._rows.pop(at)
        self._touch()
        return removed.text

    def insert_text(self, row: int, col: int, text: str) -> None:
        target = self.row(row)
        self._check_col(target, row, col)
        try:
            target.insert(col, text)
        except MemoryError as exc:
            raise AllocationFailure("Memory allocation failed") from exc
        self._touch()

    def delete_char(self, row: int, col: int) -> str:
        target = self.row(row)
        if col < 0 or col >= len(target):
            raise BufferValidationError("Column out of range", cursor=(row, col))
        removed = target.delete(col)
        self._touch()
        return removed

    def split_row(self, row: int, col: int) -> str:
        """Move everything right of ``col`` onto a new row below ``row``."""

        target = self.row(row)
        self._check_col(target, row, col)
        tail = target.slice(col)
        self.insert_row(row + 1, tail)
        target.truncate(col)
        return tail

    def join_rows(self, row: int) -> int:
        """Append row ``row + 1`` onto ``row``; return the join column."""

        upper = self.row(row)
        lower = self.row(row + 1)
        join_at = len(upper)
        upper.append(lower.text)
        self._rows.pop(row + 1)
        self._touch()
        return join_at

    def replace_row(self, row: int, text: str) -> None:
        self.row(row).replace(text)
        self._touch()

    def mark_clean(self) -> None:
        self.modified = 0

    def _touch(self) -> None:
        self.version += 1
        self.modified += 1

    def _check_row(self, index: int) -> None:
        if index < 0 or index >= len(self._rows):
            raise BufferValidationError("Row out of range", cursor=(index, 0))

    @staticmethod
    def _check_col(row: Row, index: int, col: int) -> None:
        if col < 0 or col > len(row):
            raise BufferValidationError("Column out of range", cursor=(index, col))
