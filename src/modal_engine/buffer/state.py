"""Cursor, selection range, and viewport state."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

Cursor = Tuple[int, int]  # (row, column)
Span = Tuple[Cursor, Cursor]

UNSET: Cursor = (-1, -1)


@dataclass(slots=True)
class SelectionRange:
    """Anchor and moving end of a selection.

    The endpoints keep the order they were dragged in; ``normalized`` gives
    them in document order without touching the stored values.
    """

    start: Cursor = UNSET
    end: Cursor = UNSET
    active: bool = False

    @property
    def is_set(self) -> bool:
        return self.start != UNSET and self.end != UNSET

    def normalized(self) -> Optional[Span]:
        if not self.is_set:
            return None
        if self.end < self.start:
            return self.end, self.start
        return self.start, self.end

    def set(self, start: Cursor, end: Cursor) -> None:
        self.start = start
        self.end = end
        self.active = True

    def clear(self) -> None:
        self.start = UNSET
        self.end = UNSET
        self.active = False


@dataclass(slots=True)
class Viewport:
    """Visible window size plus the row/column scroll offsets."""

    rows: int = 24
    cols: int = 80
    row_offset: int = 0
    col_offset: int = 0

    def resize(self, rows: int, cols: int) -> None:
        self.rows = rows
        self.cols = cols

    def scroll_to(self, cursor: Cursor) -> None:
        row, col = cursor
        if row < self.row_offset:
            self.row_offset = row
        if row >= self.row_offset + self.rows:
            self.row_offset = row - self.rows + 1
        if col < self.col_offset:
            self.col_offset = col
        if col >= self.col_offset + self.cols:
            self.col_offset = col - self.cols + 1
        self.row_offset = max(0, self.row_offset)
        self.col_offset = max(0, self.col_offset)

    def reset(self) -> None:
        self.row_offset = 0
        self.col_offset = 0
