"""Selection lifecycle and clipboard copy/paste."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

from .state import SelectionRange, Span
from .validation import clamp_span

if TYPE_CHECKING:
    from .engine import EditEngine


def _count(n: int) -> str:
    return f"{n} line" if n == 1 else f"{n} lines"


class SelectionController:
    """Drives ``engine.selection`` from the cursor and fills the clipboard."""

    def __init__(self, engine: "EditEngine") -> None:
        self.engine = engine

    @property
    def range(self) -> SelectionRange:
        return self.engine.selection

    def start(self) -> None:
        cursor = self.engine.cursor
        self.range.set(cursor, cursor)

    def update(self) -> None:
        if self.range.active:
            self.range.end = self.engine.cursor

    def clear(self) -> None:
        self.range.clear()

    def normalize(self) -> Optional[Span]:
        return self.range.normalized()

    def select_all(self) -> bool:
        buffer = self.engine.buffer
        if buffer.is_empty:
            return False
        last = buffer.line_count - 1
        self.range.set((0, 0), (last, buffer.row_length(last)))
        self.engine.notify("Selected all text")
        return True

    def copy(self) -> bool:
        """Replace the clipboard with the selected lines.

        The first and last lines are sliced at the selection columns; lines
        in between are taken whole.
        """

        span = self.normalize()
        if span is None:
            self.engine.notify("No selection to copy")
            return False
        buffer = self.engine.buffer
        span = clamp_span(buffer, span)
        if span is None:
            self.engine.notify("No selection to copy")
            return False
        (start_row, start_col), (end_row, end_col) = span
        lines: List[str] = []
        for index in range(start_row, end_row + 1):
            row = buffer.row(index)
            start = start_col if index == start_row else 0
            end = end_col if index == end_row else len(row)
            lines.append(row.slice(start, end))
        self.engine.clipboard.set_lines(lines)
        self.engine.notify(f"Copied {_count(len(lines))}")
        return True

    def paste(self) -> bool:
        """Type the clipboard back in through the edit engine.

        Every character and line break is its own undo step.
        """

        lines = self.engine.clipboard.lines()
        if not lines:
            self.engine.notify("Nothing to paste")
            return False
        for index, line in enumerate(lines):
            if index:
                self.engine.insert_newline()
            for char in line:
                self.engine.insert_char(char)
        self.engine.notify(f"Pasted {_count(len(lines))}")
        return True


__all__ = ["SelectionController"]
