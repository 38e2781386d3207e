"""Clamping helpers that keep coordinates inside the buffer."""

from __future__ import annotations

from typing import Optional

from .document import Buffer
from .state import Cursor, Span


def clamp_cursor(buffer: Buffer, cursor: Cursor) -> Cursor:
    """Clamp to ``row in [0, line_count]`` and ``col in [0, len(row)]``.

    ``row == line_count`` is the transient past-the-end row and always has
    column 0.
    """

    row, col = cursor
    row = max(0, min(row, buffer.line_count))
    if row == buffer.line_count:
        return (row, 0)
    return (row, max(0, min(col, buffer.row_length(row))))


def clamp_span(buffer: Buffer, span: Span) -> Optional[Span]:
    """Clamp both ends onto existing rows; ``None`` for an empty buffer."""

    if buffer.is_empty:
        return None
    last = buffer.line_count - 1
    start, end = span
    clamped = []
    for row, col in (start, end):
        row = max(0, min(row, last))
        col = max(0, min(col, buffer.row_length(row)))
        clamped.append((row, col))
    first, second = clamped
    if second < first:
        first, second = second, first
    return first, second
