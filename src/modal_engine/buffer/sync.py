"""Boundary types shared with rendering hosts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Tuple, runtime_checkable

from .state import Cursor, Span


@dataclass(frozen=True, slots=True)
class ViewSnapshot:
    """Read-only picture of what a renderer should paint.

    ``rows`` holds only the visible slice, already shifted by the viewport's
    column offset. ``cursor`` is relative to the viewport origin.
    """

    rows: Tuple[str, ...]
    cursor: Cursor
    mode: str
    status: str
    command: str = ""
    selection: Optional[Span] = None
    row_offset: int = 0
    col_offset: int = 0
    line_count: int = 0
    modified: bool = False
    filename: Optional[str] = None


@runtime_checkable
class RenderSync(Protocol):
    """What a host renderer needs from the core."""

    def render_view(self) -> ViewSnapshot:
        """Return the snapshot to paint."""
        ...

    def update_viewport_size(self, rows: int, cols: int) -> None:
        """Report the text area size; must not change document text."""
        ...


__all__ = ["ViewSnapshot", "RenderSync"]
