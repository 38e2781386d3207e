"""Error taxonomy shared by the buffer, file, and command layers.

Nothing here is fatal: each error is raised where it is detected and turned
into a status notice at the engine or session boundary.
"""

from __future__ import annotations

from typing import Optional, Tuple


class EditorError(RuntimeError):
    """Base class for recoverable editor failures."""


class AllocationFailure(EditorError):
    """A row or undo record could not be allocated; the document is unchanged."""


class IOFailure(EditorError):
    """A file could not be read or written."""

    def __init__(self, message: str, *, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path


class InvalidCommand(EditorError):
    """Command-line text did not name a known command."""

    def __init__(self, message: str, *, command: str = "") -> None:
        super().__init__(message)
        self.command = command


class EmptyHistory(EditorError):
    """Undo or redo was requested with nothing on the source stack."""


class BufferValidationError(IndexError):
    """Raised when a row or column index falls outside the buffer."""

    def __init__(self, message: str, *, cursor: Tuple[int, int] | None = None) -> None:
        super().__init__(message)
        self.cursor = cursor


__all__ = [
    "EditorError",
    "AllocationFailure",
    "IOFailure",
    "InvalidCommand",
    "EmptyHistory",
    "BufferValidationError",
]
