"""Document storage, edit engine, undo log, selection and clipboard."""

from .document import Buffer
from .engine import MOVES, EditEngine, Transaction
from .registers import Clipboard
from .row import Row
from .selection import SelectionController
from .state import UNSET, Cursor, SelectionRange, Span, Viewport
from .sync import RenderSync, ViewSnapshot
from .undo import OperationRecord, OpKind, UndoLog
from .validation import clamp_cursor, clamp_span

__all__ = [
    "Buffer",
    "Row",
    "EditEngine",
    "Transaction",
    "MOVES",
    "Clipboard",
    "SelectionController",
    "SelectionRange",
    "Viewport",
    "Cursor",
    "Span",
    "UNSET",
    "OperationRecord",
    "OpKind",
    "UndoLog",
    "ViewSnapshot",
    "RenderSync",
    "clamp_cursor",
    "clamp_span",
]
