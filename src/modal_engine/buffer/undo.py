"""Operation records and the two-stack undo/redo log."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from modal_engine.errors import EmptyHistory


class OpKind(str, Enum):
    INSERT_CHAR = "insert_char"
    DELETE_CHAR = "delete_char"
    INSERT_LINE = "insert_line"
    DELETE_LINE = "delete_line"
    NEWLINE = "newline"


@dataclass(frozen=True, slots=True)
class OperationRecord:
    """One reversible edit.

    ``row``/``col`` locate the edit. ``char`` is the character inserted or
    deleted (``"\\n"`` for a row join). ``line`` holds row content for line
    operations and the displaced tail for ``NEWLINE``.
    """

    kind: OpKind
    row: int
    col: int = 0
    char: str = ""
    line: Optional[str] = None


class UndoLog:
    """Undo and redo stacks.

    ``record`` is for fresh edits and drops the redo stack (the edit engine
    does the same in two steps, ``push_undo`` then ``drop_redo`` once the
    whole edit has succeeded). ``undo``/``redo``
    pop from one stack; the caller pushes the applied record onto the other
    with ``push_redo``/``push_undo``, which leave the opposite stack alone.
    """

    def __init__(self) -> None:
        self._undo: List[OperationRecord] = []
        self._redo: List[OperationRecord] = []

    def record(self, entry: OperationRecord) -> None:
        self._undo.append(entry)
        self._redo.clear()

    def drop_redo(self) -> None:
        self._redo.clear()

    def can_undo(self) -> bool:
        return bool(self._undo)

    def can_redo(self) -> bool:
        return bool(self._redo)

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    def undo(self) -> OperationRecord:
        if not self._undo:
            raise EmptyHistory("Nothing to undo")
        return self._undo.pop()

    def redo(self) -> OperationRecord:
        if not self._redo:
            raise EmptyHistory("Nothing to redo")
        return self._redo.pop()

    def push_undo(self, entry: OperationRecord) -> None:
        self._undo.append(entry)

    def push_redo(self, entry: OperationRecord) -> None:
        self._redo.append(entry)

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()
