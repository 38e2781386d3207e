"""A single mutable line of text."""

from __future__ import annotations

from typing import List


class Row:
    """Owns the characters of one line.

    Characters live in a list so in-row inserts and deletes mutate in place;
    ``text`` materializes the line on demand.
    """

    __slots__ = ("_chars",)

    def __init__(self, text: str = "") -> None:
        self._chars: List[str] = list(text)

    def __len__(self) -> int:
        return len(self._chars)

    def __repr__(self) -> str:
        return f"Row({self.text!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Row):
            return self._chars == other._chars
        return NotImplemented

    @property
    def text(self) -> str:
        return "".join(self._chars)

    def char_at(self, col: int) -> str:
        return self._chars[col]

    def insert(self, col: int, text: str) -> None:
        self._chars[col:col] = text

    def delete(self, col: int) -> str:
        return self._chars.pop(col)

    def append(self, text: str) -> None:
        self._chars.extend(text)

    def truncate(self, col: int) -> str:
        """Cut the row at ``col`` and return the removed tail."""

        tail = "".join(self._chars[col:])
        del self._chars[col:]
        return tail

    def slice(self, start: int, end: int | None = None) -> str:
        return "".join(self._chars[start:end])

    def replace(self, text: str) -> None:
        self._chars[:] = text
