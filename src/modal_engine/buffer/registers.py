"""Single-slot clipboard holding copied lines."""

from __future__ import annotations

from typing import Iterable, List, Sequence


class Clipboard:
    """Ordered lines from the most recent copy; each copy replaces the last."""

    def __init__(self) -> None:
        self._lines: List[str] = []

    def __len__(self) -> int:
        return len(self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def set_lines(self, lines: Iterable[str]) -> None:
        self._lines = list(lines)

    def lines(self) -> Sequence[str]:
        return tuple(self._lines)

    def text(self) -> str:
        return "\n".join(self._lines)

    def clear(self) -> None:
        self._lines = []
