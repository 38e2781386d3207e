"""Key read layer with timed reads and a one-key pushback slot."""

from __future__ import annotations

from typing import Callable, Optional

from modal_engine.modes.base_mode import KeyInput

# Host callable: block up to ``timeout`` seconds (forever for ``None``) and
# return the next key, or ``None`` when nothing arrived.
KeySource = Callable[[Optional[float]], Optional[KeyInput]]


class KeyReader:
    """Hands out keys from a host source, replaying a pushed-back key first.

    The slot holds a single key: the second half of a broken chord is pushed
    back and becomes the next read.
    """

    def __init__(self, source: Optional[KeySource] = None) -> None:
        self.source = source
        self._pending: Optional[KeyInput] = None

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def push_back(self, key: KeyInput) -> None:
        if self._pending is not None:
            raise RuntimeError("pushback slot already holds a key")
        self._pending = key

    def read(self, timeout: Optional[float] = None) -> Optional[KeyInput]:
        if self._pending is not None:
            key, self._pending = self._pending, None
            return key
        if self.source is None:
            return None
        return self.source(timeout)


__all__ = ["KeyReader", "KeySource"]
