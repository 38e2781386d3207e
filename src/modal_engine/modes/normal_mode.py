"""Normal mode: navigation, single-key edits and mode switches."""

from __future__ import annotations

from .keymap_mode import KeymapMode


class NormalMode(KeymapMode):
    """Initial mode. Everything it does is bound in the keymap registry.

    ``c`` alone is the prefix of the ``c c`` chord and does nothing once the
    chord times out or is broken.
    """

    name = "normal"


__all__ = ["NormalMode"]
