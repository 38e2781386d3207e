"""Mode state machine: key dispatch for Normal, Insert, Command and Selection."""

from .base_mode import (
    EditorEffect,
    EffectKind,
    KeyInput,
    Mode,
    ModeBus,
    ModeContext,
    ModeResult,
)
from .keymap_mode import KeymapMode
from .normal_mode import NormalMode
from .insert_mode import InsertMode
from .command_mode import CommandMode
from .selection_mode import SelectionMode
from .mode_manager import ModeManager

__all__ = [
    "EditorEffect",
    "EffectKind",
    "KeyInput",
    "Mode",
    "ModeBus",
    "ModeContext",
    "ModeResult",
    "KeymapMode",
    "NormalMode",
    "InsertMode",
    "CommandMode",
    "SelectionMode",
    "ModeManager",
]
