"""Key bindings per mode: value types, a registry, a prefix resolver, defaults."""

from .models import (
    DEFAULT_CHORD_TIMEOUT_MS,
    ActionRef,
    Binding,
    KeySequence,
    KeyStroke,
    WhenClause,
)
from .registry import KeymapConflictError, KeymapRegistry, RegistryStats
from .resolver import KeymapResolver, ResolutionMatch, ResolutionResult
from .defaults import GLOBAL_MODE, load_default_keymaps

__all__ = [
    "DEFAULT_CHORD_TIMEOUT_MS",
    "GLOBAL_MODE",
    "ActionRef",
    "Binding",
    "KeySequence",
    "KeyStroke",
    "KeymapConflictError",
    "KeymapRegistry",
    "KeymapResolver",
    "RegistryStats",
    "ResolutionMatch",
    "ResolutionResult",
    "WhenClause",
    "load_default_keymaps",
]
