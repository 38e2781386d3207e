"""Core editing engine for a modal, line-based text editor."""

__all__ = [
    "adapters",
    "buffer",
    "actions",
    "modes",
    "keymaps",
    "runtime",
    "session",
]

__version__ = "0.1.0"
