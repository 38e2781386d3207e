"""Editing verbs bound to keys by the default keymaps."""

from .core import (
    ABOUT_TEXT,
    HELP_TEXT,
    cancel_command_line,
    enter_command_mode,
    enter_insert_mode,
    enter_selection_mode,
    exit_insert_mode,
    exit_to_normal_mode,
    noop_action,
    quit_editor,
    show_about,
    show_help,
)
from .editing import (
    copy_selection,
    delete_backward,
    delete_under_cursor,
    insert_newline,
    move_cursor,
    paste_clipboard,
    redo,
    select_all,
    undo,
)
from .selection import delete_selection, extend_selection, yank_selection
from .command import (
    UNSAVED_CHANGES,
    append_command_char,
    command_backspace,
    command_history,
    command_state,
    execute_command,
    normalize_command,
    submit_command_line,
)

__all__ = [
    "ABOUT_TEXT",
    "HELP_TEXT",
    "UNSAVED_CHANGES",
    "append_command_char",
    "command_backspace",
    "cancel_command_line",
    "enter_command_mode",
    "enter_insert_mode",
    "enter_selection_mode",
    "exit_insert_mode",
    "exit_to_normal_mode",
    "noop_action",
    "quit_editor",
    "show_about",
    "show_help",
    "copy_selection",
    "delete_backward",
    "delete_under_cursor",
    "insert_newline",
    "move_cursor",
    "paste_clipboard",
    "redo",
    "select_all",
    "undo",
    "delete_selection",
    "extend_selection",
    "yank_selection",
    "command_history",
    "command_state",
    "execute_command",
    "normalize_command",
    "submit_command_line",
]
