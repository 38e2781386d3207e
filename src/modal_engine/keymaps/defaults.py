"""Built-in keymaps that seed each mode with the editor's key table."""

from __future__ import annotations

from functools import partial
from typing import Iterable, Sequence

from .models import ActionRef, Binding, KeySequence
from .registry import KeymapRegistry

GLOBAL_MODE = "global"

# (direction, keys in Normal/Selection, keys in Insert)
MOTIONS: tuple[tuple[str, tuple[str, ...], tuple[str, ...]], ...] = (
    ("left", ("h", "LEFT"), ("LEFT",)),
    ("right", ("l", "RIGHT"), ("RIGHT",)),
    ("up", ("k", "UP"), ("UP",)),
    ("down", ("j", "DOWN"), ("DOWN",)),
    ("home", ("0", "HOME"), ("HOME",)),
    ("end", ("$", "END"), ("END",)),
    ("page_up", ("PAGEUP",), ("PAGEUP",)),
    ("page_down", ("PAGEDOWN",), ("PAGEDOWN",)),
)


def default_actions() -> tuple[ActionRef, ...]:
    """Every action the default bindings point at."""

    from modal_engine.actions import command as command_actions
    from modal_engine.actions import core as core_actions
    from modal_engine.actions import editing as editing_actions
    from modal_engine.actions import selection as selection_actions

    actions = [
        ActionRef("core.quit", core_actions.quit_editor, "Quit immediately"),
        ActionRef("core.help", core_actions.show_help, "Show key help"),
        ActionRef("core.about", core_actions.show_about, "Show version banner"),
        ActionRef(
            "core.enter_insert", core_actions.enter_insert_mode, "Enter insert mode"
        ),
        ActionRef(
            "core.exit_insert", core_actions.exit_insert_mode, "Leave insert mode"
        ),
        ActionRef(
            "core.exit_to_normal", core_actions.exit_to_normal_mode, "Return to normal"
        ),
        ActionRef(
            "core.enter_selection",
            core_actions.enter_selection_mode,
            "Start a selection at the cursor",
        ),
        ActionRef(
            "core.enter_command", core_actions.enter_command_mode, "Open command line"
        ),
        ActionRef(
            "core.cancel_command",
            core_actions.cancel_command_line,
            "Discard the command line",
        ),
        ActionRef("edit.newline", editing_actions.insert_newline, "Split the line"),
        ActionRef("edit.backspace", editing_actions.delete_backward, "Delete backward"),
        ActionRef(
            "edit.delete_under_cursor",
            editing_actions.delete_under_cursor,
            "Delete character under cursor",
        ),
        ActionRef("edit.select_all", editing_actions.select_all, "Select all text"),
        ActionRef("history.undo", editing_actions.undo, "Undo last edit"),
        ActionRef("history.redo", editing_actions.redo, "Redo last undone edit"),
        ActionRef("clipboard.copy", editing_actions.copy_selection, "Copy selection"),
        ActionRef(
            "clipboard.paste", editing_actions.paste_clipboard, "Paste clipboard"
        ),
        ActionRef(
            "selection.yank", selection_actions.yank_selection, "Copy and clear"
        ),
        ActionRef(
            "selection.delete", selection_actions.delete_selection, "Cut selection"
        ),
        ActionRef(
            "command.submit_line",
            command_actions.submit_command_line,
            "Evaluate the command line",
        ),
        ActionRef(
            "command.backspace",
            command_actions.command_backspace,
            "Delete last command character",
        ),
    ]
    for direction, _, _ in MOTIONS:
        actions.append(
            ActionRef(
                f"motion.{direction}",
                partial(editing_actions.move_cursor, direction=direction),
                f"Move cursor {direction}",
            )
        )
        actions.append(
            ActionRef(
                f"selection.extend_{direction}",
                partial(selection_actions.extend_selection, direction=direction),
                f"Extend selection {direction}",
            )
        )
    return tuple(actions)


def _bind(
    mode: str,
    name: str,
    keys: Sequence[str],
    action_id: str,
    *,
    when: Sequence[str] = (),
) -> Binding:
    return Binding(
        id=f"{mode}.{name}",
        mode=mode,
        sequence=KeySequence.from_strings(*keys),
        action_id=action_id,
        when=tuple(when),
    )


def _motion_bindings() -> list[Binding]:
    bindings: list[Binding] = []
    for direction, modal_keys, insert_keys in MOTIONS:
        for key in modal_keys:
            bindings.append(
                _bind("normal", f"{direction}_{key}", [key], f"motion.{direction}")
            )
            bindings.append(
                _bind(
                    "selection",
                    f"{direction}_{key}",
                    [key],
                    f"selection.extend_{direction}",
                )
            )
        for key in insert_keys:
            bindings.append(
                _bind("insert", f"{direction}_{key}", [key], f"motion.{direction}")
            )
    return bindings


DEFAULT_BINDINGS: tuple[Binding, ...] = (
    # Checked in every mode before the mode's own table.
    _bind(GLOBAL_MODE, "quit", ["ctrl+q"], "core.quit"),
    _bind(GLOBAL_MODE, "copy", ["ctrl+k"], "selection.yank", when=["selection_set"]),
    _bind(GLOBAL_MODE, "paste", ["ctrl+v"], "clipboard.paste"),
    _bind(GLOBAL_MODE, "help", ["ctrl+h"], "core.help"),
    _bind(GLOBAL_MODE, "about", ["ctrl+shift+h"], "core.about"),
    _bind("normal", "enter_insert_chord", ["c", "c"], "core.enter_insert"),
    _bind("normal", "enter_insert_enter", ["ENTER"], "core.enter_insert"),
    _bind("normal", "enter_command", [":"], "core.enter_command"),
    _bind("normal", "enter_selection", ["v"], "core.enter_selection"),
    _bind("normal", "select_all", ["ctrl+a"], "edit.select_all"),
    _bind("normal", "delete_under_cursor", ["x"], "edit.delete_under_cursor"),
    _bind("normal", "undo", ["ctrl+z"], "history.undo"),
    _bind("normal", "redo", ["ctrl+y"], "history.redo"),
    _bind("normal", "copy", ["ctrl+k"], "clipboard.copy"),
    _bind("insert", "exit_escape", ["ESC"], "core.exit_insert"),
    _bind("insert", "exit_ctrl_c", ["ctrl+c"], "core.exit_insert"),
    _bind("insert", "newline", ["ENTER"], "edit.newline"),
    _bind("insert", "backspace", ["BACKSPACE"], "edit.backspace"),
    _bind("insert", "undo", ["ctrl+z"], "history.undo"),
    _bind("insert", "redo", ["ctrl+y"], "history.redo"),
    _bind("command", "cancel", ["ESC"], "core.cancel_command"),
    _bind("command", "submit", ["ENTER"], "command.submit_line"),
    _bind("command", "backspace", ["BACKSPACE"], "command.backspace"),
    _bind("selection", "exit_escape", ["ESC"], "core.exit_to_normal"),
    _bind("selection", "yank", ["y"], "selection.yank"),
    _bind("selection", "yank_ctrl_k", ["ctrl+k"], "selection.yank"),
    _bind("selection", "delete", ["d"], "selection.delete"),
    *_motion_bindings(),
)


def load_default_keymaps(
    registry: KeymapRegistry,
    *,
    replace: bool = False,
    extra_bindings: Iterable[Binding] | None = None,
    default_sequence_timeout_ms: int | None = None,
    exclude_bindings: Sequence[str] | None = None,
) -> None:
    """Register built-in actions and bindings for every mode.

    ``default_sequence_timeout_ms`` overrides how long chords such as
    ``c c`` wait for their second key.
    """

    for action in default_actions():
        registry.register_action(action, replace=replace)

    skipped = set(exclude_bindings or ())
    for binding in DEFAULT_BINDINGS:
        if binding.id in skipped:
            continue
        registry.register_binding(
            _binding_with_timeout(binding, default_sequence_timeout_ms),
            replace=replace,
        )

    for binding in extra_bindings or ():
        registry.register_binding(binding, replace=True)


def _binding_with_timeout(binding: Binding, timeout_ms: int | None) -> Binding:
    if timeout_ms is None:
        return binding
    return binding.retimed(timeout_ms)


__all__ = [
    "GLOBAL_MODE",
    "MOTIONS",
    "DEFAULT_BINDINGS",
    "default_actions",
    "load_default_keymaps",
]
