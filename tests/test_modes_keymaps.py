from __future__ import annotations

from typing import Any, Dict, Optional

import pytest

from modal_engine.buffer import EditEngine
from modal_engine.config import EngineConfig
from modal_engine.keymaps import (
    Binding,
    KeySequence,
    KeymapRegistry,
    KeymapResolver,
    load_default_keymaps,
)
from modal_engine.modes import (
    CommandMode,
    EffectKind,
    InsertMode,
    KeyInput,
    ModeBus,
    ModeContext,
    NormalMode,
    SelectionMode,
)
from modal_engine.modes.mode_manager import ModeManager


def make_context(
    registry: KeymapRegistry,
    resolver: KeymapResolver,
    *,
    engine: Optional[EditEngine] = None,
) -> ModeContext:
    extras: Dict[str, Any] = {
        "keymap_registry": registry,
        "keymap_resolver": resolver,
        "keymap_flags": {},
    }
    return ModeContext(
        engine=engine or EditEngine(),
        bus=ModeBus(),
        config=EngineConfig(),
        extras=extras,
    )


def make_manager(text: str = "") -> ModeManager:
    context = ModeContext(
        engine=EditEngine.from_text(text), bus=ModeBus(), config=EngineConfig()
    )
    manager = ModeManager(context)
    for mode_cls in (NormalMode, InsertMode, CommandMode, SelectionMode):
        manager.register_mode(mode_cls)
    return manager


def press(manager: ModeManager, *tokens: str) -> None:
    for token in tokens:
        manager.handle_key(KeyInput.parse(token))


def test_key_input_parse() -> None:
    assert KeyInput.parse("x") == KeyInput("x", text="x")
    assert KeyInput.parse("ctrl+k") == KeyInput("k", ("ctrl",))
    assert KeyInput.parse("TAB").text == "\t"
    assert KeyInput.parse("ESC").text is None
    with pytest.raises(ValueError):
        KeyInput.parse("")


def test_normal_mode_chord_pending_then_match() -> None:
    registry = KeymapRegistry()
    load_default_keymaps(registry)
    resolver = KeymapResolver(registry)
    context = make_context(registry, resolver)
    mode = NormalMode(context)

    first = mode.handle_key(KeyInput.parse("c"))
    second = mode.handle_key(KeyInput.parse("c"))

    assert first.status == "pending"
    assert first.timeout_ms == 500
    assert mode.has_pending is False
    assert second.switch_to == "insert"
    assert context.engine.status == "-- INSERT --"


def test_normal_mode_broken_chord_replays_key() -> None:
    registry = KeymapRegistry()
    load_default_keymaps(registry)
    resolver = KeymapResolver(registry)
    context = make_context(registry, resolver)
    mode = NormalMode(context)

    mode.handle_key(KeyInput.parse("c"))
    result = mode.handle_key(KeyInput.parse("x"))

    assert result.status == "chord_miss"
    assert result.replay == KeyInput.parse("x")
    assert mode.pending_tokens == ()


def test_normal_mode_custom_binding() -> None:
    registry = KeymapRegistry()
    load_default_keymaps(
        registry,
        extra_bindings=(
            Binding(
                id="normal.enter_insert_i",
                mode="normal",
                sequence=KeySequence.from_strings("i"),
                action_id="core.enter_insert",
            ),
        ),
    )
    resolver = KeymapResolver(registry)
    mode = NormalMode(make_context(registry, resolver))

    result = mode.handle_key(KeyInput.parse("i"))

    assert result.switch_to == "insert"


def test_insert_mode_types_printable_keys_only() -> None:
    registry = KeymapRegistry()
    load_default_keymaps(registry)
    resolver = KeymapResolver(registry)
    context = make_context(registry, resolver)
    mode = InsertMode(context)

    mode.handle_key(KeyInput.parse("a"))
    mode.handle_key(KeyInput.parse("TAB"))
    ignored = mode.handle_key(KeyInput("\x01", text="\x01"))

    assert context.engine.buffer.snapshot() == ("a\t",)
    assert ignored.consumed is False


def test_manager_cc_enters_insert_and_esc_steps_back() -> None:
    manager = make_manager()

    press(manager, "c", "c", "h", "i", "ESC")

    engine = manager.context.engine
    assert manager.active_name == "normal"
    assert engine.buffer.snapshot() == ("hi",)
    assert engine.cursor == (0, 1)
    assert engine.status == "-- NORMAL --"


def test_manager_enter_key_also_enters_insert() -> None:
    manager = make_manager()

    press(manager, "ENTER", "ctrl+c")

    assert manager.active_name == "normal"


def test_manager_arms_and_forces_chord_timeout() -> None:
    manager = make_manager("abc")

    press(manager, "c")

    assert manager.next_deadline() is not None
    results = manager.force_timeout()

    assert results["normal"].status == "timeout"
    assert manager.next_deadline() is None
    assert manager.active_name == "normal"
    assert manager.context.engine.buffer.snapshot() == ("abc",)


def test_manager_process_timeouts_waits_for_deadline() -> None:
    manager = make_manager()

    press(manager, "c")

    assert manager.process_timeouts() == {}
    assert manager.seconds_until_timeout() is not None


def test_manager_global_quit_from_every_mode() -> None:
    manager = make_manager()

    for entry in ((), ("c", "c"), (":",), ("v",)):
        press(manager, *entry)
        result = manager.handle_key(KeyInput.parse("ctrl+q"))
        assert result.effect is not None
        assert result.effect.kind is EffectKind.QUIT
        press(manager, "ESC")


def test_manager_pending_chord_skips_global_keymap() -> None:
    manager = make_manager()

    press(manager, "c")
    result = manager.handle_key(KeyInput.parse("ctrl+q"))

    assert result.status == "chord_miss"
    assert result.replay == KeyInput.parse("ctrl+q")


def test_manager_help_and_about() -> None:
    manager = make_manager()
    engine = manager.context.engine

    press(manager, "ctrl+shift+h")
    assert engine.status.startswith("ABC Vi")

    press(manager, "ctrl+h")
    assert engine.status.startswith("HELP:")


def test_manager_select_all_requires_text() -> None:
    empty = make_manager()
    press(empty, "ctrl+a")
    assert empty.active_name == "normal"

    manager = make_manager("ab\nc")
    press(manager, "ctrl+a")
    assert manager.active_name == "selection"
    assert manager.context.engine.selection.normalized() == ((0, 0), (1, 1))


def test_selection_mode_extends_and_yanks() -> None:
    manager = make_manager("hello")
    engine = manager.context.engine
    extended: list[object] = []
    manager.context.bus.subscribe("selection.extend", extended.append)

    press(manager, "v", "l", "l", "y")

    assert extended
    assert engine.clipboard.lines() == ("he",)
    assert engine.selection.is_set is False
    assert manager.active_name == "normal"


def test_selection_mode_escape_clears_selection() -> None:
    manager = make_manager("hello")

    press(manager, "v", "l", "ESC")

    assert manager.active_name == "normal"
    assert manager.context.engine.selection.normalized() is None


def test_global_copy_uses_selection_when_set() -> None:
    manager = make_manager("hello")
    engine = manager.context.engine

    press(manager, "ctrl+a", "ctrl+k")

    assert engine.clipboard.lines() == ("hello",)
    assert manager.active_name == "normal"


def test_copy_without_selection_reports_notice() -> None:
    manager = make_manager("hello")

    press(manager, "ctrl+k")

    assert manager.context.engine.status == "No selection to copy"
    assert manager.context.engine.clipboard.is_empty


def test_command_mode_collects_text() -> None:
    manager = make_manager()

    press(manager, ":", "w", "x", "BACKSPACE")

    mode = manager.active_mode
    assert isinstance(mode, CommandMode)
    assert mode.current_command == "w"

    press(manager, "ESC")
    assert manager.active_name == "normal"
    assert manager.context.engine.status == ""


def test_register_mode_twice_raises() -> None:
    manager = make_manager()

    with pytest.raises(ValueError):
        manager.register_mode(NormalMode)
    with pytest.raises(KeyError):
        manager.switch_mode("visual")
