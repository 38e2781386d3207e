from __future__ import annotations

from typing import Any, List

from modal_engine.adapters.textual import (
    TextualEditorAdapter,
    TextualUIHooks,
    normalize_textual_key,
)
from modal_engine.adapters.textual.app import render_status
from modal_engine.buffer import Buffer, ViewSnapshot
from modal_engine.modes import EffectKind, KeyInput
from modal_engine.session import EditorSession


def make_adapter(
    views: List[ViewSnapshot], **hooks: Any
) -> TextualEditorAdapter:
    session = EditorSession()
    return TextualEditorAdapter(
        session, TextualUIHooks(update_view=views.append, **hooks)
    )


def test_normalize_textual_key() -> None:
    assert normalize_textual_key("escape") == KeyInput.parse("ESC")
    assert normalize_textual_key("ESC") == KeyInput.parse("ESC")
    assert normalize_textual_key("ctrl+k") == KeyInput("k", ("ctrl",))
    assert normalize_textual_key("a", "a") == KeyInput("a", text="a")
    assert normalize_textual_key("tab") == KeyInput("TAB", text="\t")
    assert normalize_textual_key("colon", ":") == KeyInput(":", text=":")
    assert normalize_textual_key("dollar_sign", "$") == KeyInput("$", text="$")
    assert normalize_textual_key("space", " ") == KeyInput(" ", text=" ")
    assert normalize_textual_key("") is None


def test_adapter_updates_view_and_status() -> None:
    views: List[ViewSnapshot] = []
    statuses: List[str] = []
    adapter = make_adapter(views, update_status=statuses.append)

    adapter.handle_textual_key("c")
    adapter.handle_textual_key("c")
    adapter.handle_textual_key("h", text="h")
    adapter.handle_textual_key("i", text="i")
    adapter.handle_textual_key("escape")

    assert views[-1].rows == ("hi",)
    assert views[-1].mode == "normal"
    assert "-- INSERT --" in statuses
    assert statuses[-1] == "-- NORMAL --"


def test_adapter_relays_command_events() -> None:
    views: List[ViewSnapshot] = []
    command_lines: List[str] = []
    events: List[tuple[str, object | None]] = []
    adapter = make_adapter(
        views,
        show_command=command_lines.append,
        handle_event=lambda name, payload: events.append((name, payload)),
    )

    adapter.handle_textual_key("colon", text=":")
    adapter.handle_textual_key("b", text="b")
    adapter.handle_textual_key("o", text="o")
    adapter.handle_textual_key("enter")

    assert ":bo" in command_lines
    assert command_lines[-1] == ""
    names = [name for name, _ in events]
    assert names[0] == "command.start"
    assert ("command.submit", "bo") in events
    assert ("command.error", "bo") in events
    assert views[-1].status == "Unknown command: :bo"


def test_adapter_quit_effects() -> None:
    views: List[ViewSnapshot] = []
    adapter = make_adapter(views)

    assert adapter.dispatch("ctrl+q").kind is EffectKind.QUIT

    adapter.dispatch("ENTER")
    adapter.dispatch("x")
    adapter.dispatch("ESC")
    for key in (":", "q", "ENTER"):
        effect = adapter.dispatch(key)
    assert effect.kind is EffectKind.QUIT_BLOCKED


def test_adapter_resize_clamps_to_minimum() -> None:
    views: List[ViewSnapshot] = []
    logs: List[str] = []
    adapter = make_adapter(views, log=logs.append)

    adapter.resize(1, 5)

    viewport = adapter.session.engine.viewport
    assert (viewport.rows, viewport.cols) == (3, 20)

    adapter.dispatch("ctrl+h")
    assert any(line.startswith("key ->") for line in logs)


def test_render_status_line() -> None:
    snapshot = ViewSnapshot(
        rows=("abc",),
        cursor=(0, 2),
        mode="insert",
        status="-- INSERT --",
        line_count=1,
        modified=True,
    )

    line = render_status(snapshot)

    assert line.startswith("[No Name] (modified) - 1 lines")
    assert line.endswith("INSERT | 1:3")


def test_adapter_named_punctuation_reaches_bindings() -> None:
    views: List[ViewSnapshot] = []
    adapter = make_adapter(views)
    adapter.session.engine.load(Buffer.from_text("abc"))

    adapter.handle_textual_key("dollar_sign", text="$")
    assert adapter.session.engine.cursor == (0, 3)

    adapter.handle_textual_key("colon", text=":")
    assert adapter.session.modes.active_name == "command"
