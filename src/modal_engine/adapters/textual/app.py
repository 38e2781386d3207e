"""Executable Textual app that hosts the editing engine."""

from __future__ import annotations

import argparse
import os
from dataclasses import replace
from typing import Optional, Sequence

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Static

from modal_engine.buffer import ViewSnapshot
from modal_engine.config import EngineConfig
from modal_engine.modes import EditorEffect, EffectKind
from modal_engine.runtime import telemetry
from modal_engine.session import EditorSession

from .controller import TextualEditorAdapter, TextualUIHooks

# Rows taken by the status and command lines below the text area.
CHROME_ROWS = 2


def render_text(snapshot: ViewSnapshot) -> str:
    """Visible rows as one block of text for a Static widget."""

    return "\n".join(snapshot.rows)


def render_status(snapshot: ViewSnapshot) -> str:
    name = snapshot.filename or "[No Name]"
    dirty = " (modified)" if snapshot.modified else ""
    row = snapshot.cursor[0] + snapshot.row_offset + 1
    col = snapshot.cursor[1] + snapshot.col_offset + 1
    left = f"{name}{dirty} - {snapshot.line_count} lines"
    right = f"{snapshot.mode.upper()} | {row}:{col}"
    message = f" | {snapshot.status}" if snapshot.status else ""
    return f"{left}{message} | {right}"


class ModalEditorApp(App[None]):
    """Minimal Textual UI embedding an EditorSession."""

    CSS = """
    #buffer-area {
        height: 1fr;
    }

    #buffer-view {
        width: 1fr;
        padding: 0 1;
    }

    #status-line, #command-line {
        height: 1;
        padding: 0 1;
    }

    #status-line {
        background: $primary-darken-2;
        color: $text;
    }
    """

    # Keys Textual would otherwise claim for itself go to the engine.
    BINDINGS = [
        Binding("ctrl+q", "dispatch('ctrl+q')", "Quit", priority=True),
        Binding(
            "ctrl+c", "dispatch('ctrl+c')", "Leave insert", show=False, priority=True
        ),
    ]

    def __init__(self, session: EditorSession, *, timeout_poll_s: float = 0.05) -> None:
        super().__init__()
        self.session = session
        self.adapter: TextualEditorAdapter | None = None
        self._timeout_poll_s = timeout_poll_s
        self._buffer_widget: Static | None = None
        self._status_widget: Static | None = None
        self._command_widget: Static | None = None

    def compose(self) -> ComposeResult:
        with Vertical(id="buffer-area"):
            self._buffer_widget = Static("", id="buffer-view", markup=False)
            yield self._buffer_widget
        self._status_widget = Static("", id="status-line", markup=False)
        self._command_widget = Static("", id="command-line", markup=False)
        yield self._status_widget
        yield self._command_widget

    def on_mount(self) -> None:
        hooks = TextualUIHooks(
            update_view=self._update_view,
            show_command=self._show_command,
            log=self.log.debug,
        )
        self.adapter = TextualEditorAdapter(self.session, hooks)
        self.adapter.resize(self.size.height - CHROME_ROWS, self.size.width - 2)
        self.set_interval(self._timeout_poll_s, self._process_timeouts)

    def on_resize(self, event: events.Resize) -> None:
        if self.adapter:
            self.adapter.resize(event.size.height - CHROME_ROWS, event.size.width - 2)

    def on_key(self, event: events.Key) -> None:
        if not self.adapter:
            return
        self._apply(self.adapter.handle_textual_key(event.key, text=event.character))
        event.stop()

    def action_dispatch(self, token: str) -> None:
        if self.adapter:
            self._apply(self.adapter.dispatch(token))

    def _process_timeouts(self) -> None:
        if self.adapter:
            self._apply(self.adapter.process_timeouts())

    def _apply(self, effect: EditorEffect) -> None:
        if effect.kind is EffectKind.QUIT:
            self.exit()
        elif effect.kind is EffectKind.QUIT_BLOCKED and effect.reason:
            self.bell()

    def _update_view(self, snapshot: ViewSnapshot) -> None:
        if self._buffer_widget:
            self._buffer_widget.update(render_text(snapshot))
        if self._status_widget:
            self._status_widget.update(render_status(snapshot))

    def _show_command(self, command: str) -> None:
        if self._command_widget:
            self._command_widget.update(command)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="modal-engine", description="Edit a text file in a modal terminal editor."
    )
    parser.add_argument("path", nargs="?", help="file to open")
    parser.add_argument(
        "--chord-timeout-ms",
        type=int,
        metavar="MS",
        help="how long 'c c' waits for its second key "
        "(default: $MODAL_ENGINE_CHORD_TIMEOUT_MS or 500)",
    )
    return parser.parse_args(argv)


def build_session(args: argparse.Namespace) -> EditorSession:
    """Environment settings first, then whatever the command line overrides."""

    config = EngineConfig.from_env()
    if args.chord_timeout_ms and args.chord_timeout_ms > 0:
        config = replace(config, chord_timeout_ms=args.chord_timeout_ms)
    session = EditorSession(config)
    if args.path:
        session.open(args.path)
    return session


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    # The TUI owns the terminal; log to a file instead of the console.
    telemetry.configure(preset=os.environ.get("MODAL_ENGINE_LOG_PRESET", "session"))
    ModalEditorApp(build_session(args)).run()


if __name__ == "__main__":
    main()
