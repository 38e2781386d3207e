"""Editor session: the object a host drives with keys and reads views from."""

from __future__ import annotations

from typing import Callable, Deque, Optional

from modal_engine import fileio
from modal_engine.actions.command import command_history, command_state
from modal_engine.actions.core import HELP_TEXT
from modal_engine.buffer import EditEngine, RenderSync, ViewSnapshot, Viewport
from modal_engine.config import EngineConfig
from modal_engine.fileio import PathLike, SaveResult
from modal_engine.modes import (
    CommandMode,
    EditorEffect,
    EffectKind,
    InsertMode,
    KeyInput,
    ModeBus,
    ModeContext,
    ModeResult,
    NormalMode,
    SelectionMode,
)
from modal_engine.modes.mode_manager import ModeManager
from modal_engine.runtime import telemetry
from modal_engine.runtime.input import KeyReader, KeySource

FrameCallback = Callable[[ViewSnapshot], None]


class EditorSession(RenderSync):
    """Owns one edit engine, the mode state machine and the key read layer.

    Hosts either push keys through ``dispatch_key`` (and call
    ``process_timeouts`` from a timer), or hand a blocking key source to
    ``run``. Either way ``render_view`` describes what to paint.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        *,
        engine: Optional[EditEngine] = None,
        bus: Optional[ModeBus] = None,
        source: Optional[KeySource] = None,
    ) -> None:
        self.config = config or EngineConfig.from_env()
        self.engine = engine or EditEngine(
            viewport=Viewport(rows=self.config.view_rows, cols=self.config.view_cols)
        )
        self.context = ModeContext(
            engine=self.engine, bus=bus or ModeBus(), config=self.config, extras={}
        )
        self.modes = ModeManager(self.context)
        for mode_cls in (NormalMode, InsertMode, CommandMode, SelectionMode):
            self.modes.register_mode(mode_cls)
        self.reader = KeyReader(source)
        self.engine.status = HELP_TEXT

    @property
    def mode(self) -> str:
        return self.modes.active_name

    @property
    def status(self) -> str:
        return self.engine.status

    @property
    def history(self) -> Deque[str]:
        return command_history(self.context)

    # file I/O

    def open(self, path: PathLike) -> bool:
        return fileio.open_into(self.engine, path)

    def save(self, path: Optional[PathLike] = None) -> SaveResult:
        return fileio.write_from(self.engine, path)

    # input

    def dispatch_key(self, code: KeyInput | str) -> EditorEffect:
        """Process one key, plus any key a broken chord hands back."""

        self.reader.push_back(KeyInput.coerce(code))
        effect = EditorEffect.none()
        while self.reader.has_pending:
            key = self.reader.read()
            if key is None:
                break
            effect = _merge(effect, self._process(key))
            if effect.kind is EffectKind.QUIT:
                break
        self._scroll()
        return effect

    def process_timeouts(self) -> EditorEffect:
        """Expire a chord whose second key never came."""

        effect = EditorEffect.none()
        for result in self.modes.process_timeouts().values():
            effect = _merge(effect, self._effect_of(result))
        self._scroll()
        return effect

    def run(
        self,
        source: Optional[KeySource] = None,
        *,
        on_frame: Optional[FrameCallback] = None,
    ) -> EditorEffect:
        """Read and dispatch keys until a quit is requested or input ends.

        Reads block no longer than the earliest pending chord deadline; a
        read that comes back empty with no chord waiting means the source is
        exhausted.
        """

        if source is not None:
            self.reader.source = source
        if on_frame:
            on_frame(self.render_view())
        while True:
            timeout = self.modes.seconds_until_timeout()
            key = self.reader.read(timeout)
            if key is None:
                if timeout is None:
                    return EditorEffect.none()
                effect = self.process_timeouts()
            else:
                effect = self._process(key)
                self._scroll()
            if on_frame:
                on_frame(self.render_view())
            if effect.kind is EffectKind.QUIT:
                return effect

    def _process(self, key: KeyInput) -> EditorEffect:
        result = self.modes.handle_key(key)
        if result.replay is not None:
            self.reader.push_back(result.replay)
        return self._effect_of(result)

    def _effect_of(self, result: ModeResult) -> EditorEffect:
        effect = result.effect or EditorEffect.none()
        if effect.kind is not EffectKind.NONE:
            telemetry.record_event(
                "session.effect",
                data={"effect": effect.kind.value, "reason": effect.reason},
            )
        return effect

    # view

    def update_viewport_size(self, rows: int, cols: int) -> None:
        viewport = self.engine.viewport
        viewport.resize(
            max(rows, self.config.min_view_rows), max(cols, self.config.min_view_cols)
        )
        viewport.scroll_to(self.engine.cursor)

    def render_view(self) -> ViewSnapshot:
        engine = self.engine
        viewport = engine.viewport
        self._scroll()
        top, left = viewport.row_offset, viewport.col_offset
        lines = engine.buffer.snapshot()[top : top + viewport.rows]
        row, col = engine.cursor
        command = ""
        if self.mode == CommandMode.name:
            command = ":" + str(command_state(self.context)["text"])
        return ViewSnapshot(
            rows=tuple(line[left : left + viewport.cols] for line in lines),
            cursor=(row - top, col - left),
            mode=self.mode,
            status=engine.status,
            command=command,
            selection=engine.selection.normalized(),
            row_offset=top,
            col_offset=left,
            line_count=engine.buffer.line_count,
            modified=engine.modified,
            filename=str(engine.path) if engine.path is not None else None,
        )

    def _scroll(self) -> None:
        self.engine.viewport.scroll_to(self.engine.cursor)


def _merge(current: EditorEffect, new: EditorEffect) -> EditorEffect:
    return current if new.kind is EffectKind.NONE else new


__all__ = ["EditorSession", "FrameCallback"]
