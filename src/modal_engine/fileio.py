"""Plain newline-delimited text files in and out of a Buffer."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from modal_engine.buffer import Buffer, EditEngine
from modal_engine.errors import IOFailure
from modal_engine.runtime import telemetry

PathLike = Union[str, "os.PathLike[str]"]

# Undecodable bytes survive a load/save round trip unchanged.
ENCODING = "utf-8"
ERRORS = "surrogateescape"


@dataclass(frozen=True, slots=True)
class SaveResult:
    ok: bool
    path: Optional[Path]
    lines: int = 0
    error: Optional[str] = None

    @property
    def message(self) -> str:
        if self.ok:
            return f"{self.lines} lines written to {self.path}"
        return self.error or "Can't save!"


def load_buffer(path: PathLike) -> Buffer:
    """Read ``path`` one line per row; a missing file is an empty buffer."""

    target = Path(path)
    with telemetry.span("fileio::load", component="fileio", metadata={"path": target}):
        try:
            data = target.read_bytes()
        except FileNotFoundError:
            return Buffer()
        except OSError as exc:
            raise IOFailure(
                f"Can't open! I/O error: {exc.strerror or exc}", path=str(target)
            ) from exc
    text = data.decode(ENCODING, errors=ERRORS)
    lines: List[str] = text.split("\n")
    if text.endswith("\n") or not text:
        lines.pop()
    return Buffer.from_lines(line.rstrip("\r\n") for line in lines)


def save_buffer(buffer: Buffer, path: PathLike) -> SaveResult:
    """Write every row followed by ``\\n``; failures come back in the result."""

    target = Path(path)
    lines = buffer.snapshot()
    payload = "".join(f"{line}\n" for line in lines).encode(ENCODING, errors=ERRORS)
    with telemetry.span(
        "fileio::save", component="fileio", metadata={"path": target}
    ) as handle:
        try:
            target.write_bytes(payload)
        except OSError as exc:
            reason = f"Can't save! I/O error: {exc.strerror or exc}"
            handle.add_metadata("error", reason)
            return SaveResult(ok=False, path=target, error=reason)
    return SaveResult(ok=True, path=target, lines=len(lines))


def open_into(engine: EditEngine, path: PathLike) -> bool:
    """Load ``path`` into ``engine``; I/O errors become a status notice."""

    try:
        buffer = load_buffer(path)
    except IOFailure as exc:
        engine.notify(str(exc), level="error")
        return False
    engine.load(buffer, path=Path(path))
    engine.notify(f"Opened {path}")
    return True


def write_from(engine: EditEngine, path: Optional[PathLike] = None) -> SaveResult:
    """Save ``engine``'s buffer to ``path`` or its current file."""

    target = Path(path) if path is not None else engine.path
    if target is None:
        result = SaveResult(ok=False, path=None, error="Error: No filename")
    else:
        result = save_buffer(engine.buffer, target)
    if result.ok:
        engine.path = target
        engine.buffer.mark_clean()
        engine.notify(result.message)
    else:
        engine.notify(result.message, level="error")
    return result


__all__ = [
    "SaveResult",
    "load_buffer",
    "save_buffer",
    "open_into",
    "write_from",
]
