from __future__ import annotations

import os

# Keep telelog off the console while tests run; set before the engine imports.
os.environ.setdefault("MODAL_ENGINE_DISABLE_CONSOLE", "1")
os.environ.setdefault("MODAL_ENGINE_LOG_LEVEL", "WARNING")

import pytest  # noqa: E402

from modal_engine.buffer import EditEngine  # noqa: E402
from modal_engine.config import EngineConfig  # noqa: E402
from modal_engine.session import EditorSession  # noqa: E402


@pytest.fixture
def engine() -> EditEngine:
    return EditEngine()


@pytest.fixture
def session() -> EditorSession:
    return EditorSession(EngineConfig())
