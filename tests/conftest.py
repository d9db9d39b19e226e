"""Pytest configuration and fixtures."""

import asyncio
import os
from pathlib import Path

import pytest

from livetex.core.events import NotificationBus
from livetex.engines.base import TypesettingEngine
from livetex.exceptions import RenderError
from livetex.sinks.memory import MemorySink


class ScriptedEngine(TypesettingEngine):
    """Fake engine with per-content delays and failures.

    Records every call and the highest number of calls that were ever in
    flight at the same time.
    """

    name = "scripted"

    def __init__(self, delay: float = 0.0) -> None:
        self.delay = delay
        self.delays: dict[str, float] = {}
        self.fail_on: set[str] = set()
        self.calls: list[str] = []
        self.active = 0
        self.max_active = 0

    async def typeset(self, markup: str) -> str:
        self.calls.append(markup)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(self.delays.get(markup, self.delay))
            if markup in self.fail_on:
                raise RenderError(f"cannot typeset {markup}")
            return f"<typeset>{markup}</typeset>"
        finally:
            self.active -= 1


@pytest.fixture
def engine() -> ScriptedEngine:
    """Engine that answers instantly unless told otherwise."""
    return ScriptedEngine()


@pytest.fixture
def make_engine():
    """Factory for engines with a fixed per-call delay."""
    return ScriptedEngine


@pytest.fixture
def sink() -> MemorySink:
    return MemorySink()


@pytest.fixture
def bus() -> NotificationBus:
    return NotificationBus()


@pytest.fixture
def isolated_settings(tmp_path, monkeypatch):
    """Run settings code in an empty directory without livetex.yaml."""
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("LIVETEX_"):
            monkeypatch.delenv(key)

    from livetex.config.settings import get_settings

    get_settings.cache_clear()
    yield tmp_path
    get_settings.cache_clear()


@pytest.fixture
def sample_source(tmp_path: Path) -> Path:
    """A small LaTeX-flavoured source file."""
    file_path = tmp_path / "notes.tex"
    file_path.write_text(
        "Energy: $E=mc^2$\n\nIntegral:\n$$\\int_0^1 x\\,dx$$\n",
        encoding="utf-8",
    )
    return file_path
