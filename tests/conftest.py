"""Pytest configuration for test suite.

Ensures the project root is on ``sys.path`` so imports like
``import lru_collection`` resolve correctly regardless of the working
directory pytest chooses, and provides a controllable clock for expiry tests.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest


def _ensure_project_root_on_syspath() -> None:
    project_root = Path(__file__).resolve().parents[1]
    project_root_str = str(project_root)
    if project_root_str not in sys.path:
        # Prepend to prefer local sources over site-packages
        sys.path.insert(0, project_root_str)


_ensure_project_root_on_syspath()


class FakeTimer:
    """Manually advanced clock usable as a cache timer."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class TickingTimer:
    """Clock that moves forward one second every time it is read."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        self.now += 1.0
        return self.now


@pytest.fixture
def timer() -> FakeTimer:
    return FakeTimer()


@pytest.fixture
def ticking_timer() -> TickingTimer:
    return TickingTimer()


@pytest.fixture(autouse=True)
def clean_collection_env(monkeypatch):
    """Keep LRU_COLLECTION_* variables from the host out of the tests."""
    for name in list(os.environ):
        if name.startswith("LRU_COLLECTION_"):
            monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def settings():
    """Default settings that ignore any .env file in the working directory."""
    from lru_collection.config.models import CollectionSettings

    return CollectionSettings(_env_file=None)
