from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
TEST_DIR = Path(__file__).resolve().parent
for _path in (str(ROOT), str(TEST_DIR)):
    if _path not in sys.path:
        sys.path.insert(0, _path)

from core.event_store import EventStore  # noqa: E402


def make_store(channels, *, freeze: bool = True) -> EventStore:
    """Build a store from a list of per-channel timestamp lists."""
    store = EventStore(max(len(channels), 1))
    for ch, stamps in enumerate(channels):
        for ts in stamps:
            store.append(ch, ts)
    if freeze:
        store.freeze()
    return store


@pytest.fixture
def store_factory():
    return make_store


class ScriptedClock:
    """Monotonic clock that returns a fixed sequence of readings, one per call."""

    def __init__(self, readings) -> None:
        self._readings = iter(readings)
        self.calls = 0

    def __call__(self) -> float:
        self.calls += 1
        return next(self._readings)


@pytest.fixture
def scripted_clock():
    return ScriptedClock
