"""Shared test fixtures."""

import asyncio
import sys
from typing import Any

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from recordflow import (
    DeferredSaveController,
    ManualClock,
    enum_column,
    numeric_column,
    text_column,
)

DEBOUNCE = 0.6


class FakeWriter:
    """Records writes. Can hold writes in flight and fail them on demand."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []
        self.failures: list[Exception] = []
        self._gate: asyncio.Event | None = None

    def block(self) -> None:
        """Writes started from now on wait until release()."""
        self._gate = asyncio.Event()

    def release(self) -> None:
        if self._gate is not None:
            self._gate.set()
            self._gate = None

    async def __call__(self, entity_id: str, payload: Any) -> None:
        self.calls.append((entity_id, payload))
        gate = self._gate
        if gate is not None:
            await gate.wait()
        if self.failures:
            raise self.failures.pop(0)

    def payloads(self, entity_id: str) -> list[Any]:
        return [p for e, p in self.calls if e == entity_id]


@pytest.fixture
def clock():
    """Virtual clock starting at t=0."""
    return ManualClock()


@pytest.fixture
def writer():
    return FakeWriter()


@pytest.fixture
def controller(writer, clock):
    """Controller with a 600ms quiet period on virtual time."""
    return DeferredSaveController(writer, debounce=DEBOUNCE, clock=clock)


@pytest.fixture
def task_dicts():
    return [
        {"id": "a", "name": "Write report", "status": "todo", "priority": 2},
        {"id": "b", "name": "Ship release", "status": "done", "priority": 1},
        {"id": "c", "name": "Review notes", "status": "todo", "priority": None},
    ]


@pytest.fixture
def dict_columns():
    return [
        text_column("name"),
        enum_column("status"),
        numeric_column("priority"),
    ]
