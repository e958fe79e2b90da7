"""Timer sources for quiet-period scheduling.

LoopClock schedules on the running asyncio loop. ManualClock keeps virtual
time so debounce behaviour can be tested without real waits.

Usage:
    clock = ManualClock()
    controller = DeferredSaveController(writer, clock=clock)
    controller.submit("doc1", "v1")
    clock.advance(0.6)  # fires the quiet-period timer
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from collections.abc import Callable
from typing import Protocol, runtime_checkable


@runtime_checkable
class TimerHandle(Protocol):
    """Cancellable scheduled callback."""

    def cancel(self) -> None:
        """Prevent the callback from running. Idempotent."""
        ...


@runtime_checkable
class Clock(Protocol):
    """Source of time and delayed callbacks."""

    def time(self) -> float:
        """Current time in seconds."""
        ...

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Run callback after `delay` seconds."""
        ...


class LoopClock:
    """Clock backed by the running asyncio event loop.

    Must be used from inside the loop (submit is called from event handlers).
    """

    def time(self) -> float:
        return asyncio.get_running_loop().time()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        return asyncio.get_running_loop().call_later(delay, callback)


class _ManualTimer:
    __slots__ = ("deadline", "callback", "cancelled")

    def __init__(self, deadline: float, callback: Callable[[], None]) -> None:
        self.deadline = deadline
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualClock:
    """Virtual clock. Time only moves when advance() is called.

    Callbacks run synchronously inside advance(), in deadline order, with
    time() reporting each callback's deadline while it runs. Timers scheduled
    by a callback fire in the same advance() if they fall due before its end.

    Args:
        start: Initial virtual time in seconds.
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._order = itertools.count()
        self._queue: list[tuple[float, int, _ManualTimer]] = []

    def time(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        timer = _ManualTimer(self._now + max(delay, 0.0), callback)
        heapq.heappush(self._queue, (timer.deadline, next(self._order), timer))
        return timer

    def advance(self, seconds: float) -> int:
        """Move time forward, firing due callbacks. Returns how many fired."""
        if seconds < 0:
            raise ValueError("Cannot move a clock backwards")
        target = self._now + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            deadline, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self._now = deadline
            timer.callback()
            fired += 1
        self._now = target
        return fired

    @property
    def pending(self) -> int:
        """Number of scheduled, not cancelled timers."""
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)
