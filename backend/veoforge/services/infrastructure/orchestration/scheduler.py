"""
Scheduling and clock abstraction for progress timers and cooperative waits.

`AsyncioScheduler` runs on the event loop with wall-clock time.
`VirtualScheduler` keeps its own clock and only fires timers when time is
advanced explicitly, so timelines can be driven deterministically.
"""

import asyncio
import heapq
import itertools
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, List, Tuple


class TimerHandle(ABC):
    @abstractmethod
    def cancel(self) -> None:
        pass


class Scheduler(ABC):
    """Clock plus one-shot timers plus a cooperative sleep."""

    @abstractmethod
    def now(self) -> float:
        """Current time in epoch seconds."""
        pass

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        pass

    @abstractmethod
    async def sleep(self, seconds: float) -> None:
        pass


class _AsyncioTimer(TimerHandle):
    def __init__(self, handle: asyncio.TimerHandle):
        self._handle = handle

    def cancel(self) -> None:
        self._handle.cancel()


class AsyncioScheduler(Scheduler):
    """Event-loop timers and wall-clock time. Timers need a running loop."""

    def now(self) -> float:
        return time.time()

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        loop = asyncio.get_running_loop()
        return _AsyncioTimer(loop.call_later(max(delay, 0.0), callback, *args))

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)


class _VirtualTimer(TimerHandle):
    def __init__(self) -> None:
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class VirtualScheduler(Scheduler):
    """
    Manually advanced clock.

    Timers due at the same instant fire in the order they were scheduled.
    `sleep()` advances the clock by the requested amount, so a task waiting
    cooperatively drives the timers it is waiting on.
    """

    def __init__(self, start: float = 1_700_000_000.0):
        self._now = start
        self._sequence = itertools.count()
        self._timers: List[Tuple[float, int, _VirtualTimer, Callable[..., Any], tuple]] = []

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        handle = _VirtualTimer()
        due = self._now + max(delay, 0.0)
        heapq.heappush(self._timers, (due, next(self._sequence), handle, callback, args))
        return handle

    @property
    def pending_timers(self) -> int:
        return sum(1 for _, _, handle, _, _ in self._timers if not handle.cancelled)

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing every timer that falls due. Returns the number fired."""
        target = self._now + max(seconds, 0.0)
        fired = 0
        while self._timers and self._timers[0][0] <= target:
            due, _, handle, callback, args = heapq.heappop(self._timers)
            self._now = due
            if handle.cancelled:
                continue
            callback(*args)
            fired += 1
        self._now = target
        return fired

    async def sleep(self, seconds: float) -> None:
        self.advance(seconds)
        await asyncio.sleep(0)
