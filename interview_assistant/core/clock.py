"""Time sources for the interview timer.

``SystemClock`` schedules callbacks on the running asyncio loop, so every
tick runs on the loop thread one at a time. ``ManualClock`` only moves
when told to, which makes timer-driven transitions deterministic in tests.
"""
import asyncio
import heapq
import itertools
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Protocol, Tuple


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


class Clock(Protocol):
    def now(self) -> datetime:
        ...

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        ...


class SystemClock:
    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def now(self) -> datetime:
        return datetime.utcnow()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)


class _ManualHandle:
    def __init__(self) -> None:
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualClock:
    def __init__(self, start: Optional[datetime] = None):
        self._now = start or datetime(2024, 1, 1, 9, 0, 0)
        self._queue: List[Tuple[datetime, int, _ManualHandle, Callable[[], None]]] = []
        self._counter = itertools.count()

    def now(self) -> datetime:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = _ManualHandle()
        due = self._now + timedelta(seconds=delay)
        heapq.heappush(self._queue, (due, next(self._counter), handle, callback))
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for _, _, handle, _ in self._queue if not handle.cancelled)

    def advance(self, seconds: float) -> None:
        """Move time forward, firing every callback that falls due on the way."""
        target = self._now + timedelta(seconds=seconds)
        while self._queue and self._queue[0][0] <= target:
            due, _, handle, callback = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = due
            callback()
        self._now = target
