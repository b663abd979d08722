from typing import Callable, Optional

from interview_assistant.core.clock import Clock, TimerHandle


class SessionTimer:
    """Repeating one-second countdown driver for a single session.

    At most one callback is scheduled at any time: ``start`` cancels the
    pending one before scheduling, and ``stop`` cancels without
    rescheduling. A callback that fires after ``stop`` does nothing.
    """

    def __init__(self, clock: Clock, on_tick: Callable[[], None], interval: float = 1.0):
        self._clock = clock
        self._on_tick = on_tick
        self._interval = interval
        self._handle: Optional[TimerHandle] = None
        self._generation = 0

    @property
    def running(self) -> bool:
        return self._handle is not None

    def start(self) -> None:
        self.stop()
        self._schedule()

    def stop(self) -> None:
        self._generation += 1
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _schedule(self) -> None:
        generation = self._generation
        self._handle = self._clock.call_later(self._interval, lambda: self._fire(generation))

    def _fire(self, generation: int) -> None:
        if generation != self._generation:
            return
        self._handle = None
        self._on_tick()
        # on_tick may have stopped or restarted the timer
        if generation == self._generation and self._handle is None:
            self._schedule()
