import asyncio

from interview_assistant.core.clock import ManualClock, SystemClock
from interview_assistant.services.session_timer import SessionTimer


def test_timer_ticks_once_per_interval():
    clock = ManualClock()
    ticks = []
    timer = SessionTimer(clock, lambda: ticks.append(clock.now()))

    timer.start()
    clock.advance(3)

    assert len(ticks) == 3
    assert clock.pending == 1
    assert timer.running


def test_restart_keeps_a_single_pending_callback():
    clock = ManualClock()
    ticks = []
    timer = SessionTimer(clock, lambda: ticks.append(1))

    timer.start()
    clock.advance(0.5)
    timer.start()
    timer.start()

    assert clock.pending == 1
    clock.advance(0.6)
    assert ticks == []
    clock.advance(0.4)
    assert ticks == [1]


def test_stop_cancels_pending_tick():
    clock = ManualClock()
    ticks = []
    timer = SessionTimer(clock, lambda: ticks.append(1))

    timer.start()
    timer.stop()
    clock.advance(5)

    assert ticks == []
    assert clock.pending == 0
    assert not timer.running


def test_callback_may_stop_the_timer():
    clock = ManualClock()
    ticks = []

    def on_tick():
        ticks.append(1)
        if len(ticks) == 2:
            timer.stop()

    timer = SessionTimer(clock, on_tick)
    timer.start()
    clock.advance(10)

    assert len(ticks) == 2
    assert clock.pending == 0


def test_callback_may_restart_the_timer():
    clock = ManualClock()
    ticks = []

    def on_tick():
        ticks.append(1)
        timer.start()

    timer = SessionTimer(clock, on_tick)
    timer.start()
    clock.advance(3)

    assert len(ticks) == 3
    assert clock.pending == 1


def test_system_clock_schedules_on_running_loop():
    fired = []

    async def scenario():
        timer = SessionTimer(SystemClock(), lambda: fired.append(1), interval=0.01)
        timer.start()
        await asyncio.sleep(0.05)
        timer.stop()
        count = len(fired)
        await asyncio.sleep(0.03)
        return count

    count = asyncio.run(scenario())

    assert count >= 1
    assert len(fired) == count
