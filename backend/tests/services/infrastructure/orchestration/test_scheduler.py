"""Tests for the scheduler/clock abstraction"""

import asyncio

import pytest

from veoforge.services.infrastructure.orchestration import AsyncioScheduler, VirtualScheduler


class TestVirtualScheduler:
    def test_timers_fire_in_delay_order(self):
        scheduler = VirtualScheduler(start=100.0)
        fired = []
        scheduler.call_later(5, fired.append, "b")
        scheduler.call_later(2, fired.append, "a")
        scheduler.call_later(5, fired.append, "c")

        assert scheduler.advance(4) == 1
        assert fired == ["a"]
        assert scheduler.now() == 104.0

        scheduler.advance(1)
        assert fired == ["a", "b", "c"]

    def test_clock_is_at_due_time_when_timer_fires(self):
        scheduler = VirtualScheduler(start=0.0)
        seen = []
        scheduler.call_later(3, lambda: seen.append(scheduler.now()))

        scheduler.advance(10)

        assert seen == [3.0]
        assert scheduler.now() == 10.0

    def test_cancelled_timer_does_not_fire(self):
        scheduler = VirtualScheduler()
        fired = []
        handle = scheduler.call_later(1, fired.append, "x")
        handle.cancel()

        assert scheduler.pending_timers == 0
        scheduler.advance(5)
        assert fired == []

    @pytest.mark.asyncio
    async def test_sleep_advances_time(self):
        scheduler = VirtualScheduler(start=0.0)
        fired = []
        scheduler.call_later(1.5, fired.append, "tick")

        await scheduler.sleep(2)

        assert fired == ["tick"]
        assert scheduler.now() == 2.0


class TestAsyncioScheduler:
    @pytest.mark.asyncio
    async def test_call_later_runs_on_loop(self):
        scheduler = AsyncioScheduler()
        done = asyncio.Event()

        scheduler.call_later(0.01, done.set)

        await asyncio.wait_for(done.wait(), timeout=1)

    @pytest.mark.asyncio
    async def test_cancel(self):
        scheduler = AsyncioScheduler()
        fired = []

        handle = scheduler.call_later(0.01, fired.append, 1)
        handle.cancel()
        await scheduler.sleep(0.03)

        assert fired == []

    def test_now_is_wall_clock(self):
        import time

        assert abs(AsyncioScheduler().now() - time.time()) < 1
