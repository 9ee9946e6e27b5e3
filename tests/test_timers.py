"""Tests for the timer services."""

import asyncio

import pytest

from cadence.timers import LoopTimerService, ManualTimerService


class TestManualTimerService:
    def test_fires_when_due(self, timers):
        fired = []
        timers.schedule(fired.append, 0.5, "x")
        timers.advance(0.4)
        assert fired == []
        timers.advance(0.1)
        assert fired == ["x"]

    def test_fires_in_deadline_order(self, timers):
        fired = []
        timers.schedule(fired.append, 0.3, "late")
        timers.schedule(fired.append, 0.1, "early")
        timers.schedule(fired.append, 0.1, "early-second")
        timers.advance(1.0)
        assert fired == ["early", "early-second", "late"]

    def test_now_tracks_firing_time(self, timers):
        seen = []
        timers.schedule(lambda: seen.append(timers.now()), 0.25)
        timers.advance(1.0)
        assert seen == [0.25]
        assert timers.now() == 1.0

    def test_cancelled_timer_does_not_fire(self, timers):
        fired = []
        handle = timers.schedule(fired.append, 0.1, "x")
        timers.cancel(handle)
        timers.advance(1.0)
        assert fired == []
        assert handle.cancelled() is True

    def test_timer_scheduled_by_callback_fires_in_same_advance(self, timers):
        fired = []

        def first():
            fired.append("first")
            timers.schedule(fired.append, 0.25, "second")

        timers.schedule(first, 0.25)
        timers.advance(1.0)
        assert fired == ["first", "second"]

    def test_pending_counts_live_timers(self, timers):
        a = timers.schedule(lambda: None, 1.0)
        timers.schedule(lambda: None, 2.0)
        assert timers.pending == 2
        a.cancel()
        assert timers.pending == 1
        timers.advance(5.0)
        assert timers.pending == 0

    def test_negative_advance_raises(self, timers):
        with pytest.raises(ValueError, match="negative"):
            timers.advance(-1)

    def test_custom_start(self):
        t = ManualTimerService(start=10.0)
        handle = t.schedule(lambda: None, 1.5)
        assert handle.when() == 11.5


class TestLoopTimerService:
    async def test_schedule_runs_on_loop(self):
        service = LoopTimerService()
        done = asyncio.Event()
        service.schedule(done.set, 0.01)
        await asyncio.wait_for(done.wait(), timeout=1.0)

    async def test_cancel(self):
        service = LoopTimerService()
        fired = []
        handle = service.schedule(fired.append, 0.01, "x")
        service.cancel(handle)
        await asyncio.sleep(0.05)
        assert fired == []

    async def test_now_is_loop_time(self):
        service = LoopTimerService()
        loop = asyncio.get_running_loop()
        assert service.now() == pytest.approx(loop.time(), abs=0.05)

    def test_requires_running_loop_on_use(self):
        service = LoopTimerService()
        with pytest.raises(RuntimeError):
            service.now()
