"""Tests for IntervalRunner."""

import asyncio
from unittest.mock import MagicMock

import pytest

from cadence.errors import DetachedError
from cadence.interval import IntervalRunner
from cadence.timers import ManualTimerHandle


class LateTimers:
    """Timer service whose pending timer is fired by hand at any time."""

    def __init__(self):
        self.clock = 0.0
        self.delays = []
        self._handle = None

    def now(self):
        return self.clock

    def schedule(self, callback, delay, *args):
        self.delays.append(delay)
        self._handle = ManualTimerHandle(self.clock + delay, callback, args)
        return self._handle

    def cancel(self, handle):
        handle.cancel()

    def fire_at(self, when):
        self.clock = when
        self._handle._run()


class TestIntervalRunnerPaused:
    def test_none_period_does_not_schedule(self, timers):
        cb = MagicMock()
        runner = IntervalRunner(cb, None, timers=timers)
        timers.advance(10.0)
        cb.assert_not_called()
        assert runner.running is False

    def test_zero_period_does_not_schedule(self, timers):
        cb = MagicMock()
        runner = IntervalRunner(cb, 0, timers=timers)
        timers.advance(10.0)
        cb.assert_not_called()
        assert runner.running is False

    def test_negative_period_raises(self, timers):
        with pytest.raises(ValueError, match="period must be non-negative"):
            IntervalRunner(MagicMock(), -1.0, timers=timers)


class TestIntervalRunnerTicks:
    def test_fires_every_period(self, timers):
        cb = MagicMock()
        IntervalRunner(cb, 1.0, timers=timers)
        timers.advance(0.5)
        assert cb.call_count == 0
        timers.advance(0.5)
        assert cb.call_count == 1
        timers.advance(2.0)
        assert cb.call_count == 3

    def test_latest_callback_is_called(self, timers):
        x = MagicMock()
        y = MagicMock()
        runner = IntervalRunner(x, 1.0, timers=timers)
        timers.advance(0.5)
        runner.update(y, 1.0)
        timers.advance(0.5)  # phase kept: tick at t=1.0
        x.assert_not_called()
        assert y.call_count == 1

    def test_callback_setter_keeps_phase(self, timers):
        x = MagicMock()
        y = MagicMock()
        runner = IntervalRunner(x, 1.0, timers=timers)
        timers.advance(1.0)
        timers.advance(0.75)
        runner.callback = y
        timers.advance(0.25)  # t=2.0
        assert x.call_count == 1
        assert y.call_count == 1

    def test_period_change_rearms_from_now(self, timers):
        cb = MagicMock()
        runner = IntervalRunner(cb, 1.0, timers=timers)
        timers.advance(0.75)
        runner.update(cb, 0.5)
        timers.advance(0.25)  # t=1.0; old timer torn down
        assert cb.call_count == 0
        timers.advance(0.25)  # t=1.25
        assert cb.call_count == 1
        assert runner.period == 0.5

    def test_pause_and_resume(self, timers):
        cb = MagicMock()
        runner = IntervalRunner(cb, 1.0, timers=timers)
        timers.advance(1.0)
        runner.period = None
        timers.advance(5.0)
        assert cb.call_count == 1
        runner.period = 2.0
        assert runner.running is True
        timers.advance(2.0)
        assert cb.call_count == 2

    def test_raising_callback_keeps_running(self, timers):
        calls = []

        def flaky():
            calls.append(timers.now())
            if len(calls) == 1:
                raise RuntimeError("boom")

        IntervalRunner(flaky, 1.0, timers=timers)
        with pytest.raises(RuntimeError, match="boom"):
            timers.advance(1.0)
        timers.advance(1.0)
        assert calls == [1.0, 2.0]

    def test_late_ticks_do_not_drift(self):
        timers = LateTimers()
        calls = []
        IntervalRunner(lambda: calls.append(timers.clock), 1.0, timers=timers)
        timers.fire_at(1.25)
        timers.fire_at(2.1)
        assert timers.delays == pytest.approx([1.0, 0.75, 0.9])
        assert calls == [1.25, 2.1]

    def test_tick_later_than_a_period_catches_up_once(self):
        timers = LateTimers()
        IntervalRunner(MagicMock(), 1.0, timers=timers)
        timers.fire_at(2.5)
        timers.fire_at(2.5)
        assert timers.delays == pytest.approx([1.0, 0.0, 1.0])


class TestIntervalRunnerDetach:
    def test_no_ticks_after_detach(self, timers):
        cb = MagicMock()
        runner = IntervalRunner(cb, 1.0, timers=timers)
        timers.advance(1.0)
        runner.detach()
        timers.advance(5.0)
        assert cb.call_count == 1
        assert timers.pending == 0

    def test_update_after_detach_raises(self, timers):
        runner = IntervalRunner(MagicMock(), 1.0, timers=timers)
        runner.detach()
        with pytest.raises(DetachedError, match="IntervalRunner is detached"):
            runner.update(MagicMock(), 1.0)

    def test_context_manager(self, timers):
        with IntervalRunner(MagicMock(), 1.0, timers=timers) as runner:
            assert runner.running is True
        assert runner.detached is True
        assert runner.running is False


class TestIntervalRunnerOnLoop:
    async def test_ticks_on_event_loop(self):
        ticks = []
        runner = IntervalRunner(lambda: ticks.append(1), 0.02)
        await asyncio.sleep(0.11)
        runner.detach()
        count = len(ticks)
        assert count >= 2
        await asyncio.sleep(0.05)
        assert len(ticks) == count

    def test_repr(self):
        runner = IntervalRunner(MagicMock())
        assert repr(runner) == "IntervalRunner(period=None, running=False, detached=False)"
