"""Fixed-period callback runner that always calls the latest callback."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from cadence.errors import DetachedError
from cadence.timers import LoopTimerService, TimerHandle, TimerService

logger = logging.getLogger(__name__)


class IntervalRunner:
    """Invoke a callback every *period* seconds until paused or detached.

    The timer reads the callback at fire time, so replacing it between
    ticks takes effect on the next tick without disturbing the phase.
    Ticks are scheduled from the previous deadline, not from the firing
    time, so event-loop lateness does not accumulate. A tick that fires
    more than a period late is followed by one immediate catch-up tick.
    Changing the period re-arms the timer from now. A period of ``None``
    or ``0`` pauses the runner.

    Example::

        runner = IntervalRunner(poll, 1.0)
        runner.callback = poll_verbose   # next tick calls poll_verbose
        runner.period = None             # paused
        runner.period = 2.0              # resumed, first tick in 2s
        runner.detach()
    """

    __slots__ = ("_callback", "_deadline", "_detached", "_period", "_timer_handle", "_timers")

    def __init__(
        self,
        callback: Callable[[], Any],
        period: float | None = None,
        *,
        timers: TimerService | None = None,
    ) -> None:
        self._check_period(period)
        self._callback = callback
        self._period = period
        self._timers: TimerService = timers if timers is not None else LoopTimerService()
        self._timer_handle: TimerHandle | None = None
        self._deadline = 0.0
        self._detached = False
        self._rearm()

    @staticmethod
    def _check_period(period: float | None) -> None:
        if period is not None and period < 0:
            raise ValueError(f"period must be non-negative or None, got {period}")

    @property
    def callback(self) -> Callable[[], Any]:
        return self._callback

    @callback.setter
    def callback(self, value: Callable[[], Any]) -> None:
        self._callback = value

    @property
    def period(self) -> float | None:
        return self._period

    @period.setter
    def period(self, value: float | None) -> None:
        self._ensure_attached()
        self._check_period(value)
        if value == self._period:
            return
        self._period = value
        self._rearm()

    @property
    def running(self) -> bool:
        return self._timer_handle is not None

    @property
    def detached(self) -> bool:
        return self._detached

    def update(self, callback: Callable[[], Any], period: float | None) -> None:
        """Observe the latest callback and period on this tick."""
        self._ensure_attached()
        self._callback = callback
        self.period = period

    def detach(self) -> None:
        """Tear down the timer; no further invocations happen (idempotent)."""
        if self._detached:
            return
        self._detached = True
        self._stop()

    def _rearm(self) -> None:
        self._stop()
        if self._period:
            self._deadline = self._timers.now() + self._period
            self._timer_handle = self._timers.schedule(self._tick, self._period)
            logger.debug("interval armed every %.3fs", self._period)

    def _stop(self) -> None:
        if self._timer_handle is not None:
            self._timers.cancel(self._timer_handle)
            self._timer_handle = None

    def _tick(self) -> None:
        self._timer_handle = None
        if self._detached or not self._period:
            return
        # Arm the next tick first so a raising callback does not stop the runner.
        now = self._timers.now()
        self._deadline = max(self._deadline + self._period, now)
        self._timer_handle = self._timers.schedule(self._tick, self._deadline - now)
        self._callback()

    def _ensure_attached(self) -> None:
        if self._detached:
            raise DetachedError("IntervalRunner is detached")

    def __enter__(self) -> IntervalRunner:
        return self

    def __exit__(self, *_: Any) -> None:
        self.detach()

    def __repr__(self) -> str:
        return f"IntervalRunner(period={self._period}, running={self.running}, detached={self._detached})"
