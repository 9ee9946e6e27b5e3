"""Leading-edge throttle with a trailing call that carries the latest arguments."""

import logging
from collections.abc import Callable
from typing import Any

from cadence.strategies.base import BasePacer
from cadence.timers import TimerHandle, TimerService

logger = logging.getLogger(__name__)


class ThrottledCallable(BasePacer):
    """Call *func* at most once per *delay* seconds.

    How it works:
        - A call outside the cooldown window invokes *func* right away.
        - The first call inside the window schedules one trailing call for
          the moment the window ends.
        - Later calls inside the window only replace the arguments the
          trailing call will use (trailing call wins).
        - ``delay=0`` disables throttling.

    Example::

        delay=0.1

        t=0.00 f(1)  -> func(1)
        t=0.01 f(2)  -> schedule trailing call at t=0.10
        t=0.04 f(3)  -> trailing call will use (3)
        t=0.10       -> func(3); 2 is never passed to func

    Complexity:
        Time:   O(1) per call
        Memory: O(1) latest arguments
    """

    __slots__ = ("_func", "_last_fired", "_latest_args", "_timer_handle")

    def __init__(
        self,
        func: Callable[..., Any],
        delay: float,
        *,
        timers: TimerService | None = None,
    ) -> None:
        super().__init__(delay, timers=timers)
        self._func = func
        self._last_fired: float | None = None
        self._latest_args: tuple[tuple[Any, ...], dict[str, Any]] | None = None
        self._timer_handle: TimerHandle | None = None

    @property
    def func(self) -> Callable[..., Any]:
        return self._func

    @property
    def last_fired(self) -> float | None:
        """Timer-service time of the last actual invocation, if any."""
        return self._last_fired

    @property
    def pending(self) -> bool:
        return self._timer_handle is not None

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        self._ensure_attached()
        now = self._timers.now()

        if self._delay <= 0 or self._last_fired is None or now - self._last_fired >= self._delay:
            self.cancel()
            self._invoke(now, args, kwargs)
            return

        self._latest_args = (args, kwargs)
        if self._timer_handle is None:
            remaining = self._delay - (now - self._last_fired)
            self._timer_handle = self._timers.schedule(self._on_timer, remaining)
            logger.debug("%s deferred for %.3fs", self._name, remaining)

    def flush(self) -> None:
        """Run the pending trailing call now."""
        if self._timer_handle is None or self._latest_args is None:
            return
        args, kwargs = self._latest_args
        self.cancel()
        self._invoke(self._timers.now(), args, kwargs)

    def cancel(self) -> None:
        if self._timer_handle is not None:
            self._timers.cancel(self._timer_handle)
            self._timer_handle = None
        self._latest_args = None

    def _on_timer(self) -> None:
        self._timer_handle = None
        latest, self._latest_args = self._latest_args, None
        if self._detached or latest is None:
            return
        args, kwargs = latest
        self._invoke(self._timers.now(), args, kwargs)

    def _invoke(self, now: float, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
        self._last_fired = now
        self._func(*args, **kwargs)

    @property
    def _name(self) -> str:
        return getattr(self._func, "__qualname__", repr(self._func))

    def __repr__(self) -> str:
        return (
            f"ThrottledCallable({self._name}, delay={self._delay}, "
            f"pending={self.pending}, detached={self._detached})"
        )
