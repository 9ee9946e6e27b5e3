"""Timer services consumed by the pacing primitives.

A timer service is the only thing a pacer knows about time: it reads the
clock with :meth:`~TimerService.now` and defers work with
:meth:`~TimerService.schedule`. Two implementations ship:

- :class:`LoopTimerService` runs on the asyncio event loop (the default).
- :class:`ManualTimerService` is a virtual clock advanced by the host,
  useful for deterministic hosts and tests.
"""

from __future__ import annotations

import heapq
import itertools
from asyncio import AbstractEventLoop, get_running_loop
from collections.abc import Callable
from typing import Any, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...

    def cancelled(self) -> bool: ...

    def when(self) -> float: ...


class TimerService(Protocol):
    """Schedules callbacks after a delay and reports the current time."""

    def now(self) -> float: ...

    def schedule(self, callback: Callable[..., Any], delay: float, *args: Any) -> TimerHandle: ...

    def cancel(self, handle: TimerHandle) -> None: ...


class LoopTimerService:
    """Timer service backed by ``loop.call_later``.

    The loop is resolved lazily, so an instance may be created outside a
    running loop and used once one is running.
    """

    __slots__ = ("_loop",)

    def __init__(self, loop: AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def _get_loop(self) -> AbstractEventLoop:
        if self._loop is None:
            self._loop = get_running_loop()
        return self._loop

    def now(self) -> float:
        return self._get_loop().time()

    def schedule(self, callback: Callable[..., Any], delay: float, *args: Any) -> TimerHandle:
        return self._get_loop().call_later(max(0.0, delay), callback, *args)

    def cancel(self, handle: TimerHandle) -> None:
        handle.cancel()


class ManualTimerHandle:
    __slots__ = ("_args", "_callback", "_cancelled", "_when")

    def __init__(self, when: float, callback: Callable[..., Any], args: tuple[Any, ...]) -> None:
        self._when = when
        self._callback = callback
        self._args = args
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    def cancelled(self) -> bool:
        return self._cancelled

    def when(self) -> float:
        return self._when

    def _run(self) -> None:
        self._callback(*self._args)

    def __repr__(self) -> str:
        state = " cancelled" if self._cancelled else ""
        return f"<ManualTimerHandle when={self._when}{state}>"


class ManualTimerService:
    """Virtual clock that only moves when :meth:`advance` is called.

    Example::

        timers = ManualTimerService()
        timers.schedule(print, 0.5, "fired")
        timers.advance(0.4)   # nothing
        timers.advance(0.1)   # prints "fired"
    """

    __slots__ = ("_now", "_queue", "_seq")

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._queue: list[tuple[float, int, ManualTimerHandle]] = []
        self._seq = itertools.count()

    @property
    def pending(self) -> int:
        """Number of scheduled timers that have not fired or been cancelled."""
        return sum(1 for _, _, handle in self._queue if not handle.cancelled())

    def now(self) -> float:
        return self._now

    def schedule(self, callback: Callable[..., Any], delay: float, *args: Any) -> ManualTimerHandle:
        handle = ManualTimerHandle(self._now + max(0.0, delay), callback, args)
        heapq.heappush(self._queue, (handle.when(), next(self._seq), handle))
        return handle

    def cancel(self, handle: TimerHandle) -> None:
        handle.cancel()

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing every timer that falls due."""
        if seconds < 0:
            raise ValueError(f"cannot advance by a negative amount, got {seconds}")
        target = self._now + seconds
        while self._queue and self._queue[0][0] <= target:
            when, _, handle = heapq.heappop(self._queue)
            if handle.cancelled():
                continue
            self._now = when
            handle._run()
        self._now = target
