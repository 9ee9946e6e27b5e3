"""Trailing-edge debounce of a changing value."""

from collections.abc import Callable
from typing import Any, Generic, TypeVar

from cadence._listeners import Listeners, Unsubscribe
from cadence.config import DEFAULT_DELAY
from cadence.strategies.base import BasePacer
from cadence.timers import TimerHandle, TimerService

T = TypeVar("T")

_UNSET: Any = object()


def _changed(old: Any, new: Any) -> bool:
    return old is not new and old != new


class DebouncedValue(BasePacer, Generic[T]):
    """A value that only follows its input after the input goes quiet.

    How it works:
        - The first value is published immediately.
        - Each :meth:`update` with a different input re-arms the timer.
        - When the timer expires (quiet period), the input seen when it was
          armed becomes the published :attr:`value`.

    Example::

        delay=0.5

        t=0.00 "a"    -> value "a" (initial)
        t=0.05 "ab"   -> arm timer (0.5s), value still "a"
        t=0.10 "abc"  -> re-arm timer (0.5s), value still "a"
        t=0.60 timer  -> value "abc"; "ab" is never published

    Complexity:
        Time:   O(1) per update
        Memory: O(1)
    """

    __slots__ = ("_listeners", "_pending_value", "_seen", "_timer_handle", "_value")

    def __init__(
        self,
        initial: T,
        delay: float = DEFAULT_DELAY,
        *,
        timers: TimerService | None = None,
    ) -> None:
        super().__init__(delay, timers=timers)
        self._value: T = initial
        self._seen: T = initial
        self._pending_value: T = _UNSET
        self._timer_handle: TimerHandle | None = None
        self._listeners: Listeners[T] = Listeners()

    @property
    def value(self) -> T:
        """The last published value."""
        return self._value

    @property
    def pending(self) -> bool:
        return self._timer_handle is not None

    def update(self, value: T, delay: float | None = None) -> T:
        """Observe *value* on this tick and return the published value.

        A new *delay* only applies to the next armed timer.
        """
        self._ensure_attached()
        if delay is not None:
            self.delay = delay

        if _changed(self._seen, value):
            self._seen = value
            self._arm(value)

        return self._value

    def subscribe(self, callback: Callable[[T], None]) -> Unsubscribe:
        """Call *callback* with each newly published value."""
        return self._listeners.subscribe(callback)

    def flush(self) -> None:
        """Publish the pending input immediately."""
        if self._timer_handle is None:
            return
        value = self._pending_value
        self.cancel()
        self._publish(value)

    def cancel(self) -> None:
        if self._timer_handle is not None:
            self._timers.cancel(self._timer_handle)
            self._timer_handle = None
        self._pending_value = _UNSET

    def detach(self) -> None:
        super().detach()
        self._listeners.clear()

    def _arm(self, value: T) -> None:
        if self._timer_handle is not None:
            self._timers.cancel(self._timer_handle)
        self._pending_value = value
        self._timer_handle = self._timers.schedule(self._on_timer, self._delay)

    def _on_timer(self) -> None:
        self._timer_handle = None
        value, self._pending_value = self._pending_value, _UNSET
        if self._detached or value is _UNSET:
            return
        self._publish(value)

    def _publish(self, value: T) -> None:
        if not _changed(self._value, value):
            return
        self._value = value
        self._listeners.emit(value)
