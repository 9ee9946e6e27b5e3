"""Consumer-side host for the cadence primitives.

A :class:`Scope` stands in for one component of a host's update cycle.
Creating it attaches; each keyed call below is one observation tick for
that slot; :meth:`Scope.detach` tears everything down. Retained state
(timers, timestamps, epochs, latest callbacks) lives in the per-key
primitive, created on the first tick and reused on every later one.

Example::

    with Scope() as scope:
        def render(query: str) -> None:
            term = scope.debounced("search", query, delay=0.5)
            page = scope.resource("results", fetch_results, {"q": term})
            scope.interval("clock", tick, 1.0 if page.loading else None)
            ...
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from cadence.config import DEFAULT_DELAY, FetchConfig, PacingConfig, Policy
from cadence.errors import DetachedError
from cadence.interval import IntervalRunner
from cadence.resource import AsyncResource, Fetcher
from cadence.state import ResourceSnapshot
from cadence.strategies.debounce import DebouncedValue
from cadence.strategies.registry import build_pacer
from cadence.strategies.throttle import ThrottledCallable
from cadence.timers import LoopTimerService, TimerService

logger = logging.getLogger(__name__)

T = TypeVar("T")

Slot = DebouncedValue | ThrottledCallable | IntervalRunner | AsyncResource

P = TypeVar("P", DebouncedValue, ThrottledCallable, IntervalRunner, AsyncResource)


class Scope:
    """Owns the primitives of one consumer, keyed by name.

    Args:
        timers: Timer service shared by every pacer in the scope.
    """

    __slots__ = ("_detached", "_slots", "_timers")

    def __init__(self, *, timers: TimerService | None = None) -> None:
        self._timers: TimerService = timers if timers is not None else LoopTimerService()
        self._slots: dict[str, Slot] = {}
        self._detached = False

    @property
    def timers(self) -> TimerService:
        return self._timers

    @property
    def active_slots(self) -> int:
        """Number of primitives currently held by the scope."""
        return len(self._slots)

    @property
    def detached(self) -> bool:
        return self._detached

    def debounced(self, key: str, value: T, delay: float = DEFAULT_DELAY) -> T:
        """Debounce *value*; returns the published value for this tick."""
        slot = self._get(key, DebouncedValue)
        if slot is None:
            config = PacingConfig(delay=delay, policy=Policy.DEBOUNCE)
            slot = self._put(key, build_pacer(config, value, self._timers))
        return slot.update(value, delay)

    def throttled(self, key: str, func: Callable[..., Any], delay: float) -> ThrottledCallable:
        """Return a throttled *func*, reused while *func* and *delay* are unchanged."""
        slot = self._get(key, ThrottledCallable)
        if slot is not None and slot.func == func and slot.delay == delay:
            return slot
        if slot is not None:
            logger.debug("throttle %r reset", key)
            slot.detach()
        config = PacingConfig(delay=delay, policy=Policy.THROTTLE)
        return self._put(key, build_pacer(config, func, self._timers))

    def interval(self, key: str, callback: Callable[[], Any], period: float | None) -> IntervalRunner:
        """Run *callback* every *period* seconds; ``None`` pauses."""
        slot = self._get(key, IntervalRunner)
        if slot is None:
            return self._put(key, IntervalRunner(callback, period, timers=self._timers))
        slot.update(callback, period)
        return slot

    def resource(
        self,
        key: str,
        fetcher: Fetcher[Any, T],
        descriptor: Any,
        *,
        config: FetchConfig | None = None,
    ) -> ResourceSnapshot:
        """Track the operation for *descriptor*; returns this tick's snapshot.

        *config* is only read when the slot is created.
        """
        slot = self._get(key, AsyncResource)
        if slot is None:
            slot = self._put(key, AsyncResource(fetcher, config=config))
        else:
            slot.fetcher = fetcher
        return slot.update(descriptor)

    def release(self, key: str) -> None:
        """Detach and forget the primitive under *key*, if any."""
        slot = self._slots.pop(key, None)
        if slot is not None:
            slot.detach()

    def detach(self) -> None:
        """Detach every primitive; the scope refuses further ticks (idempotent)."""
        if self._detached:
            return
        self._detached = True
        slots, self._slots = self._slots, {}
        for slot in slots.values():
            slot.detach()
        logger.debug("scope detached (%d slots)", len(slots))

    def _get(self, key: str, kind: type[P]) -> P | None:
        if self._detached:
            raise DetachedError("Scope is detached")
        slot = self._slots.get(key)
        if slot is None:
            return None
        if not isinstance(slot, kind):
            raise TypeError(f"slot {key!r} holds a {type(slot).__name__}, not a {kind.__name__}")
        return slot

    def _put(self, key: str, slot: Any) -> Any:
        self._slots[key] = slot
        return slot

    def __enter__(self) -> Scope:
        return self

    def __exit__(self, *_: Any) -> None:
        self.detach()

    def __repr__(self) -> str:
        return f"Scope(slots={sorted(self._slots)}, detached={self._detached})"
