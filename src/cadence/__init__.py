"""Cadence: reactive timing and async-lifecycle primitives for Python.

Paces how often a changing value or callback propagates (debounce and
throttle), runs callbacks on a fixed period, and keeps an async operation
consistent with a changing request and manual refetches.

Basic usage:

    from cadence import DebouncedValue, ThrottledCallable

    term = DebouncedValue("", delay=0.5)
    term.update("a")
    term.update("ab")          # still "", publishes "ab" after 0.5s quiet

    on_scroll = ThrottledCallable(render, delay=0.1)
    on_scroll(120)             # runs now; later calls collapse to one trailing call

Async resources:

    from cadence import AsyncResource
    from cadence.transports import HttpFetcher, HttpRequest

    users = AsyncResource(HttpFetcher(base_url="https://api.example"))
    users.update(HttpRequest("/users"))
    data, loading, error, refetch = await users.settled()

Decorator usage:

    from cadence import throttle

    @throttle(delay=0.25)
    def on_resize(width: int) -> None:
        ...
"""

from cadence.config import FetchConfig, PacingConfig, Policy, ReloadPolicy
from cadence.decorator import throttle
from cadence.errors import (
    CadenceError,
    DecodeError,
    DetachedError,
    ErrorKind,
    FetchError,
    TransportError,
    UnsuccessfulOutcome,
)
from cadence.interval import IntervalRunner
from cadence.resource import AsyncResource
from cadence.scope import Scope
from cadence.state import Failed, FetchState, Idle, Loading, ResourceSnapshot, Succeeded
from cadence.strategies.base import BasePacer
from cadence.strategies.debounce import DebouncedValue
from cadence.strategies.throttle import ThrottledCallable
from cadence.timers import LoopTimerService, ManualTimerService, TimerService

__all__ = [
    "AsyncResource",
    "BasePacer",
    "CadenceError",
    "DebouncedValue",
    "DecodeError",
    "DetachedError",
    "ErrorKind",
    "Failed",
    "FetchConfig",
    "FetchError",
    "FetchState",
    "Idle",
    "IntervalRunner",
    "Loading",
    "LoopTimerService",
    "ManualTimerService",
    "PacingConfig",
    "Policy",
    "ReloadPolicy",
    "ResourceSnapshot",
    "Scope",
    "Succeeded",
    "ThrottledCallable",
    "TimerService",
    "TransportError",
    "UnsuccessfulOutcome",
    "throttle",
]

__version__ = "0.1.0"
