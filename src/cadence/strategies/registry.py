"""Maps each ``Policy`` enum member to a callable that builds a ``BasePacer``.

When you add a new policy:

1. Add a variant to the ``Policy`` enum in ``config.py``.
2. Add an entry to ``REGISTRY`` pointing to a factory function or lambda
   that constructs the concrete pacer from a :class:`PacingConfig`, the
   pacer's target (initial value or callable) and a timer service.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from cadence.config import PacingConfig, Policy
from cadence.strategies.base import BasePacer
from cadence.strategies.debounce import DebouncedValue
from cadence.strategies.throttle import ThrottledCallable
from cadence.timers import TimerService

PacerFactory = Callable[[PacingConfig, Any, TimerService | None], BasePacer]

REGISTRY: dict[Policy, PacerFactory] = {
    Policy.DEBOUNCE: lambda cfg, initial, timers: DebouncedValue(
        initial,
        cfg.delay,
        timers=timers,
    ),
    Policy.THROTTLE: lambda cfg, func, timers: ThrottledCallable(
        func,
        cfg.delay,
        timers=timers,
    ),
}


def build_pacer(
    config: PacingConfig,
    target: Any,
    timers: TimerService | None = None,
) -> BasePacer:
    """Resolve *config.policy* to a concrete ``BasePacer`` wrapping *target*."""
    factory = REGISTRY.get(config.policy)
    if not factory:
        raise ValueError(
            f"Unknown policy: {config.policy!r}. Registered: {', '.join(p.value for p in REGISTRY)}"
        )
    return factory(config, target, timers)
