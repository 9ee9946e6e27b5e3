"""Decorator API for applying throttle behavior to functions."""

import inspect
from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar, cast, overload

from cadence.strategies.throttle import ThrottledCallable
from cadence.timers import TimerService

F = TypeVar("F", bound=Callable[..., Any])

DEFAULT_THROTTLE_DELAY = 0.1


@overload
def throttle(
    func: F,
    /,
    *,
    delay: float = DEFAULT_THROTTLE_DELAY,
    timers: TimerService | None = None,
) -> F: ...


@overload
def throttle(
    *,
    delay: float = DEFAULT_THROTTLE_DELAY,
    timers: TimerService | None = None,
) -> Callable[[F], F]: ...


def throttle(
    func: F | None = None,
    /,
    *,
    delay: float = DEFAULT_THROTTLE_DELAY,
    timers: TimerService | None = None,
) -> F | Callable[[F], F]:
    """Decorator that throttles calls to a function.

    The first call runs immediately. Calls arriving within *delay* seconds
    of the last invocation collapse into one trailing call that receives
    the most recent arguments. The wrapper always returns ``None``.

    Args:
        func: The function to decorate (when used without parentheses).
        delay: Cooldown in seconds. ``0`` disables throttling.
        timers: Timer service to schedule trailing calls on.

    Examples:
    ```python
        # With parentheses
        @throttle(delay=0.25)
        def on_scroll(offset: int) -> None:
            print(offset)

        # Without parentheses (uses defaults)
        @throttle
        def on_resize() -> None:
            ...

        # Wrapping an existing callable
        paced = throttle(print, delay=1.0)
    ```
    """

    def decorator(fn: F) -> F:
        if inspect.iscoroutinefunction(fn):
            raise TypeError("@throttle only supports regular functions.")

        throttler = ThrottledCallable(fn, delay, timers=timers)

        @wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> None:
            throttler(*args, **kwargs)

        wrapper.throttler = throttler  # type: ignore[attr-defined]
        wrapper.flush = throttler.flush  # type: ignore[attr-defined]
        wrapper.cancel = throttler.cancel  # type: ignore[attr-defined]
        wrapper.detach = throttler.detach  # type: ignore[attr-defined]

        return cast("F", wrapper)

    if func is not None:
        return decorator(func)

    return decorator
