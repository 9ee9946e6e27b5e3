"""Abstract base class that all pacers must implement."""

from abc import ABC, abstractmethod
from typing import Any

from cadence.errors import DetachedError
from cadence.timers import LoopTimerService, TimerService


class BasePacer(ABC):
    """Base class for all pacing policies.

    Every pacer holds at most one pending timer and decides, on each new
    input, whether to act now, re-arm the timer, or leave it alone.

    Subclasses must implement :attr:`pending`, :meth:`flush` and
    :meth:`cancel`. The constructor handles the common ``delay`` parameter
    and the timer service; :meth:`detach` ends the pacer's life.

    Args:
        delay: Window in seconds. Must be non-negative.
        timers: Timer service to schedule on. Defaults to the running
                asyncio loop.
    """

    __slots__ = ("_delay", "_detached", "_timers")

    def __init__(self, delay: float, *, timers: TimerService | None = None) -> None:
        self._check_delay(delay)
        self._delay = delay
        self._timers: TimerService = timers if timers is not None else LoopTimerService()
        self._detached = False

    @staticmethod
    def _check_delay(delay: float) -> None:
        if delay < 0:
            raise ValueError(f"delay must be non-negative, got {delay}")

    @property
    def delay(self) -> float:
        return self._delay

    @delay.setter
    def delay(self, value: float) -> None:
        self._check_delay(value)
        self._delay = value

    @property
    def detached(self) -> bool:
        return self._detached

    @property
    @abstractmethod
    def pending(self) -> bool:
        """Whether a timer is armed."""

    @abstractmethod
    def flush(self) -> None:
        """Perform the pending action now instead of waiting for the timer."""

    @abstractmethod
    def cancel(self) -> None:
        """Drop the pending action without performing it."""

    def detach(self) -> None:
        """Cancel any pending timer and refuse further input (idempotent)."""
        if self._detached:
            return
        self._detached = True
        self.cancel()

    def _ensure_attached(self) -> None:
        if self._detached:
            raise DetachedError(f"{type(self).__name__} is detached")

    def __enter__(self) -> "BasePacer":
        return self

    def __exit__(self, *_: Any) -> None:
        self.detach()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(delay={self._delay}, pending={self.pending}, detached={self._detached})"
