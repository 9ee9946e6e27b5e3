"""Configuration types for the cadence library."""

import os
from dataclasses import dataclass
from enum import StrEnum

DEFAULT_DELAY = 0.5


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


# HTTP transport defaults
HTTP_TIMEOUT = _env_float("CADENCE_HTTP_TIMEOUT", 20.0)
HTTP_VERIFY = _env_bool("CADENCE_HTTP_VERIFY", True)


class Policy(StrEnum):
    """Available pacing policies.

    DEBOUNCE: Publish the latest value only after a quiet period.
    THROTTLE: Invoke at most once per window, with a trailing call
              carrying the most recent arguments.
    """

    DEBOUNCE = "debounce"
    THROTTLE = "throttle"


class ReloadPolicy(StrEnum):
    """What an :class:`~cadence.resource.AsyncResource` shows while reloading.

    KEEP:  Retain the previous data until the new result arrives
           (stale-while-revalidate).
    CLEAR: Blank the data as soon as a new operation starts.
    """

    KEEP = "keep"
    CLEAR = "clear"


@dataclass(frozen=True, slots=True)
class PacingConfig:
    """Configuration for a pacer.

    Attributes:
        delay: Window in seconds. For debounce, the quiet period before the
               latest input is published. For throttle, the cooldown after
               each invocation. Zero disables throttling.
        policy: The pacing policy to use.
    """

    delay: float = DEFAULT_DELAY
    policy: Policy = Policy.DEBOUNCE

    def __post_init__(self) -> None:
        if self.delay < 0:
            raise ValueError(f"delay must be non-negative, got {self.delay}")


@dataclass(frozen=True, slots=True)
class FetchConfig:
    """Configuration for an AsyncResource.

    Attributes:
        reload: Whether previous data is kept or cleared when a new
                operation starts.
        cancel_stale: Cancel the task of a superseded operation. Results of
                      superseded operations are discarded either way.
    """

    reload: ReloadPolicy = ReloadPolicy.KEEP
    cancel_stale: bool = True
