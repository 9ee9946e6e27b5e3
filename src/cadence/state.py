"""Visible states of an async resource."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, NamedTuple, TypeVar

from cadence.errors import FetchError

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Idle:
    """No request has been observed yet."""


@dataclass(frozen=True, slots=True)
class Loading:
    """An operation is in flight.

    Attributes:
        previous: Data retained from an earlier operation, if the reload
                  policy keeps it.
    """

    previous: Any = None


@dataclass(frozen=True, slots=True)
class Succeeded(Generic[T]):
    data: T


@dataclass(frozen=True, slots=True)
class Failed:
    error: FetchError
    previous: Any = None


FetchState = Idle | Loading | Succeeded | Failed


class ResourceSnapshot(NamedTuple):
    """What a consumer observes on a tick."""

    data: Any
    loading: bool
    error: FetchError | None
    refetch: Callable[[], None]


def data_of(state: FetchState) -> Any:
    """Data visible in *state* (``None`` when there is none)."""
    if isinstance(state, Succeeded):
        return state.data
    if isinstance(state, (Loading, Failed)):
        return state.previous
    return None


def error_of(state: FetchState) -> FetchError | None:
    return state.error if isinstance(state, Failed) else None
