"""Minimal subscriber list shared by the observable primitives."""

from __future__ import annotations

from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")

Unsubscribe = Callable[[], None]


class Listeners(Generic[T]):
    __slots__ = ("_callbacks",)

    def __init__(self) -> None:
        self._callbacks: list[Callable[[T], None]] = []

    def subscribe(self, callback: Callable[[T], None]) -> Unsubscribe:
        """Register a callback. Returns a function that removes it."""
        self._callbacks.append(callback)

        def _unsubscribe() -> None:
            try:
                self._callbacks.remove(callback)
            except ValueError:
                pass  # already removed

        return _unsubscribe

    def emit(self, value: T) -> None:
        # Snapshot so callbacks may unsubscribe while being notified.
        for callback in list(self._callbacks):
            callback(value)

    def clear(self) -> None:
        self._callbacks.clear()

    def __len__(self) -> int:
        return len(self._callbacks)
