"""Lifecycle manager for one async operation tied to a changing request.

An :class:`AsyncResource` keeps the latest settled result of ``fetcher(descriptor)``
and re-runs the fetcher whenever the descriptor changes or :meth:`~AsyncResource.refetch`
is called. Every start bumps an epoch counter; a settlement is applied only
if its captured epoch is still current, so results land in trigger order,
never in completion order.

Example::

    resource = AsyncResource(HttpFetcher())
    resource.update(HttpRequest("/api/users"))   # Loading
    snapshot = await resource.settled()
    snapshot.data, snapshot.error

    resource.update(HttpRequest("/api/users", params={"page": 2}))
    resource.refetch()
    resource.detach()
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Generic, TypeVar

from cadence._listeners import Listeners, Unsubscribe
from cadence.config import FetchConfig, ReloadPolicy
from cadence.errors import DetachedError, FetchError
from cadence.state import (
    FetchState,
    Failed,
    Idle,
    Loading,
    ResourceSnapshot,
    Succeeded,
    data_of,
    error_of,
)

logger = logging.getLogger(__name__)

D = TypeVar("D")
T = TypeVar("T")

Fetcher = Callable[[D], Awaitable[T]]

_UNSET: Any = object()


class AsyncResource(Generic[D, T]):
    """Data, loading flag and error of the most recently triggered operation.

    Args:
        fetcher: Coroutine function performing the operation for a descriptor.
                 Replaceable through :attr:`fetcher` without restarting.
        config: Reload and cancellation policy.
    """

    __slots__ = (
        "_config",
        "_descriptor",
        "_detached",
        "_epoch",
        "_fetcher",
        "_inflight",
        "_listeners",
        "_state",
        "_task",
    )

    def __init__(self, fetcher: Fetcher[D, T], *, config: FetchConfig | None = None) -> None:
        self._fetcher = fetcher
        self._config = config or FetchConfig()
        self._descriptor: D = _UNSET
        self._epoch = 0
        self._state: FetchState = Idle()
        self._task: asyncio.Task[None] | None = None
        self._inflight: set[asyncio.Task[None]] = set()
        self._listeners: Listeners[ResourceSnapshot] = Listeners()
        self._detached = False

    @property
    def fetcher(self) -> Fetcher[D, T]:
        return self._fetcher

    @fetcher.setter
    def fetcher(self, value: Fetcher[D, T]) -> None:
        self._fetcher = value

    @property
    def config(self) -> FetchConfig:
        return self._config

    @property
    def descriptor(self) -> D | None:
        return None if self._descriptor is _UNSET else self._descriptor

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def state(self) -> FetchState:
        return self._state

    @property
    def data(self) -> T | None:
        return data_of(self._state)

    @property
    def loading(self) -> bool:
        return isinstance(self._state, Loading)

    @property
    def error(self) -> FetchError | None:
        return error_of(self._state)

    @property
    def detached(self) -> bool:
        return self._detached

    def snapshot(self) -> ResourceSnapshot:
        return ResourceSnapshot(self.data, self.loading, self.error, self.refetch)

    def update(self, descriptor: D) -> ResourceSnapshot:
        """Observe *descriptor* on this tick; start a new operation if it changed."""
        self._ensure_attached()
        if self._descriptor is _UNSET or self._descriptor != descriptor:
            self._descriptor = descriptor
            self._start()
        return self.snapshot()

    def refetch(self) -> None:
        """Restart the operation for the current descriptor."""
        self._ensure_attached()
        if self._descriptor is _UNSET:
            raise RuntimeError("AsyncResource has no request to refetch")
        self._start()

    def subscribe(self, callback: Callable[[ResourceSnapshot], None]) -> Unsubscribe:
        """Call *callback* with a snapshot after every visible transition."""
        return self._listeners.subscribe(callback)

    async def settled(self) -> ResourceSnapshot:
        """Wait until the most recently started operation settles."""
        while self._task is not None and not self._task.done():
            await asyncio.wait({self._task})
        return self.snapshot()

    def detach(self) -> None:
        """Abandon in-flight operations; nothing changes after this (idempotent)."""
        if self._detached:
            return
        self._detached = True
        for task in list(self._inflight):
            task.cancel()
        self._listeners.clear()

    def _start(self) -> None:
        self._epoch += 1
        epoch = self._epoch

        previous = data_of(self._state) if self._config.reload is ReloadPolicy.KEEP else None

        if self._config.cancel_stale and self._task is not None and not self._task.done():
            logger.debug("cancelling superseded operation (epoch %d)", epoch - 1)
            self._task.cancel()

        task = asyncio.get_running_loop().create_task(self._run(epoch, self._descriptor))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        self._task = task
        logger.debug("started operation for %r (epoch %d)", self._descriptor, epoch)
        # Emitted last: listeners may re-enter update() or refetch().
        self._set_state(Loading(previous))

    async def _run(self, epoch: int, descriptor: D) -> None:
        try:
            result = await self._fetcher(descriptor)
        except asyncio.CancelledError:
            logger.debug("operation cancelled (epoch %d)", epoch)
            raise
        except Exception as exc:
            self._settle(epoch, Failed(FetchError.from_exception(exc), self._retained()))
        else:
            self._settle(epoch, Succeeded(result))

    def _retained(self) -> Any:
        if isinstance(self._state, Loading):
            return self._state.previous
        return None

    def _settle(self, epoch: int, state: FetchState) -> None:
        if self._detached or epoch != self._epoch:
            logger.debug("discarding stale result (epoch %d, current %d)", epoch, self._epoch)
            return
        self._set_state(state)

    def _set_state(self, state: FetchState) -> None:
        self._state = state
        self._listeners.emit(self.snapshot())

    def _ensure_attached(self) -> None:
        if self._detached:
            raise DetachedError("AsyncResource is detached")

    def __repr__(self) -> str:
        return f"AsyncResource(state={self._state!r}, epoch={self._epoch}, detached={self._detached})"
