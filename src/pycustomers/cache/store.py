"""In-memory, single-flight resource cache.

Each resource key has at most one entry and at most one current fetch.
Fetches are started as tasks so that callers (and subscribers) can come
and go without ever cancelling a fetch another consumer depends on.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from pycustomers.models.resource import ErrorInfo, ErrorKind, ResourceSnapshot, ResourceStatus
from pycustomers.result import Failure, Result

_logger = logging.getLogger(__name__)

Fetcher = Callable[[], Awaitable[Result[Any]]]
Subscriber = Callable[[ResourceSnapshot[Any]], None]

# A fetch task yields ``None`` when an invalidation superseded it.
_FetchTask = asyncio.Task[ResourceSnapshot[Any] | None]


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class _CacheEntry:
    key: str
    value: Any = None
    status: ResourceStatus = ResourceStatus.IDLE
    error: ErrorInfo | None = None
    stale: bool = False
    updated_at: datetime | None = None
    inflight: _FetchTask | None = None
    subscribers: list[Subscriber] = field(default_factory=list)

    def snapshot(self) -> ResourceSnapshot[Any]:
        return ResourceSnapshot(
            key=self.key,
            value=self.value,
            status=self.status,
            error=self.error,
            stale=self.stale,
            updated_at=self.updated_at,
        )


class ResourceCache:
    """Keyed cache with single-flight fetches and forced revalidation.

    Usage::

        cache = ResourceCache()
        cache.register("/api/customers", store.list_customers)
        snapshot = cache.read("/api/customers")      # starts the first fetch
        snapshot = await cache.fetch("/api/customers")
        await cache.invalidate("/api/customers")     # re-fetch after a write

    Must be used from within a running event loop.
    """

    def __init__(self, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._fetchers: dict[str, Fetcher] = {}
        self._entries: dict[str, _CacheEntry] = {}
        self._tasks: set[_FetchTask] = set()

    def register(self, key: str, fetcher: Fetcher) -> None:
        """Associate *key* with the coroutine function that loads it."""
        self._fetchers[key] = fetcher

    def _entry(self, key: str) -> _CacheEntry:
        entry = self._entries.get(key)
        if entry is None:
            entry = _CacheEntry(key=key)
            self._entries[key] = entry
        return entry

    def _fetcher(self, key: str) -> Fetcher:
        fetcher = self._fetchers.get(key)
        if fetcher is None:
            raise LookupError(f"No fetcher registered for resource key {key!r}")
        return fetcher

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def peek(self, key: str) -> ResourceSnapshot[Any] | None:
        """Current snapshot without side effects, or ``None`` if unknown."""
        entry = self._entries.get(key)
        return entry.snapshot() if entry is not None else None

    def read(self, key: str) -> ResourceSnapshot[Any]:
        """Return the current snapshot, starting a fetch when needed.

        A fetch is started for a new (idle) entry and for a failed one;
        resolved and loading entries are returned as-is.
        """
        entry = self._entry(key)
        if entry.inflight is None and entry.status in (ResourceStatus.IDLE, ResourceStatus.FAILED):
            self._start_fetch(entry)
        return entry.snapshot()

    async def fetch(self, key: str) -> ResourceSnapshot[Any]:
        """Fetch *key*, joining the in-flight fetch if there is one."""
        entry = self._entry(key)
        task = entry.inflight if entry.inflight is not None else self._start_fetch(entry)
        return await self._settled(entry, task)

    def invalidate(self, key: str) -> asyncio.Task[ResourceSnapshot[Any]]:
        """Mark *key* stale and start a fresh fetch.

        The fresh fetch is queued behind any fetch already in flight, and
        only its result becomes current. The returned task resolves with the
        snapshot once the fresh fetch settles; awaiting it is optional.
        """
        entry = self._entry(key)
        entry.stale = True
        task = self._start_fetch(entry, after=entry.inflight)
        return asyncio.get_running_loop().create_task(
            self._settled(entry, task),
            name=f"pycustomers-invalidate:{key}",
        )

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, key: str, callback: Subscriber) -> Callable[[], None]:
        """Call *callback* with a snapshot on every state change of *key*.

        Returns a function that detaches the callback. Detaching never
        cancels a fetch.
        """
        entry = self._entry(key)
        entry.subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in entry.subscribers:
                entry.subscribers.remove(callback)

        return _unsubscribe

    def _notify(self, entry: _CacheEntry) -> None:
        snapshot = entry.snapshot()
        for callback in list(entry.subscribers):
            try:
                callback(snapshot)
            except Exception:
                _logger.warning("Subscriber for %s failed", entry.key, exc_info=True)

    # ------------------------------------------------------------------
    # Fetch machinery
    # ------------------------------------------------------------------

    def _start_fetch(self, entry: _CacheEntry, *, after: _FetchTask | None = None) -> _FetchTask:
        fetcher = self._fetcher(entry.key)
        task = asyncio.get_running_loop().create_task(
            self._run_fetch(entry, fetcher, after),
            name=f"pycustomers-fetch:{entry.key}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        entry.inflight = task
        entry.status = ResourceStatus.LOADING
        _logger.debug("Fetching %s (stale=%s, queued=%s)", entry.key, entry.stale, after is not None)
        self._notify(entry)
        return task

    async def _run_fetch(
        self,
        entry: _CacheEntry,
        fetcher: Fetcher,
        after: _FetchTask | None,
    ) -> ResourceSnapshot[Any] | None:
        if after is not None and not after.done():
            await asyncio.wait([after])
            if entry.inflight is not asyncio.current_task():
                _logger.debug("Skipping queued fetch of %s; a newer one is queued", entry.key)
                return None

        try:
            result = await fetcher()
        except Exception as exc:
            _logger.error("Fetcher for %s raised", entry.key, exc_info=True)
            error: ErrorInfo | None = ErrorInfo(kind=ErrorKind.UNEXPECTED, code=type(exc).__name__, message=str(exc))
            result = None
        else:
            error = ErrorInfo.from_exception(result.error) if isinstance(result, Failure) else None

        if entry.inflight is not asyncio.current_task():
            _logger.debug("Discarding superseded fetch of %s", entry.key)
            return None

        entry.inflight = None
        if result is not None and error is None:
            entry.value = result.value
            entry.status = ResourceStatus.RESOLVED
            entry.error = None
            entry.stale = False
            entry.updated_at = self._clock()
        else:
            # The last good value stays readable; it is still stale.
            entry.status = ResourceStatus.FAILED
            entry.error = error
        _logger.debug("Fetch of %s settled: %s", entry.key, entry.status)
        self._notify(entry)
        return entry.snapshot()

    async def _settled(self, entry: _CacheEntry, task: _FetchTask) -> ResourceSnapshot[Any]:
        # shield: a caller giving up must not cancel a fetch others may share.
        while True:
            snapshot = await asyncio.shield(task)
            if snapshot is not None:
                return snapshot
            task = entry.inflight if entry.inflight is not None else self._start_fetch(entry)

    async def close(self) -> None:
        """Cancel in-flight fetches; used when the owning client shuts down."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        for entry in self._entries.values():
            if entry.inflight is not None and entry.inflight.done():
                entry.inflight = None
