from __future__ import annotations

import asyncio
import json
import logging
import time
from collections import OrderedDict
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

_log = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING = object()


def make_cache_key(operation: str, *parts: object) -> str:
    """Build ``operation:part|part|...`` with canonical JSON for non-string parts.

    Mappings are serialized with sorted keys so that equal options built in a
    different order land on the same key.
    """
    rendered = [
        p if isinstance(p, str) else json.dumps(p, sort_keys=True, separators=(",", ":"), default=str)
        for p in parts
    ]
    return f"{operation}:" + "|".join(rendered)


class ResultCache(Generic[T]):
    """In-process memo with single-flight computation per key.

    Policy:
    - capacity: at most ``capacity`` entries, least recently used evicted first
      (None = unbounded).
    - ttl_s: entries older than ``ttl_s`` seconds are treated as missing
      (None = kept for the process lifetime).
    - concurrent misses on one key share a single computation; a failed
      computation is not stored and its error reaches every waiter.
    - a cancelled caller only stops waiting; the computation keeps running
      and its result is still stored for the other waiters.
    """

    def __init__(
        self,
        *,
        capacity: int | None = 256,
        ttl_s: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.capacity = capacity
        self.ttl_s = ttl_s
        self._clock = clock
        self._entries: OrderedDict[str, tuple[float, T]] = OrderedDict()
        self._inflight: dict[str, asyncio.Task[T]] = {}
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self._lookup(key) is not _MISSING

    def _lookup(self, key: str) -> object:
        entry = self._entries.get(key)
        if entry is None:
            return _MISSING
        stored_at, value = entry
        if self.ttl_s is not None and self._clock() - stored_at >= self.ttl_s:
            del self._entries[key]
            return _MISSING
        self._entries.move_to_end(key)
        return value

    def get(self, key: str, default: T | None = None) -> T | None:
        value = self._lookup(key)
        return default if value is _MISSING else value  # type: ignore[return-value]

    def put(self, key: str, value: T) -> None:
        self._entries[key] = (self._clock(), value)
        self._entries.move_to_end(key)
        if self.capacity is not None:
            while len(self._entries) > self.capacity:
                evicted, _ = self._entries.popitem(last=False)
                _log.debug("cache evicted %s", evicted)

    def invalidate(self, key: str | None = None) -> None:
        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)

    async def get_or_compute(self, key: str, compute: Callable[[], Awaitable[T]]) -> T:
        value = self._lookup(key)
        if value is not _MISSING:
            self.hits += 1
            return value  # type: ignore[return-value]

        pending = self._inflight.get(key)
        if pending is not None:
            self.hits += 1
            _log.debug("joining in-flight computation for %s", key)
            return await asyncio.shield(pending)

        self.misses += 1
        # own task: cancelling a caller never cancels the shared computation
        task: asyncio.Task[T] = asyncio.ensure_future(compute())
        self._inflight[key] = task
        task.add_done_callback(lambda t: self._settle(key, t))
        return await asyncio.shield(task)

    def _settle(self, key: str, task: asyncio.Task[T]) -> None:
        self._inflight.pop(key, None)
        if task.cancelled():
            return
        err = task.exception()
        if err is None:
            self.put(key, task.result())
        else:
            _log.debug("computation for %s failed: %r", key, err)
