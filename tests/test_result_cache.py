from __future__ import annotations

import asyncio

import pytest

from src.infra.cache.result_cache import ResultCache, make_cache_key


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_cache_key_is_order_independent() -> None:
    a = make_cache_key("relevance", "q", "c1", {"threshold": 0.3, "max_results": 5})
    b = make_cache_key("relevance", "q", "c1", {"max_results": 5, "threshold": 0.3})
    assert a == b
    assert a.startswith("relevance:q|c1|")
    assert a != make_cache_key("relevance", "q", "c2", {"threshold": 0.3, "max_results": 5})


def test_capacity_evicts_least_recently_used() -> None:
    cache: ResultCache[int] = ResultCache(capacity=2)
    cache.put("a", 1)
    cache.put("b", 2)
    assert cache.get("a") == 1  # touch a
    cache.put("c", 3)
    assert "b" not in cache
    assert "a" in cache and "c" in cache
    assert len(cache) == 2


def test_unbounded_capacity() -> None:
    cache: ResultCache[int] = ResultCache(capacity=None)
    for i in range(1000):
        cache.put(str(i), i)
    assert len(cache) == 1000


def test_ttl_expires_entries() -> None:
    clock = FakeClock()
    cache: ResultCache[str] = ResultCache(ttl_s=10.0, clock=clock)
    cache.put("k", "v")
    clock.now = 9.9
    assert cache.get("k") == "v"
    clock.now = 10.0
    assert cache.get("k") is None
    assert len(cache) == 0


def test_invalidate() -> None:
    cache: ResultCache[int] = ResultCache()
    cache.put("a", 1)
    cache.put("b", 2)
    cache.invalidate("a")
    assert "a" not in cache and "b" in cache
    cache.invalidate()
    assert len(cache) == 0


@pytest.mark.asyncio
async def test_get_or_compute_memoizes() -> None:
    cache: ResultCache[int] = ResultCache()
    calls = 0

    async def compute() -> int:
        nonlocal calls
        calls += 1
        return 42

    assert await cache.get_or_compute("k", compute) == 42
    assert await cache.get_or_compute("k", compute) == 42
    assert calls == 1
    assert (cache.hits, cache.misses) == (1, 1)


@pytest.mark.asyncio
async def test_single_flight_per_key() -> None:
    cache: ResultCache[int] = ResultCache()
    started = 0
    release = asyncio.Event()

    async def compute() -> int:
        nonlocal started
        started += 1
        await release.wait()
        return 7

    tasks = [asyncio.create_task(cache.get_or_compute("k", compute)) for _ in range(4)]
    await asyncio.sleep(0)
    release.set()
    assert await asyncio.gather(*tasks) == [7, 7, 7, 7]
    assert started == 1


@pytest.mark.asyncio
async def test_failure_reaches_waiters_and_is_not_cached() -> None:
    cache: ResultCache[int] = ResultCache()
    release = asyncio.Event()
    attempts = 0

    async def failing() -> int:
        nonlocal attempts
        attempts += 1
        await release.wait()
        raise RuntimeError("model down")

    tasks = [asyncio.create_task(cache.get_or_compute("k", failing)) for _ in range(3)]
    await asyncio.sleep(0)
    release.set()
    outcomes = await asyncio.gather(*tasks, return_exceptions=True)

    assert all(isinstance(o, RuntimeError) for o in outcomes)
    assert attempts == 1
    assert "k" not in cache

    async def ok() -> int:
        return 1

    assert await cache.get_or_compute("k", ok) == 1


@pytest.mark.asyncio
async def test_cancelled_owner_does_not_cancel_joiners() -> None:
    cache: ResultCache[int] = ResultCache()
    release = asyncio.Event()
    started = 0

    async def compute() -> int:
        nonlocal started
        started += 1
        await release.wait()
        return 1

    owner = asyncio.create_task(cache.get_or_compute("k", compute))
    await asyncio.sleep(0)
    joiner = asyncio.create_task(cache.get_or_compute("k", compute))
    await asyncio.sleep(0)

    owner.cancel()
    await asyncio.sleep(0)
    release.set()

    assert await joiner == 1
    assert owner.cancelled()
    assert started == 1
    assert cache.get("k") == 1
