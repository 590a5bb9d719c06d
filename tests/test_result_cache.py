# tests/test_result_cache.py

from __future__ import annotations

import asyncio

import pytest

from fetchgate.cache.result_cache import ResultCache

from .fakes import FakeClock, drain


def _cache(clock: FakeClock, *, max_entries: int = 500, ttl: int = 60_000) -> ResultCache:
    return ResultCache(default_ttl_ms=ttl, max_entries=max_entries, clock=clock)


def test_entry_is_fresh_until_ttl_elapses(clock: FakeClock) -> None:
    cache = _cache(clock)
    cache.set("k", "v", ttl_ms=100)

    assert cache.peek("k") == "v"
    assert cache.has_fresh("k")

    clock.advance(150)
    assert cache.peek("k") is None
    assert cache.peek("k", "absent") == "absent"
    assert not cache.has_fresh("k")


def test_entry_expiring_exactly_now_is_stale(clock: FakeClock) -> None:
    cache = _cache(clock)
    cache.set("k", "v", ttl_ms=100)

    clock.advance(99)
    assert cache.has_fresh("k")
    clock.advance(1)
    assert not cache.has_fresh("k")


def test_default_ttl_applies_when_not_given(clock: FakeClock) -> None:
    cache = _cache(clock, ttl=1_000)
    cache.set("k", 1)

    clock.advance(999)
    assert cache.peek("k") == 1
    clock.advance(1)
    assert cache.peek("k") is None


def test_negative_ttl_and_capacity_are_clamped(clock: FakeClock) -> None:
    cache = ResultCache(default_ttl_ms=-5, max_entries=0, clock=clock)
    assert cache.default_ttl_ms == 0
    assert cache.max_entries == 1

    cache.set("k", "v", ttl_ms=-10)
    assert cache.peek("k") is None


def test_eviction_removes_oldest_inserted_first(clock: FakeClock) -> None:
    cache = _cache(clock, max_entries=3)
    for key in "abcd":
        cache.set(key, key.upper(), ttl_ms=10_000_000)

    assert cache.keys() == ["b", "c", "d"]
    assert cache.peek("a") is None
    assert len(cache) == 3


def test_eviction_drops_expired_entries_before_fresh_ones(clock: FakeClock) -> None:
    cache = _cache(clock, max_entries=3)
    cache.set("a", 1, ttl_ms=10_000)
    cache.set("b", 2, ttl_ms=10)
    cache.set("c", 3, ttl_ms=10_000)
    clock.advance(20)

    cache.set("d", 4, ttl_ms=10_000)

    assert cache.keys() == ["a", "c", "d"]


def test_overwrite_keeps_insertion_position(clock: FakeClock) -> None:
    cache = _cache(clock, max_entries=3)
    for key in "abc":
        cache.set(key, 0)
    cache.set("a", 1)

    cache.set("d", 0)

    assert cache.keys() == ["b", "c", "d"]


def test_purge_expired_counts_and_keeps_fresh(clock: FakeClock) -> None:
    cache = _cache(clock)
    for key in ("x1", "x2", "x3"):
        cache.set(key, key, ttl_ms=50)
    cache.set("f1", 1, ttl_ms=5_000)
    cache.set("f2", 2, ttl_ms=5_000)
    clock.advance(100)

    assert cache.purge_expired() == 3
    assert sorted(cache.keys()) == ["f1", "f2"]
    assert cache.purge_expired() == 0


def test_reads_do_not_purge(clock: FakeClock) -> None:
    cache = _cache(clock)
    cache.set("k", 1, ttl_ms=10)
    clock.advance(20)

    assert cache.peek("k") is None
    assert len(cache) == 1


@pytest.mark.asyncio
async def test_concurrent_get_or_fetch_runs_fetch_once(clock: FakeClock) -> None:
    cache = _cache(clock)
    gate = asyncio.Event()
    calls = 0
    payload = {"id": 1}

    async def fetch() -> dict:
        nonlocal calls
        calls += 1
        await gate.wait()
        return payload

    first = asyncio.create_task(cache.get_or_fetch("K", fetch))
    second = asyncio.create_task(cache.get_or_fetch("K", fetch))
    await drain()
    assert cache.in_flight_keys() == ["K"]

    gate.set()
    a, b = await asyncio.gather(first, second)

    assert calls == 1
    assert a is payload and b is payload
    assert cache.peek("K") is payload
    assert cache.in_flight_keys() == []


@pytest.mark.asyncio
async def test_fresh_entry_skips_fetch(clock: FakeClock) -> None:
    cache = _cache(clock)
    cache.set("K", "cached")

    async def fetch() -> str:
        raise AssertionError("should not fetch")

    assert await cache.get_or_fetch("K", fetch) == "cached"


@pytest.mark.asyncio
async def test_stale_entry_is_refetched_with_given_ttl(clock: FakeClock) -> None:
    cache = _cache(clock)
    cache.set("K", "old", ttl_ms=10)
    clock.advance(10)

    async def fetch() -> str:
        return "new"

    assert await cache.get_or_fetch("K", fetch, ttl_ms=500) == "new"
    clock.advance(499)
    assert cache.peek("K") == "new"
    clock.advance(1)
    assert cache.peek("K") is None


@pytest.mark.asyncio
async def test_failed_fetch_is_shared_and_not_cached(clock: FakeClock) -> None:
    cache = _cache(clock)
    gate = asyncio.Event()
    err = RuntimeError("upstream down")

    async def failing() -> None:
        await gate.wait()
        raise err

    first = asyncio.create_task(cache.get_or_fetch("K", failing))
    second = asyncio.create_task(cache.get_or_fetch("K", failing))
    await drain()
    gate.set()
    results = await asyncio.gather(first, second, return_exceptions=True)

    assert results[0] is err and results[1] is err
    assert cache.peek("K") is None
    assert cache.in_flight_keys() == []

    # A later call starts a new attempt with its own fetcher.
    async def recovering() -> str:
        return "ok"

    assert await cache.get_or_fetch("K", recovering) == "ok"
    assert cache.peek("K") == "ok"


@pytest.mark.asyncio
async def test_invalidate_during_fetch_starts_independent_fetch(clock: FakeClock) -> None:
    cache = _cache(clock)
    gate1 = asyncio.Event()
    gate2 = asyncio.Event()
    calls: list[str] = []

    async def fetch1() -> str:
        calls.append("1")
        await gate1.wait()
        return "one"

    async def fetch2() -> str:
        calls.append("2")
        await gate2.wait()
        return "two"

    t1 = asyncio.create_task(cache.get_or_fetch("K", fetch1))
    await drain()
    cache.invalidate("K")
    assert cache.in_flight_keys() == []

    t2 = asyncio.create_task(cache.get_or_fetch("K", fetch2))
    await drain()
    assert calls == ["1", "2"]

    # The older fetch finishing must not drop the newer marker.
    gate1.set()
    assert await t1 == "one"
    assert cache.in_flight_keys() == ["K"]
    assert cache.peek("K") is None

    gate2.set()
    assert await t2 == "two"
    assert cache.peek("K") == "two"


@pytest.mark.asyncio
async def test_invalidated_fetch_does_not_overwrite_newer_value(clock: FakeClock) -> None:
    cache = _cache(clock)
    old_gate = asyncio.Event()
    new_gate = asyncio.Event()

    async def old_fetch() -> str:
        await old_gate.wait()
        return "stale"

    async def new_fetch() -> str:
        await new_gate.wait()
        return "fresh"

    old = asyncio.create_task(cache.get_or_fetch("K", old_fetch))
    await drain()
    cache.invalidate("K")
    new = asyncio.create_task(cache.get_or_fetch("K", new_fetch))
    await drain()

    new_gate.set()
    assert await new == "fresh"
    assert cache.peek("K") == "fresh"

    # Its own caller still gets the late result; the cache keeps the newer one.
    old_gate.set()
    assert await old == "stale"
    assert cache.peek("K") == "fresh"
    assert cache.keys() == ["K"]


@pytest.mark.asyncio
async def test_clear_drops_entries_and_in_flight(clock: FakeClock) -> None:
    cache = _cache(clock)
    cache.set("a", 1)
    gate = asyncio.Event()

    async def fetch() -> int:
        await gate.wait()
        return 2

    task = asyncio.create_task(cache.get_or_fetch("b", fetch))
    await drain()

    cache.clear()
    assert len(cache) == 0
    assert cache.in_flight_keys() == []

    gate.set()
    assert await task == 2
    assert cache.keys() == []


@pytest.mark.asyncio
async def test_fetch_insertion_respects_capacity(clock: FakeClock) -> None:
    cache = _cache(clock, max_entries=2)
    for i in range(4):

        async def fetch(i: int = i) -> int:
            return i

        await cache.get_or_fetch(f"k{i}", fetch)

    assert cache.keys() == ["k2", "k3"]
