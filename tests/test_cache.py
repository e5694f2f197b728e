from __future__ import annotations

import asyncio

import pytest

from fakehelp.cache import TtlCache


@pytest.mark.asyncio
async def test_set_and_get_returns_value() -> None:
    cache = TtlCache(ttl=10.0)
    cache.set("123456789", {"name": "Vader"})

    assert cache.get("123456789") == {"name": "Vader"}
    assert "123456789" in cache
    assert len(cache) == 1
    cache.clear()


@pytest.mark.asyncio
async def test_falsy_key_or_value_is_ignored() -> None:
    cache = TtlCache(ttl=10.0)
    cache.set("", {"name": "Vader"})
    cache.set(None, {"name": "Vader"})
    cache.set("123", None)
    cache.set("456", {})

    assert len(cache) == 0
    assert cache.get(None) is None
    assert cache.get("") is None


@pytest.mark.asyncio
async def test_entry_expires_after_ttl() -> None:
    cache = TtlCache(ttl=0.1)
    cache.set("k", "v")

    await asyncio.sleep(0.05)
    assert cache.get("k") == "v"

    await asyncio.sleep(0.1)
    assert cache.get("k") is None
    assert len(cache) == 0


@pytest.mark.asyncio
async def test_non_positive_ttl_never_expires() -> None:
    cache = TtlCache(ttl=0)
    cache.set("k", "v")

    await asyncio.sleep(0.05)
    assert cache.get("k") == "v"
    assert cache._entries["k"].timer is None  # type: ignore[attr-defined]


@pytest.mark.asyncio
async def test_second_set_replaces_value_and_restarts_timer() -> None:
    cache = TtlCache(ttl=0.2)
    cache.set("k", "old")
    await asyncio.sleep(0.12)

    cache.set("k", "new")
    await asyncio.sleep(0.12)
    # 0.24s after the first set, but only 0.12s after the second.
    assert cache.get("k") == "new"

    await asyncio.sleep(0.15)
    assert cache.get("k") is None


@pytest.mark.asyncio
async def test_extend_restarts_timer_without_touching_value() -> None:
    cache = TtlCache(ttl=0.2)
    cache.set("k", "v")
    await asyncio.sleep(0.12)

    cache.extend("k")
    await asyncio.sleep(0.12)
    assert cache.get("k") == "v"

    cache.extend("missing")
    assert "missing" not in cache
    cache.clear()


@pytest.mark.asyncio
async def test_remove_cancels_pending_timer() -> None:
    cache = TtlCache(ttl=10.0)
    cache.set("k", "v")
    entry = cache._entries["k"]  # type: ignore[attr-defined]

    cache.remove("k")

    assert cache.get("k") is None
    assert entry.timer is not None
    assert entry.timer.cancelled()


@pytest.mark.asyncio
async def test_clear_cancels_every_timer() -> None:
    cache = TtlCache(ttl=10.0)
    cache.set("a", 1)
    cache.set("b", 2)
    timers = [entry.timer for entry in cache._entries.values()]  # type: ignore[attr-defined]

    cache.clear()

    assert len(cache) == 0
    assert all(timer is not None and timer.cancelled() for timer in timers)


@pytest.mark.asyncio
async def test_stale_timer_does_not_remove_replacement_entry() -> None:
    cache = TtlCache(ttl=0.1)
    cache.set("k", "first")
    cache.remove("k")
    cache.set("k", "second")
    entry = cache._entries["k"]  # type: ignore[attr-defined]

    # A timer belonging to an older entry must leave the new one alone.
    cache._expire("k", object())  # type: ignore[attr-defined,arg-type]

    assert cache._entries["k"] is entry  # type: ignore[attr-defined]
    cache.clear()
