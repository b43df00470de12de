"""Tests for the in-memory store."""

import asyncio
import datetime

import pytest

from recall.adapters.memory import MemoryAdapter
from recall.models.cache import NEVER, CacheEntry, CacheResult


@pytest.mark.asyncio
async def test_put_and_get(store):
    await store.put("key", "value")
    assert await store.get("key") == CacheResult.hit("value")


@pytest.mark.asyncio
async def test_get_missing_key_is_not_found(store):
    result = await store.get("missing")
    assert result.found is False
    assert result == CacheResult.miss()


@pytest.mark.asyncio
async def test_put_overwrites(store):
    await store.put("key", "value1")
    await store.put("key", "value2")
    assert (await store.get("key")).value == "value2"


@pytest.mark.asyncio
async def test_delete_removes_key(store):
    await store.put("key", "value")
    await store.delete("key")
    assert not (await store.get("key")).found


@pytest.mark.asyncio
async def test_delete_and_clear_are_idempotent(store):
    await store.delete("never-stored")
    await store.delete("never-stored")
    await store.clear()
    await store.clear()
    assert len(store) == 0


@pytest.mark.asyncio
async def test_clear_removes_all(store):
    await store.put("a", 1)
    await store.put("b", 2)
    await store.clear()
    assert not (await store.get("a")).found
    assert not (await store.get("b")).found


@pytest.mark.asyncio
async def test_entry_expires_after_ttl(store, clock):
    await store.put("short", "value", ttl=50)
    assert (await store.get("short")).found

    clock.advance(51)
    assert not (await store.get("short")).found
    # Active expiration removed it from the table
    assert "short" not in store


@pytest.mark.asyncio
async def test_entry_alive_exactly_at_expiry(store, clock):
    await store.put("edge", "value", ttl=50)
    clock.advance(50)
    assert (await store.get("edge")).found


@pytest.mark.asyncio
async def test_never_ttl_does_not_expire(store, clock):
    await store.put("forever", "value", ttl=NEVER)
    clock.advance(10 ** 9)
    assert (await store.get("forever")).value == "value"


@pytest.mark.asyncio
async def test_infinity_aliases_do_not_expire(store, clock):
    await store.put("inf-str", 1, ttl="infinity")
    await store.put("inf-float", 2, ttl=float("inf"))
    clock.advance(10 ** 9)
    assert (await store.get("inf-str")).found
    assert (await store.get("inf-float")).found


@pytest.mark.asyncio
async def test_huge_ttl_does_not_overflow(store, clock):
    await store.put("huge", "value", ttl=10 ** 400)
    clock.advance(10 ** 9)
    assert (await store.get("huge")).value == "value"
    assert await store.purge_expired() == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("ttl", [0, -5, "garbage", None, 2.5, True])
async def test_invalid_ttl_falls_back_to_default(store, clock, ttl):
    await store.put("k", "v", ttl=ttl)
    clock.advance(999)
    assert (await store.get("k")).found
    clock.advance(2)
    assert not (await store.get("k")).found


@pytest.mark.asyncio
async def test_custom_ttl_overrides_default(store, clock):
    await store.put("default", 1)
    await store.put("custom", 2, ttl=2_000)
    clock.advance(1_500)
    assert not (await store.get("default")).found
    assert (await store.get("custom")).found


@pytest.mark.asyncio
async def test_never_default_ttl(clock):
    store = MemoryAdapter(default_ttl=NEVER, clock=clock)
    await store.put("k", "v", ttl=0)
    clock.advance(10 ** 9)
    assert (await store.get("k")).found


@pytest.mark.asyncio
async def test_stores_various_values(store):
    values = {
        "string": "text",
        "integer": 42,
        "float": 3.14,
        "list": [1, 2, 3],
        "tuple": ("ok", "result"),
        "dict": {"key": "value"},
        "date": datetime.date(2023, 12, 25),
        "none": None,
        "empty": "",
        "large": "a" * 10_000,
    }
    for key, value in values.items():
        await store.put(key, value)
    for key, value in values.items():
        result = await store.get(key)
        assert result.found
        assert result.value == value


@pytest.mark.asyncio
async def test_purge_expired_removes_only_expired(store, clock):
    await store.put("soon", 1, ttl=50)
    await store.put("later", 2, ttl=300)
    await store.put("never", 3, ttl=NEVER)

    clock.advance(50)
    removed = await store.purge_expired()

    assert removed == 1
    assert "soon" not in store
    assert "later" in store
    assert "never" in store


@pytest.mark.asyncio
async def test_purge_skips_entry_overwritten_mid_sweep(store, clock):
    await store.put("k", "old", ttl=10)
    clock.advance(20)

    async with store._lock:
        purge = asyncio.create_task(store.purge_expired())
        await asyncio.sleep(0)
        # Rewritten while the sweep waits for the lock
        store._entries["k"] = CacheEntry("new", None)

    assert await purge == 0
    assert (await store.get("k")).value == "new"


@pytest.mark.asyncio
async def test_stats_counts_hits_and_misses(store, clock):
    await store.put("k", "v", ttl=10)
    await store.get("k")
    await store.get("missing")
    clock.advance(20)
    await store.get("k")

    stats = store.stats()
    assert stats["hits"] == 1
    assert stats["misses"] == 2
    assert stats["expired_on_read"] == 1
    assert stats["entries"] == 0


@pytest.mark.asyncio
async def test_shutdown_discards_entries(store):
    await store.put("k", "v")
    await store.shutdown()
    assert len(store) == 0


@pytest.mark.asyncio
async def test_concurrent_operations():
    store = MemoryAdapter(default_ttl=60_000)

    async def worker(i: int) -> None:
        key, value = f"concurrent_{i}", f"value_{i}"
        await store.put(key, value)
        assert (await store.get(key)).value == value
        await store.delete(key)
        assert not (await store.get(key)).found

    await asyncio.gather(*(worker(i) for i in range(50)))
    assert len(store) == 0


@pytest.mark.asyncio
async def test_concurrent_puts_same_key_last_write_wins():
    store = MemoryAdapter(default_ttl=60_000)
    await asyncio.gather(*(store.put("shared", i) for i in range(100)))
    assert (await store.get("shared")).value == 99


@pytest.mark.asyncio
async def test_real_clock_expiration_scenario():
    store = MemoryAdapter(default_ttl=60_000)
    await store.put("u:1", {"name": "A"}, ttl=50)
    assert (await store.get("u:1")).value == {"name": "A"}

    await asyncio.sleep(0.1)
    assert not (await store.get("u:1")).found
