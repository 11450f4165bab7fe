import asyncio

import pytest

from valbot.util.ttl_cache import MISSING, TTLCache


def test_get_within_ttl_returns_value(clock):
  cache = TTLCache(clock=clock)
  cache.put("k", {"a": 1}, ttl=30)
  clock.advance(29)
  assert cache.get("k") == {"a": 1}


def test_get_after_ttl_is_absent_and_evicted(clock):
  cache = TTLCache(clock=clock)
  cache.put("k", "v", ttl=30)
  clock.advance(30.5)
  assert cache.get("k") is MISSING
  assert len(cache) == 0


def test_put_overwrites_value_and_expiry(clock):
  cache = TTLCache(clock=clock)
  cache.put("k", "old", ttl=5)
  clock.advance(4)
  cache.put("k", "new", ttl=5)
  clock.advance(4)
  assert cache.get("k") == "new"


def test_falsy_values_are_not_absent(clock):
  cache = TTLCache(clock=clock)
  cache.put("empty", [], ttl=10)
  assert cache.get("empty") == []
  assert cache.get("never-set") is MISSING


@pytest.mark.asyncio()
async def test_inflight_future_shares_result():
  cache = TTLCache()
  fut = cache.inflight_set("k")
  assert cache.inflight_get("k") is fut
  cache.inflight_resolve("k", value=42)
  assert await fut == 42
  assert cache.inflight_get("k") is None


@pytest.mark.asyncio()
async def test_inflight_future_propagates_exception():
  cache = TTLCache()
  fut = cache.inflight_set("k")
  cache.inflight_resolve("k", exc=RuntimeError("boom"))
  with pytest.raises(RuntimeError):
    await asyncio.wait_for(fut, 1)
