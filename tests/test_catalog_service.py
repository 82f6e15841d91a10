import pytest

from mixmatch.catalog.providers.in_memory import InMemoryCatalogStore
from mixmatch.core.cache import ItemCache
from mixmatch.core.errors import FetchResult
from mixmatch.services.catalog import CatalogService, build_store
from tests.fixtures import item, mixed_pool


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_cache_expires_entries():
    clock = FakeClock()
    cache = ItemCache(ttl_s=10, clock=clock)
    cache.set("a", 1)
    clock.now = 9.9
    assert cache.get("a") == 1
    clock.now = 10.0
    assert cache.get("a") is None
    assert len(cache) == 0


def test_cache_evicts_least_recently_used():
    cache = ItemCache(ttl_s=60, max_entries=2)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.get("a")
    cache.set("c", 3)
    assert cache.get("b") is None
    hits, misses = cache.get_many(["a", "b", "c"])
    assert hits == {"a": 1, "c": 3}
    assert misses == ["b"]


def test_cache_rejects_empty_bound():
    with pytest.raises(ValueError):
        ItemCache(ttl_s=1, max_entries=0)


def test_fetch_result():
    ok = FetchResult.success([1])
    bad = FetchResult.failure("down")
    assert ok.ok and ok.unwrap_or([]) == [1]
    assert not bad.ok and bad.unwrap_or([]) == []


class CountingStore(InMemoryCatalogStore):
    def __init__(self, items):
        super().__init__(items)
        self.get_calls = []

    async def get_items(self, ids):
        ids = list(ids)
        self.get_calls.append(ids)
        return await super().get_items(ids)


@pytest.mark.asyncio
async def test_fetch_items_served_from_cache():
    store = CountingStore(mixed_pool())
    svc = CatalogService(store, cache=ItemCache(ttl_s=60))
    first = await svc.fetch_items(["t1", "s1"])
    second = await svc.fetch_items(["t1", "s1", "a1"])
    assert first.ok and set(first.data) == {"t1", "s1"}
    assert set(second.data) == {"t1", "s1", "a1"}
    assert store.get_calls == [["t1", "s1"], ["a1"]]
    third = await svc.fetch_items(["a1"])
    assert third.ok
    assert len(store.get_calls) == 2


@pytest.mark.asyncio
async def test_pool_fetch_fills_cache():
    store = CountingStore(mixed_pool())
    svc = CatalogService(store, cache=ItemCache(ttl_s=60))
    res = await svc.fetch_pool()
    assert len(res.data) == 5
    await svc.fetch_items(["p1"])
    assert store.get_calls == []


class DownStore:
    async def list_items(self, filters):
        raise TimeoutError("catalog timed out")

    async def get_items(self, ids):
        raise TimeoutError("catalog timed out")

    async def record_promotion_event(self, item_id, event_type):
        return False


@pytest.mark.asyncio
async def test_store_failure_is_returned_not_raised():
    svc = CatalogService(DownStore(), cache=ItemCache(ttl_s=60))
    pool = await svc.fetch_pool()
    items = await svc.fetch_items(["x"])
    assert not pool.ok and pool.error == "catalog timed out"
    assert not items.ok


@pytest.mark.asyncio
async def test_in_memory_promotion_counts_only_boosted():
    store = InMemoryCatalogStore([item("1", is_boosted=True, boost_weight=1), item("2")])
    assert await store.record_promotion_event("1", "view")
    assert await store.record_promotion_event("1", "click")
    assert not await store.record_promotion_event("2", "view")
    assert not await store.record_promotion_event("missing", "view")
    assert store.promotion_counts("1") == {"view": 1, "click": 1}


def test_build_store_defaults_to_memory():
    assert isinstance(build_store(), InMemoryCatalogStore)
    assert isinstance(build_store("memory"), InMemoryCatalogStore)
