"""
Tests for the checksum cache.
"""

from datetime import datetime, timedelta, timezone

import pytest

from stockroom.core import ChecksumCache, compute_checksum
from stockroom.core.cache import cache_key, sort_by_key


class FakeClock:
    def __init__(self):
        self.now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


class Loader:
    def __init__(self, *payloads):
        self.payloads = list(payloads)
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        return self.payloads[min(self.calls, len(self.payloads)) - 1]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return ChecksumCache(lifetime=timedelta(minutes=1), clock=clock)


def test_checksum_is_order_independent():
    assert compute_checksum({"a": 1, "b": 2}) == compute_checksum({"b": 2, "a": 1})
    assert compute_checksum([1, 2]) != compute_checksum([2, 1])


@pytest.mark.asyncio
async def test_miss_loads_and_hit_reuses(cache):
    loader = Loader([1])

    first = await cache.load("/items/", {}, None, loader)
    second = await cache.load("/items/", {}, None, loader)

    assert loader.calls == 1
    assert first.status == second.status == 200
    assert first.entry.checksum == second.entry.checksum == compute_checksum([1])
    assert len(cache) == 1


@pytest.mark.asyncio
async def test_expired_entry_is_refreshed(cache, clock):
    loader = Loader([1], [1, 2])
    first = await cache.load("/items/", {}, None, loader)

    clock.advance(minutes=1)
    second = await cache.load("/items/", {}, None, loader)

    assert loader.calls == 2
    assert second.entry.data == [1, 2]
    assert second.entry.checksum != first.entry.checksum


@pytest.mark.asyncio
async def test_matching_checksum_is_not_modified(cache):
    loader = Loader([1])
    first = await cache.load("/items/", {}, None, loader)

    result = await cache.load("/items/", {}, None, loader, requested_checksum=first.entry.checksum)

    assert result.not_modified
    assert result.entry is None
    assert loader.calls == 1


@pytest.mark.asyncio
async def test_request_shape_selects_entry(cache):
    loader = Loader([1], [2], [3])
    await cache.load("/items/", {}, None, loader)
    await cache.load("/items/", {"id": "a"}, None, loader)
    await cache.load("/items/", {}, {"filter": "x"}, loader)
    assert len(cache) == 3


@pytest.mark.asyncio
async def test_returned_data_is_a_copy(cache):
    loader = Loader([{"name": "Rope"}])
    result = await cache.load("/items/", {}, None, loader)
    result.entry.data[0]["name"] = "changed"

    again = await cache.load("/items/", {}, None, loader)
    assert again.entry.data == [{"name": "Rope"}]


@pytest.mark.asyncio
async def test_disabled_cache_always_loads():
    cache = ChecksumCache(lifetime=None)
    loader = Loader([1])

    result = await cache.load("/items/", {}, None, loader)
    await cache.load("/items/", {}, None, loader)

    assert not cache.enabled
    assert loader.calls == 2
    assert len(cache) == 0
    assert result.entry.headers() == {"X-Cache-Checksum": compute_checksum([1])}


@pytest.mark.asyncio
async def test_destroy_and_sweep(cache, clock):
    await cache.load("/a", {}, None, Loader([1]))
    await cache.load("/b", {}, None, Loader([2]))

    clock.advance(seconds=30)
    await cache.load("/c", {}, None, Loader([3]))
    clock.advance(seconds=30)

    assert cache.sweep() == 2
    assert len(cache) == 1

    cache.destroy()
    assert len(cache) == 0


def test_sort_numbers_descending():
    rows = [{"id": 1}, {"id": 3}, {"id": 2}]
    assert [r["id"] for r in sort_by_key(rows, "id")] == [3, 2, 1]


def test_sort_strings_ascending():
    rows = [{"id": "b"}, {"id": "c"}, {"id": "a"}]
    assert [r["id"] for r in sort_by_key(rows, "id")] == ["a", "b", "c"]


@pytest.mark.parametrize("value", [None, True, {"nested": 1}])
def test_sort_rejects_other_types(value):
    with pytest.raises(TypeError, match='Can\'t sort by key "id"'):
        sort_by_key([{"id": value}, {"id": value}], "id")


@pytest.mark.asyncio
async def test_unchanged_data_after_expiry_extends_lifetime(cache, clock):
    loader = Loader([1])
    first = await cache.load("/items/", {}, None, loader)

    clock.advance(minutes=2)
    second = await cache.load("/items/", {}, None, loader)

    assert loader.calls == 2
    assert second.entry.checksum == first.entry.checksum
    assert second.entry.valid_until == clock.now + timedelta(minutes=1)


@pytest.mark.asyncio
async def test_expired_entry_is_refreshed_in_place(cache, clock):
    loader = Loader([1], [1, 2])
    await cache.load("/items/", {}, None, loader)
    entry = cache.get(cache_key("/items/", {}, None))

    clock.advance(minutes=1)
    await cache.load("/items/", {}, None, loader)

    assert cache.get(cache_key("/items/", {}, None)) is entry
    assert entry.data == [1, 2]
    assert not entry.is_expired()
