import json
from unittest.mock import AsyncMock

from redis.exceptions import ConnectionError as RedisConnectionError

from core.cache import Cache


class FakeRedis:
    def __init__(self):
        self.store: dict[str, str] = {}

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self.store[key] = value
        return True

    async def scan_iter(self, match):
        prefix = match.rstrip("*")
        for key in list(self.store):
            if key.startswith(prefix):
                yield key

    async def delete(self, *keys):
        removed = 0
        for key in keys:
            removed += 1 if self.store.pop(key, None) is not None else 0
        return removed


def test_key_is_independent_of_param_order():
    first = Cache.make_key("properties:search", {"limit": 50, "location": "Austin"})
    second = Cache.make_key("properties:search", {"location": "Austin", "limit": 50})

    assert first == second
    assert first.startswith("homedirect:properties:search:")


def test_keys_differ_by_endpoint_and_params():
    assert Cache.make_key("a", {"x": 1}) != Cache.make_key("b", {"x": 1})
    assert Cache.make_key("a", {"x": 1}) != Cache.make_key("a", {"x": 2})


async def test_disabled_cache_is_a_no_op():
    cache = Cache(url=None)
    await cache.connect()

    await cache.set_json("properties:search", {"limit": 1}, [{"id": 1}])

    assert cache.enabled is False
    assert await cache.get_json("properties:search", {"limit": 1}) is None
    assert await cache.invalidate(["properties:search"]) == 0


async def test_round_trip_and_prefix_invalidation():
    cache = Cache(url=None)
    cache.redis = FakeRedis()

    await cache.set_json("properties:search", {"limit": 1}, [{"id": 1}])
    await cache.set_json("properties:search", {"limit": 2}, [{"id": 2}])
    await cache.set_json("properties:featured", {"limit": 6}, [])

    assert await cache.get_json("properties:search", {"limit": 1}) == [{"id": 1}]

    removed = await cache.invalidate(["properties:search"])

    assert removed == 2
    assert await cache.get_json("properties:search", {"limit": 2}) is None
    assert await cache.get_json("properties:featured", {"limit": 6}) == []


async def test_redis_errors_degrade_to_misses():
    cache = Cache(url=None)
    cache.redis = AsyncMock()
    cache.redis.get = AsyncMock(side_effect=RedisConnectionError("down"))

    assert await cache.get_json("properties:search", {}) is None


async def test_invalid_json_is_treated_as_miss():
    cache = Cache(url=None)
    cache.redis = FakeRedis()
    cache.redis.store[Cache.make_key("properties:featured", {"limit": 6})] = "{not json"

    assert await cache.get_json("properties:featured", {"limit": 6}) is None


async def test_values_are_stored_as_json():
    cache = Cache(url=None)
    cache.redis = FakeRedis()

    await cache.set_json("properties:featured", {"limit": 6}, [{"id": 3}])

    stored = cache.redis.store[Cache.make_key("properties:featured", {"limit": 6})]
    assert json.loads(stored) == [{"id": 3}]


async def test_ping_reports_redis_reachability():
    cache = Cache(url=None)
    assert await cache.ping() is False

    cache.redis = AsyncMock()
    cache.redis.ping = AsyncMock(return_value=True)
    assert await cache.ping() is True

    cache.redis.ping = AsyncMock(side_effect=RedisConnectionError("down"))
    assert await cache.ping() is False
