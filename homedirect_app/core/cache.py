import json
import logging
from typing import Any, Iterable, Mapping, Optional, Tuple

from fastapi import Request
from redis.asyncio import Redis, from_url
from redis.exceptions import RedisError
from tenacity import retry, stop_after_attempt, wait_exponential

from .breaker import CircuitBreaker, CircuitOpenError
from .settings import settings

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, Mapping[str, Any]]


class Cache:
    """Optional Redis response cache.

    Entries are addressed by ``(endpoint, params)`` pairs rather than
    hand-built strings. Without a URL every operation is a no-op, and Redis
    errors degrade to cache misses.
    """

    NAMESPACE = "homedirect"

    def __init__(self, url: Optional[str] = None, ttl: int = settings.CACHE_TTL_SECONDS):
        self.url = url
        self.ttl = ttl
        self.redis: Optional[Redis] = None
        self.breaker = CircuitBreaker("redis", failure_threshold=3, base_recovery_time=5)

    @property
    def enabled(self) -> bool:
        return self.redis is not None

    @classmethod
    def make_key(cls, endpoint: str, params: Optional[Mapping[str, Any]] = None) -> str:
        encoded = json.dumps(dict(params or {}), sort_keys=True, separators=(",", ":"))
        return f"{cls.NAMESPACE}:{endpoint}:{encoded}"

    @retry(
        stop=stop_after_attempt(2),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True,
    )
    async def connect(self):
        if not self.url:
            logger.info("REDIS_URL not set; response cache disabled.")
            return
        logger.info("Connecting to Redis...")
        client = from_url(self.url, encoding="utf-8", decode_responses=True)
        await client.ping()
        self.redis = client
        logger.info("Connected to Redis.")

    async def close(self):
        if self.redis is not None:
            await self.redis.aclose()
            self.redis = None

    async def _run(self, op, *args, default=None, **kwargs):
        if self.redis is None:
            return default
        try:
            return await self.breaker.call(op, *args, **kwargs)
        except (RedisError, CircuitOpenError) as e:
            logger.warning(f"Cache operation skipped: {e}")
            return default

    async def get_json(self, endpoint: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        key = self.make_key(endpoint, params)
        data = await self._run(self.redis.get, key) if self.redis else None
        if data is None:
            return None
        try:
            return json.loads(data)
        except json.JSONDecodeError:
            logger.error("Invalid JSON format in key: %s", key)
            return None

    async def set_json(
        self,
        endpoint: str,
        params: Optional[Mapping[str, Any]],
        value: Any,
        ttl: Optional[int] = None,
    ) -> None:
        if self.redis is None:
            return
        key = self.make_key(endpoint, params)
        logger.debug("Setting JSON cache for key: %s", key)
        await self._run(self.redis.set, key, json.dumps(value), ex=ttl or self.ttl)

    async def _delete_prefix(self, prefix: str) -> int:
        keys = [key async for key in self.redis.scan_iter(match=f"{prefix}*")]
        if not keys:
            return 0
        return await self.redis.delete(*keys)

    async def invalidate(self, endpoints: Iterable[str]) -> int:
        """Drops every cached entry of the given endpoints, whatever the params."""
        if self.redis is None:
            return 0
        removed = 0
        for endpoint in set(endpoints):
            removed += await self._run(
                self._delete_prefix, f"{self.NAMESPACE}:{endpoint}:", default=0
            )
        return removed

    async def ping(self) -> bool:
        if self.redis is None:
            return False
        return bool(await self._run(self.redis.ping, default=False))


disabled_cache = Cache(url=None)


def get_cache(request: Request) -> Cache:
    return getattr(request.app.state, "cache", None) or disabled_cache
