"""Redis implementation of SessionStore.

Session tokens are plain string keys, one per user id, optionally expiring.
"""

import logging

import redis.asyncio as redis

from stockroom.config import Settings, get_redis_client

logger = logging.getLogger(__name__)


class RedisSessionStore:
    """SessionStore backed by Redis.

    This class satisfies the SessionStore protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(self, redis_client: redis.Redis | None = None, namespace: str = "session") -> None:
        """Initialize the Redis session store.

        Args:
            redis_client: Redis client instance. If None, creates default.
            namespace: Prefix for every key written by this store.
        """
        self._client = redis_client or get_redis_client()
        self._namespace = namespace

    @classmethod
    def from_settings(cls, config: Settings | None = None) -> "RedisSessionStore":
        """Factory method to create RedisSessionStore from settings."""
        return cls(redis_client=get_redis_client(config))

    async def get(self, key: str) -> str | None:
        return await self._client.get(self._key(key))

    async def set(self, key: str, value: str, ttl: int | None = None) -> None:
        await self._client.set(self._key(key), value, ex=ttl)

    async def delete(self, key: str) -> bool:
        deleted: int = await self._client.delete(self._key(key))
        return deleted > 0

    async def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            return bool(await self._client.ping())
        except Exception as e:
            logger.warning("Redis health check failed: %s", e)
            return False

    async def on_destroy(self) -> None:
        await self._client.aclose()
        logger.info("Disconnected from Redis")

    def _key(self, key: str) -> str:
        return f"{self._namespace}:{key}"

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
