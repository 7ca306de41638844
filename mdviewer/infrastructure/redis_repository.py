"""
Redis Repository Base Class

Async JSON and set helpers over redis.asyncio, shared by the Redis-backed
artifact and installation repositories. Redis errors are translated into
BackendUnavailableError so callers never mistake an outage for a miss.
"""

import json
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from mdviewer.domain.errors import BackendUnavailableError

logger = logging.getLogger(__name__)


def decode(value: Any) -> Optional[str]:
    """Decode a Redis reply to str regardless of decode_responses."""
    if value is None:
        return None
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return str(value)


class RedisRepository:
    """Base Redis repository with JSON values, sets and sorted sets."""

    def __init__(self, redis_client: aioredis.Redis, key_prefix: str = ""):
        self.redis = redis_client
        self.key_prefix = key_prefix

    def _make_key(self, key: str) -> str:
        """Create a prefixed key for Redis storage."""
        return f"{self.key_prefix}:{key}" if self.key_prefix else key

    @contextmanager
    def backend_errors(self, operation: str, key: str = "") -> Iterator[None]:
        """Translate Redis client failures into BackendUnavailableError."""
        try:
            yield
        except (RedisError, OSError) as e:
            logger.error(f"Redis {operation} failed for key {key!r}: {e}")
            raise BackendUnavailableError(
                f"Redis {operation} failed: {e}", original_error=e
            ) from e

    async def get_json(self, key: str) -> Optional[Dict[str, Any]]:
        """
        Get JSON data from Redis.

        Args:
            key: Redis key

        Returns:
            Dictionary if found and valid JSON, None otherwise
        """
        redis_key = self._make_key(key)
        with self.backend_errors("get", redis_key):
            data = await self.redis.get(redis_key)

        return self.loads(data, redis_key)

    def loads(self, data: Any, key: str = "") -> Optional[Dict[str, Any]]:
        """Parse a stored JSON value; unreadable values count as missing."""
        if data is None:
            return None
        try:
            return json.loads(decode(data))
        except json.JSONDecodeError as e:
            logger.warning(f"Discarding unreadable JSON at key {key!r}: {e}")
            return None

    async def set_members(self, key: str) -> List[str]:
        """Return the members of a set as strings."""
        redis_key = self._make_key(key)
        with self.backend_errors("smembers", redis_key):
            members = await self.redis.smembers(redis_key)
        return sorted(decode(m) for m in members)

    async def set_size(self, key: str) -> int:
        redis_key = self._make_key(key)
        with self.backend_errors("scard", redis_key):
            return int(await self.redis.scard(redis_key))

    async def get_many_json(self, keys: Sequence[str]) -> List[Optional[Dict[str, Any]]]:
        """
        Fetch several JSON values in one round trip.

        Args:
            keys: Redis keys (without prefix)

        Returns:
            Parsed values in the same order, None for missing keys
        """
        if not keys:
            return []

        redis_keys = [self._make_key(k) for k in keys]
        with self.backend_errors("mget"):
            results = await self.redis.mget(redis_keys)

        return [self.loads(r, k) for r, k in zip(results, redis_keys)]


class RedisConnectionManager:
    """Manages the async Redis connection pool."""

    def __init__(self, connection_pool: aioredis.ConnectionPool):
        self.connection_pool = connection_pool
        self._client: Optional[aioredis.Redis] = None

    @classmethod
    def from_url(cls, url: str, max_connections: int = 20) -> "RedisConnectionManager":
        pool = aioredis.ConnectionPool.from_url(
            url,
            max_connections=max_connections,
            decode_responses=True,
            retry_on_timeout=True,
            socket_keepalive=True,
        )
        return cls(pool)

    @property
    def client(self) -> aioredis.Redis:
        """Get Redis client instance backed by the pool."""
        if self._client is None:
            self._client = aioredis.Redis(connection_pool=self.connection_pool)
        return self._client

    async def health_check(self) -> bool:
        """Check if Redis connection is healthy."""
        try:
            return bool(await self.client.ping())
        except (RedisError, OSError):
            return False

    async def close(self) -> None:
        """Close the client and the connection pool."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        await self.connection_pool.disconnect()
