import os

import pytest
import pytest_asyncio
import redis.asyncio as aioredis
from redis.exceptions import RedisError

from mdviewer.infrastructure.redis_repository import RedisRepository


@pytest_asyncio.fixture
async def redis_client():
    """
    Yields a clean async Redis client for integration testing.
    Uses REDIS_URL, defaulting to a local server.
    """
    url = os.getenv("REDIS_URL", "redis://localhost:6379/15")
    client = aioredis.Redis.from_url(url, decode_responses=True)

    try:
        await client.ping()
    except (RedisError, OSError):
        await client.aclose()
        pytest.skip("Redis service not available. Skipping integration tests.")

    # Clean before test
    await client.flushdb()

    yield client

    # Clean after test
    await client.flushdb()
    await client.aclose()


@pytest.fixture
def live_redis_repo(redis_client):
    return RedisRepository(redis_client)
