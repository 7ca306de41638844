"""
Redis Configuration

Builds the Redis connection manager from the application settings.
The manager is owned by the process entry point, which closes it on shutdown.
"""

import logging
from typing import Optional

from mdviewer.config.settings import Settings
from mdviewer.infrastructure.redis_repository import RedisConnectionManager

logger = logging.getLogger(__name__)


def init_redis(settings: Settings) -> Optional[RedisConnectionManager]:
    """
    Create a Redis connection manager when a Redis URL is configured.

    Args:
        settings: Application settings

    Returns:
        RedisConnectionManager, or None when the local fallback is in use
    """
    if not settings.uses_redis:
        logger.info("REDIS_URL not set, using local storage fallback")
        return None

    manager = RedisConnectionManager.from_url(
        settings.redis_url, max_connections=settings.redis_max_connections
    )
    logger.info("Redis connection pool created")
    return manager
