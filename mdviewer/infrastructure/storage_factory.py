"""
Storage Factory

Selects the artifact and installation backends once, at startup, based on
configuration. With a Redis URL both stores are Redis-backed; without one
both use the local fallback. The choice never changes while the process runs.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from mdviewer.config.settings import Settings
from mdviewer.domain.artifacts.repositories import ArtifactRepository
from mdviewer.domain.installations.repositories import InstallationRepository
from mdviewer.infrastructure.local_installation_repository import LocalInstallationRepository
from mdviewer.infrastructure.memory_artifact_repository import InMemoryArtifactRepository
from mdviewer.infrastructure.redis_artifact_repository import RedisArtifactRepository
from mdviewer.infrastructure.redis_installation_repository import RedisInstallationRepository
from mdviewer.infrastructure.redis_repository import RedisConnectionManager, RedisRepository

logger = logging.getLogger(__name__)

BACKEND_REDIS = "redis"
BACKEND_LOCAL = "local"


@dataclass
class Stores:
    """The two stores chosen for this process."""

    artifacts: ArtifactRepository
    installations: InstallationRepository
    backend: str


class StorageFactory:
    """
    Factory for creating the store implementations.

    Selection Logic:
    - If REDIS_URL is configured, Redis must answer a ping or startup fails
    - Otherwise, in-memory artifacts and a JSON-file installation registry
    """

    @staticmethod
    async def create(
        settings: Settings, redis_manager: Optional[RedisConnectionManager] = None
    ) -> Stores:
        """
        Create both stores based on configuration.

        Args:
            settings: Application settings
            redis_manager: Connection manager, required when REDIS_URL is set

        Returns:
            Stores bundle

        Raises:
            RuntimeError: If Redis is configured but unreachable, or the
                local registry cannot be initialized
        """
        if settings.uses_redis:
            if redis_manager is None:
                raise RuntimeError("REDIS_URL is set but no Redis connection was created")
            return await StorageFactory._create_redis_stores(settings, redis_manager)
        return StorageFactory._create_local_stores(settings)

    @staticmethod
    async def _create_redis_stores(
        settings: Settings, redis_manager: RedisConnectionManager
    ) -> Stores:
        if not await redis_manager.health_check():
            raise RuntimeError("Redis is configured but did not answer PING")

        redis_repo = RedisRepository(redis_manager.client)
        logger.info(
            f"Storage factory: Using Redis storage (artifact TTL {settings.storage.ttl_seconds}s)"
        )
        return Stores(
            artifacts=RedisArtifactRepository(redis_repo, settings.storage.ttl),
            installations=RedisInstallationRepository(redis_repo),
            backend=BACKEND_REDIS,
        )

    @staticmethod
    def _create_local_stores(settings: Settings) -> Stores:
        try:
            installations = LocalInstallationRepository(settings.storage.data_dir)
        except Exception as e:
            raise RuntimeError(f"Failed to initialize local storage: {e}") from e

        logger.info(
            f"Storage factory: Using local storage, installations in {settings.storage.data_dir}"
        )
        return Stores(
            artifacts=InMemoryArtifactRepository(settings.storage.ttl),
            installations=installations,
            backend=BACKEND_LOCAL,
        )
