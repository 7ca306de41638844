"""
Redis Artifact Repository Implementation

Concrete Redis-based implementation of ArtifactRepository.
Stores each artifact under "file:<id>" with a native per-key expiry and
keeps a sorted-set index scored by expiry time so count() never scans keys.
"""

import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from mdviewer.domain.artifacts.entities import Artifact, RenderedDocument
from mdviewer.domain.artifacts.repositories import ArtifactRepository
from mdviewer.infrastructure.redis_repository import RedisRepository

logger = logging.getLogger(__name__)

ARTIFACT_KEY_PREFIX = "file"
ARTIFACT_INDEX_KEY = "files"


class RedisArtifactRepository(ArtifactRepository):
    """
    Redis-based implementation of ArtifactRepository.

    Relies on Redis to evict expired keys and re-checks the TTL on read,
    so a record is never served past its lifetime.
    """

    def __init__(self, redis_repository: RedisRepository, ttl: timedelta):
        """
        Initialize with Redis repository.

        Args:
            redis_repository: RedisRepository instance from infrastructure layer
            ttl: Artifact time-to-live
        """
        super().__init__(ttl)
        self.redis_repo = redis_repository
        self.key_prefix = ARTIFACT_KEY_PREFIX
        self.index_key = ARTIFACT_INDEX_KEY

    @property
    def ttl_seconds(self) -> int:
        """Whole-second expiry for Redis, floor-rounded, never below one second."""
        return max(1, int(self.ttl.total_seconds()))

    def _artifact_key(self, artifact_id: str) -> str:
        return self.redis_repo._make_key(f"{self.key_prefix}:{artifact_id}")

    async def put(self, document: RenderedDocument) -> str:
        """
        Store an artifact with SETEX and register it in the expiry index.

        Index members that have already expired are pruned in the same
        transaction, so the index stays bounded by the live artifacts.
        """
        artifact = Artifact.create(document)
        key = self._artifact_key(artifact.id)
        index_key = self.redis_repo._make_key(self.index_key)
        expires_at = artifact.expires_at(self.ttl).timestamp()

        with self.redis_repo.backend_errors("put", key):
            async with self.redis_repo.redis.pipeline(transaction=True) as pipe:
                pipe.setex(key, self.ttl_seconds, json.dumps(artifact.to_dict()))
                pipe.zremrangebyscore(index_key, "-inf", artifact.created_at.timestamp())
                pipe.zadd(index_key, {artifact.id: expires_at})
                await pipe.execute()

        logger.debug(f"Stored artifact {artifact.id} (ttl {self.ttl_seconds}s)")
        return artifact.id

    async def get(self, artifact_id: str) -> Optional[Artifact]:
        """Retrieve an artifact, treating logically expired records as missing."""
        data = await self.redis_repo.get_json(f"{self.key_prefix}:{artifact_id}")
        if data is None:
            return None

        try:
            artifact = Artifact.from_dict(data)
        except (KeyError, ValueError, TypeError) as e:
            logger.warning(f"Error deserializing artifact {artifact_id}: {e}")
            return None

        if artifact.is_expired(self.ttl):
            return None
        return artifact

    async def count(self) -> Optional[int]:
        """
        Count live artifacts from the expiry index.

        Index members whose expiry has passed are pruned first, so the
        result matches what get() would still serve.
        """
        index_key = self.redis_repo._make_key(self.index_key)
        now = datetime.now(timezone.utc).timestamp()

        with self.redis_repo.backend_errors("count", index_key):
            async with self.redis_repo.redis.pipeline(transaction=True) as pipe:
                pipe.zremrangebyscore(index_key, "-inf", now)
                pipe.zcard(index_key)
                _, live = await pipe.execute()

        return int(live)
