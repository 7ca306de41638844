"""
Redis Installation Repository Implementation

Concrete Redis-based implementation of InstallationRepository.
Each record lives under "workspace:<tenant_id>" with no expiry, and the
"workspaces" set enumerates every known tenant id.
"""

import json
import logging
from typing import List, Optional

from mdviewer.domain.installations.entities import Installation
from mdviewer.domain.installations.repositories import InstallationRepository
from mdviewer.infrastructure.redis_repository import RedisRepository

logger = logging.getLogger(__name__)

INSTALLATION_KEY_PREFIX = "workspace"
INSTALLATION_SET_KEY = "workspaces"


class RedisInstallationRepository(InstallationRepository):
    """
    Redis-based implementation of InstallationRepository.

    The record and its set membership are written in one MULTI/EXEC
    transaction, so readers never see half of an upsert.
    """

    def __init__(self, redis_repository: RedisRepository):
        """
        Initialize with Redis repository.

        Args:
            redis_repository: RedisRepository instance from infrastructure layer
        """
        self.redis_repo = redis_repository
        self.key_prefix = INSTALLATION_KEY_PREFIX
        self.set_key = INSTALLATION_SET_KEY

    def _record_key(self, tenant_id: str) -> str:
        return f"{self.key_prefix}:{tenant_id}"

    async def save(self, installation: Installation) -> None:
        key = self.redis_repo._make_key(self._record_key(installation.tenant_id))
        set_key = self.redis_repo._make_key(self.set_key)

        with self.redis_repo.backend_errors("save", key):
            async with self.redis_repo.redis.pipeline(transaction=True) as pipe:
                pipe.set(key, json.dumps(installation.to_dict()))
                pipe.sadd(set_key, installation.tenant_id)
                await pipe.execute()

        logger.info(
            f"Saved installation for team: {installation.tenant_name} "
            f"({installation.tenant_id})"
        )

    async def get(self, tenant_id: str) -> Optional[Installation]:
        data = await self.redis_repo.get_json(self._record_key(tenant_id))
        if data is None:
            return None

        try:
            return Installation.from_dict(data)
        except (KeyError, ValueError, TypeError) as e:
            logger.warning(f"Error deserializing installation {tenant_id}: {e}")
            return None

    async def delete(self, tenant_id: str) -> bool:
        key = self.redis_repo._make_key(self._record_key(tenant_id))
        set_key = self.redis_repo._make_key(self.set_key)

        with self.redis_repo.backend_errors("delete", key):
            async with self.redis_repo.redis.pipeline(transaction=True) as pipe:
                pipe.delete(key)
                pipe.srem(set_key, tenant_id)
                deleted, _ = await pipe.execute()

        logger.info(f"Deleted installation for team: {tenant_id}")
        return deleted > 0

    async def list_all(self) -> List[Installation]:
        """
        List installations via the tenant set and one batched GET.

        Set members whose record has gone missing are skipped.
        """
        tenant_ids = await self.redis_repo.set_members(self.set_key)
        records = await self.redis_repo.get_many_json(
            [self._record_key(t) for t in tenant_ids]
        )

        installations = []
        for tenant_id, data in zip(tenant_ids, records):
            if data is None:
                logger.warning(f"Workspace {tenant_id} is listed but has no record")
                continue
            try:
                installations.append(Installation.from_dict(data))
            except (KeyError, ValueError, TypeError) as e:
                logger.warning(f"Error deserializing installation {tenant_id}: {e}")
        return installations

    async def count(self) -> int:
        return await self.redis_repo.set_size(self.set_key)
