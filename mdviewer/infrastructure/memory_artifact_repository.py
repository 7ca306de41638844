"""
In-Memory Artifact Repository

Local fallback for ArtifactRepository when no Redis URL is configured.
Expiry is enforced lazily on every get() and eagerly by sweep_expired(),
which the periodic sweep task calls.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

from mdviewer.domain.artifacts.entities import Artifact, RenderedDocument
from mdviewer.domain.artifacts.repositories import ArtifactRepository

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryArtifactRepository(ArtifactRepository):
    """
    Process-local artifact store.

    All mutations happen without an await in between, so operations are
    atomic with respect to the event loop and need no lock.
    """

    def __init__(self, ttl: timedelta, clock: Callable[[], datetime] = _utcnow):
        """
        Args:
            ttl: Artifact time-to-live
            clock: Source of the current time (injectable for tests)
        """
        super().__init__(ttl)
        self.clock = clock
        self._store: Dict[str, Artifact] = {}

    async def put(self, document: RenderedDocument) -> str:
        artifact = Artifact.create(document, now=self.clock())
        self._store[artifact.id] = artifact
        return artifact.id

    async def get(self, artifact_id: str) -> Optional[Artifact]:
        artifact = self._store.get(artifact_id)
        if artifact is None:
            return None

        if artifact.is_expired(self.ttl, now=self.clock()):
            self._store.pop(artifact_id, None)
            return None

        return artifact

    async def count(self) -> Optional[int]:
        """Count live artifacts, ignoring expired ones not swept yet."""
        now = self.clock()
        return sum(1 for a in self._store.values() if not a.is_expired(self.ttl, now=now))

    def sweep_expired(self) -> int:
        """
        Remove every expired artifact, read or not.

        Returns:
            Number of artifacts removed
        """
        now = self.clock()
        expired = [
            artifact_id
            for artifact_id, artifact in self._store.items()
            if artifact.is_expired(self.ttl, now=now)
        ]
        for artifact_id in expired:
            self._store.pop(artifact_id, None)

        logger.info(
            f"Artifact sweep removed {len(expired)} expired, {len(self._store)} remaining"
        )
        return len(expired)

    def list_ids(self) -> List[str]:
        """All stored ids, including expired ones not swept yet."""
        return list(self._store.keys())
