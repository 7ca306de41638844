"""
Artifact Repositories

Repository interface for time-bounded artifact persistence.
Concrete implementations are in the infrastructure layer.
"""

from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Optional

from .entities import Artifact, RenderedDocument


class ArtifactRepository(ABC):
    """
    Abstract repository interface for artifacts.

    Contract Guarantees:
    - put() mints a fresh identifier and never overwrites a live record
    - get() returns None for ids that were never written AND for ids whose
      TTL has passed, even if the backend has not evicted them yet
    - Connectivity failures raise BackendUnavailableError, never None
    """

    def __init__(self, ttl: timedelta):
        self.ttl = ttl

    @abstractmethod
    async def put(self, document: RenderedDocument) -> str:
        """
        Store a rendered document.

        Args:
            document: Rendered document to store

        Returns:
            Generated artifact identifier

        Raises:
            StorageError: If the backend cannot store the record
        """
        pass  # pragma: no cover

    @abstractmethod
    async def get(self, artifact_id: str) -> Optional[Artifact]:
        """
        Retrieve an artifact by id.

        Args:
            artifact_id: Identifier returned by put()

        Returns:
            Artifact if present and not expired, None otherwise
        """
        pass  # pragma: no cover

    @abstractmethod
    async def count(self) -> Optional[int]:
        """
        Best-effort number of live artifacts.

        Returns:
            Live item count, or None when the backend cannot tell
        """
        pass  # pragma: no cover
