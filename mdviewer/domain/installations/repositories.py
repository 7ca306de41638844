"""
Installation Repositories

Repository interface for durable per-workspace credentials.
Concrete implementations are in the infrastructure layer.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from .entities import Installation


class InstallationRepository(ABC):
    """
    Abstract repository interface for installation records.

    Records never expire. save() is a whole-record upsert keyed by tenant id
    (last write wins); get() returns None only when no record exists and
    raises BackendUnavailableError when the backend cannot be reached.
    """

    @abstractmethod
    async def save(self, installation: Installation) -> None:
        """
        Upsert an installation and make it discoverable by list_all().

        Args:
            installation: Full record to store

        Raises:
            StorageError: If the backend cannot store the record
        """
        pass  # pragma: no cover

    @abstractmethod
    async def get(self, tenant_id: str) -> Optional[Installation]:
        """
        Retrieve the installation for a workspace.

        Args:
            tenant_id: Workspace identifier

        Returns:
            Installation if found, None otherwise
        """
        pass  # pragma: no cover

    @abstractmethod
    async def delete(self, tenant_id: str) -> bool:
        """
        Remove an installation and drop it from the discoverable set.

        Args:
            tenant_id: Workspace identifier

        Returns:
            True if a record was removed, False if none existed
        """
        pass  # pragma: no cover

    @abstractmethod
    async def list_all(self) -> List[Installation]:
        """
        Snapshot of every known installation.

        Returns:
            List of installations at call time
        """
        pass  # pragma: no cover

    @abstractmethod
    async def count(self) -> int:
        """
        Number of known installations.

        Returns:
            Installation count
        """
        pass  # pragma: no cover
