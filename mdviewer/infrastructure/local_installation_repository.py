"""
Local Installation Repository

Local fallback for InstallationRepository when no Redis URL is configured.
Keeps records in memory and mirrors them to a single JSON snapshot file,
rewritten in full on every mutation. Writes run in a worker thread so the
shared event loop never blocks on disk I/O.
"""

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, List, Optional

from mdviewer.domain.errors import StorageError
from mdviewer.domain.installations.entities import Installation
from mdviewer.domain.installations.repositories import InstallationRepository

logger = logging.getLogger(__name__)

SNAPSHOT_FILENAME = "workspaces.json"


class LocalInstallationRepository(InstallationRepository):
    """
    File-backed installation registry.

    The snapshot is an object keyed by tenant id mapping to the full record.
    It is loaded in the constructor, before the registry serves anything;
    a missing file means zero installations.
    """

    def __init__(self, data_dir: str = "./data"):
        """
        Initialize local installation repository.

        Args:
            data_dir: Directory holding the snapshot file

        Raises:
            StorageError: If the directory cannot be created or the snapshot
                exists but cannot be read
        """
        self.data_dir = Path(data_dir)
        self.file_path = self.data_dir / SNAPSHOT_FILENAME
        self._store: Dict[str, Installation] = {}
        self._lock = asyncio.Lock()
        self._ensure_data_dir()
        self._load_from_file()

    def _ensure_data_dir(self) -> None:
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to create data directory: {e}", original_error=e)

    def _load_from_file(self) -> None:
        if not self.file_path.exists():
            return

        try:
            with open(self.file_path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
            for tenant_id, record in data.items():
                record.setdefault("tenant_id", tenant_id)
                self._store[tenant_id] = Installation.from_dict(record)
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            raise StorageError(
                f"Failed to load installations from {self.file_path}: {e}",
                original_error=e,
            )

        logger.info(f"Loaded {len(self._store)} workspaces from file")

    def _write_snapshot(self, store: Dict[str, Installation]) -> None:
        """Write the whole snapshot to a temp file and swap it into place."""
        data = {tenant_id: inst.to_dict() for tenant_id, inst in store.items()}

        try:
            fd, tmp_path = tempfile.mkstemp(
                dir=self.data_dir, prefix=".workspaces-", suffix=".json"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(data, fh, indent=2)
                os.replace(tmp_path, self.file_path)
            except BaseException:
                Path(tmp_path).unlink(missing_ok=True)
                raise
        except OSError as e:
            logger.error(f"Error saving installations to file: {e}")
            raise StorageError(f"Failed to write {self.file_path}: {e}", original_error=e)

    async def _commit(self, store: Dict[str, Installation]) -> None:
        # memory only changes once the snapshot is on disk
        await asyncio.to_thread(self._write_snapshot, store)
        self._store = store

    async def save(self, installation: Installation) -> None:
        async with self._lock:
            store = dict(self._store)
            store[installation.tenant_id] = installation
            await self._commit(store)
        logger.info(
            f"Saved installation for team: {installation.tenant_name} "
            f"({installation.tenant_id})"
        )

    async def get(self, tenant_id: str) -> Optional[Installation]:
        return self._store.get(tenant_id)

    async def delete(self, tenant_id: str) -> bool:
        async with self._lock:
            if tenant_id not in self._store:
                return False
            store = dict(self._store)
            del store[tenant_id]
            await self._commit(store)
        logger.info(f"Deleted installation for team: {tenant_id}")
        return True

    async def list_all(self) -> List[Installation]:
        return list(self._store.values())

    async def count(self) -> int:
        return len(self._store)
