"""
Sweep Task

Periodic removal of expired artifacts from the in-memory store.
Redis evicts expired keys on its own, so the sweeper only runs with the
local fallback.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

from mdviewer.infrastructure.memory_artifact_repository import InMemoryArtifactRepository

logger = logging.getLogger(__name__)


def sweep_expired_artifacts(repository: InMemoryArtifactRepository) -> Dict[str, Any]:
    """
    Run one sweep cycle.

    Returns:
        dict: Sweep statistics with counts and errors
    """
    stats: Dict[str, Any] = {"expired_artifacts_removed": 0, "errors": []}
    try:
        stats["expired_artifacts_removed"] = repository.sweep_expired()
    except Exception as e:
        error_msg = f"Error sweeping expired artifacts: {e}"
        stats["errors"].append(error_msg)
        logger.error(error_msg, exc_info=True)
    return stats


class ArtifactSweeper:
    """
    Runs sweep_expired_artifacts on a fixed interval as an asyncio task.

    The sweep itself never awaits, so it cannot interleave with a request
    touching the same store; at worst it races a get() that was about to
    drop the same expired entry.
    """

    def __init__(self, repository: InMemoryArtifactRepository, interval_seconds: float = 3600):
        self.repository = repository
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            sweep_expired_artifacts(self.repository)

    def start(self) -> None:
        """Start the periodic task on the running event loop."""
        if self.is_running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.info(f"Artifact sweeper started (every {self.interval_seconds}s)")

    async def stop(self) -> None:
        """Cancel the periodic task and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Artifact sweeper stopped")
