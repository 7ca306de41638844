"""Background tasks."""

from .sweep_task import ArtifactSweeper, sweep_expired_artifacts

__all__ = [
    'ArtifactSweeper',
    'sweep_expired_artifacts',
]
