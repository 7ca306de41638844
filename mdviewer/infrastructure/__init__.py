"""Infrastructure layer for Redis, local storage and the Slack Web API."""

from .event_loop import BackgroundEventLoop
from .local_installation_repository import LocalInstallationRepository
from .memory_artifact_repository import InMemoryArtifactRepository
from .redis_artifact_repository import RedisArtifactRepository
from .redis_installation_repository import RedisInstallationRepository
from .redis_repository import RedisConnectionManager, RedisRepository
from .slack_web_client import SlackWebClient
from .storage_factory import StorageFactory, Stores

__all__ = [
    'BackgroundEventLoop',
    'InMemoryArtifactRepository',
    'LocalInstallationRepository',
    'RedisArtifactRepository',
    'RedisConnectionManager',
    'RedisInstallationRepository',
    'RedisRepository',
    'SlackWebClient',
    'StorageFactory',
    'Stores',
]
