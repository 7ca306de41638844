"""Application layer: workflows orchestrating domain services and infrastructure."""

from .dependency_container import DependencyContainer, DependencyNotFoundError
from .ingestion_result import IngestionResult, IngestionState
from .ingestion_service import IngestionService, acknowledge_interaction
from .installation_service import InstallationService

__all__ = [
    'DependencyContainer',
    'DependencyNotFoundError',
    'IngestionResult',
    'IngestionService',
    'IngestionState',
    'InstallationService',
    'acknowledge_interaction',
]
