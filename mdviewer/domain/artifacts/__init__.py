"""
Artifacts Domain

Rendered documents stored for a limited time and served by identifier.
"""

from .entities import Artifact, RenderedDocument
from .repositories import ArtifactRepository
from .value_objects import DocumentType, generate_artifact_id, is_valid_artifact_id

__all__ = [
    'Artifact',
    'ArtifactRepository',
    'DocumentType',
    'RenderedDocument',
    'generate_artifact_id',
    'is_valid_artifact_id',
]
