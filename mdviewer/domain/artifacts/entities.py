"""
Artifact Entities

Domain entities for rendered, viewable documents.
"""

from dataclasses import asdict, dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from .value_objects import DocumentType, generate_artifact_id


@dataclass(frozen=True)
class RenderedDocument:
    """
    A converted document that has not been stored yet.

    This is the input to ArtifactRepository.put(); the store attaches the
    identifier and the creation timestamp.
    """

    html: str
    title: str
    file_name: str
    file_type: DocumentType
    uploaded_by: Optional[str] = None
    conversation_id: Optional[str] = None
    tenant_id: Optional[str] = None


@dataclass(frozen=True)
class Artifact:
    """
    Entity representing a stored, viewable document.

    Artifacts are write-once: there is no update operation, they only
    disappear when their TTL runs out.
    """

    id: str
    html: str
    title: str
    file_name: str
    file_type: DocumentType
    created_at: datetime
    uploaded_by: Optional[str] = None
    conversation_id: Optional[str] = None
    tenant_id: Optional[str] = None

    @classmethod
    def create(
        cls, document: RenderedDocument, now: Optional[datetime] = None
    ) -> "Artifact":
        """
        Factory method to mint a new artifact from a rendered document.

        Args:
            document: Rendered document to store
            now: Creation time (default: current UTC time)

        Returns:
            New Artifact with a fresh identifier
        """
        return cls(
            id=generate_artifact_id(),
            html=document.html,
            title=document.title,
            file_name=document.file_name,
            file_type=document.file_type,
            created_at=now or datetime.now(timezone.utc),
            uploaded_by=document.uploaded_by,
            conversation_id=document.conversation_id,
            tenant_id=document.tenant_id,
        )

    def expires_at(self, ttl: timedelta) -> datetime:
        return self.created_at + ttl

    def is_expired(self, ttl: timedelta, now: Optional[datetime] = None) -> bool:
        """
        Check whether the artifact has outlived its TTL.

        Args:
            ttl: Configured time-to-live
            now: Reference time (default: current UTC time)

        Returns:
            True if now - created_at exceeds the TTL
        """
        now = now or datetime.now(timezone.utc)
        return now - self.created_at > ttl

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a flat dictionary for serialization."""
        data = asdict(self)
        data["file_type"] = self.file_type.value
        data["created_at"] = self.created_at.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Artifact":
        """Create an Artifact from its serialized form."""
        created_at = datetime.fromisoformat(data["created_at"])
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)

        return cls(
            id=data["id"],
            html=data["html"],
            title=data["title"],
            file_name=data["file_name"],
            file_type=DocumentType(data["file_type"]),
            created_at=created_at,
            uploaded_by=data.get("uploaded_by"),
            conversation_id=data.get("conversation_id"),
            tenant_id=data.get("tenant_id"),
        )
