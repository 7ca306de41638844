"""
Ingestion Result Value Object

Outcome of handling one "file shared" event.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class IngestionState(Enum):
    """
    Workflow states, in order. REJECTED and FAILED are terminal side exits.
    """

    RECEIVED = "received"
    VALIDATED = "validated"
    TOKEN_RESOLVED = "token_resolved"
    DOWNLOADED = "downloaded"
    RENDERED = "rendered"
    PERSISTED = "persisted"
    NOTIFIED = "notified"
    DONE = "done"
    REJECTED = "rejected"
    FAILED = "failed"


@dataclass(frozen=True)
class IngestionResult:
    """
    Attributes:
        state: Terminal state (DONE, REJECTED or FAILED)
        failed_at: Last state reached before a failure
        artifact_id: Stored artifact id, once persisted
        viewer_url: Link posted to the conversation, once persisted
        title: Document title, once rendered
        error_message: Human-readable error message (if failed)
        error_type: Error category value (if failed or rejected)
    """

    state: IngestionState
    failed_at: Optional[IngestionState] = None
    artifact_id: Optional[str] = None
    viewer_url: Optional[str] = None
    title: Optional[str] = None
    error_message: Optional[str] = None
    error_type: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.state is IngestionState.DONE
