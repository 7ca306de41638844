"""
Inbound Platform Events

Immutable representations of the Slack events this system reacts to.
Parsing from raw payloads lives here so the HTTP layer and the workflow
share one definition.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class SharedFile:
    """Metadata for a file shared in a conversation."""

    id: str
    name: str
    url_private_download: str
    mimetype: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "SharedFile":
        """
        Build from a Slack file object (files.info or an event payload).

        Raises:
            ValueError: If the object lacks an id, a name or a download URL
        """
        file_id = data.get("id")
        name = data.get("name")
        url = data.get("url_private_download") or data.get("url_private")
        if not file_id or not name or not url:
            raise ValueError("File object is missing id, name or download URL")
        return cls(id=file_id, name=name, url_private_download=url, mimetype=data.get("mimetype"))


@dataclass(frozen=True)
class FileSharedEvent:
    """
    A "file shared" signal for one file in one conversation.

    `file` is filled in when the transport already knows the file metadata;
    otherwise the workflow looks it up by `file_id`.
    """

    file_id: str
    channel_id: Optional[str]
    user_id: Optional[str]
    tenant_id: Optional[str]
    event_id: Optional[str] = None
    context_token: Optional[str] = None
    file: Optional[SharedFile] = None

    @classmethod
    def from_event_callback(
        cls, envelope: Dict[str, Any], context_token: Optional[str] = None
    ) -> "FileSharedEvent":
        """
        Build from an Events API `event_callback` envelope.

        Args:
            envelope: Decoded request body
            context_token: Token already resolved by the transport, if any

        Raises:
            ValueError: If the inner event carries no file id
        """
        event = envelope.get("event") or {}
        file_id = event.get("file_id") or (event.get("file") or {}).get("id")
        if not file_id:
            raise ValueError("file_shared event has no file id")

        shared_file = None
        file_data = event.get("file") or {}
        if file_data.get("name"):
            try:
                shared_file = SharedFile.from_api(file_data)
            except ValueError:
                shared_file = None

        return cls(
            file_id=file_id,
            channel_id=event.get("channel_id"),
            user_id=event.get("user_id"),
            tenant_id=envelope.get("team_id") or event.get("team_id"),
            event_id=envelope.get("event_id"),
            context_token=context_token,
            file=shared_file,
        )
