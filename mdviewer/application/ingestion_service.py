"""
Ingestion Service

Application service that turns one "file shared" event into a stored,
viewable artifact and a message in the originating conversation.

Workflow (linear, no retries):
Received -> Validated -> TokenResolved -> Downloaded -> Rendered
         -> Persisted -> Notified -> Done

Unsupported files end in Rejected; any other failure ends in Failed. Either
way only the current event is affected, and nothing is stored unless
rendering succeeded.
"""

import logging
from typing import Any, Dict, List, Optional

from mdviewer.domain.artifacts.entities import RenderedDocument
from mdviewer.domain.artifacts.repositories import ArtifactRepository
from mdviewer.domain.artifacts.value_objects import DocumentType
from mdviewer.domain.credentials.token_policy import TokenResolver
from mdviewer.domain.errors import (
    DomainError,
    ErrorCategory,
    PersistError,
    StorageError,
    ValidationRejectedError,
)
from mdviewer.domain.events import FileSharedEvent, SharedFile
from mdviewer.domain.rendering.services import DocumentRenderer
from mdviewer.infrastructure.slack_web_client import SlackWebClient

from .ingestion_result import IngestionResult, IngestionState

logger = logging.getLogger(__name__)

VIEW_ACTION_ID = "view_markdown"


def build_notification_blocks(title: str, viewer_url: str) -> List[Dict[str, Any]]:
    """Message blocks: a title section and one link-styled button."""
    return [
        {
            "type": "section",
            "text": {
                "type": "mrkdwn",
                "text": f":page_facing_up: *{title}*\nYour file has been rendered!",
            },
        },
        {
            "type": "actions",
            "elements": [
                {
                    "type": "button",
                    "text": {
                        "type": "plain_text",
                        "text": "View Rendered Markdown",
                        "emoji": True,
                    },
                    "url": viewer_url,
                    "action_id": VIEW_ACTION_ID,
                }
            ],
        },
    ]


def acknowledge_interaction(payload: Optional[Dict[str, Any]] = None) -> None:
    """
    Acknowledge a click on the notification's link button.

    The button opens its URL client-side; Slack still expects every
    interaction to be acknowledged, and there is nothing else to do.
    """
    if payload:
        actions = payload.get("actions") or []
        action_ids = [a.get("action_id") for a in actions]
        logger.debug(f"Acknowledged interaction {payload.get('type')} {action_ids}")


class IngestionService:
    """
    Orchestrates token resolution, download, rendering, storage and
    notification for shared files.

    Every dependency is injected; the service keeps no per-event state, so
    any number of events can be handled concurrently.
    """

    def __init__(
        self,
        artifact_repository: ArtifactRepository,
        token_resolver: TokenResolver,
        slack_client: SlackWebClient,
        renderer: DocumentRenderer,
        base_url: str,
    ):
        """
        Args:
            artifact_repository: Store for rendered documents
            token_resolver: Bot token policy bound to the installation registry
            slack_client: Slack Web API client for files and messages
            renderer: Markdown/HTML rendering service
            base_url: Public base URL of the viewer
        """
        self.artifact_repository = artifact_repository
        self.token_resolver = token_resolver
        self.slack_client = slack_client
        self.renderer = renderer
        self.base_url = base_url.rstrip("/")

    def viewer_url(self, artifact_id: str) -> str:
        return f"{self.base_url}/view/{artifact_id}"

    @staticmethod
    def validate(shared_file: SharedFile) -> DocumentType:
        """
        Accept only supported document types.

        Raises:
            ValidationRejectedError: For any other extension
        """
        doc_type = DocumentType.from_filename(shared_file.name)
        if doc_type is None:
            raise ValidationRejectedError(f"Unsupported file type: {shared_file.name}")
        return doc_type

    async def handle_file_shared(self, event: FileSharedEvent) -> IngestionResult:
        """
        Run the workflow for one event.

        Never raises: every outcome, including failures, is reported in the
        returned IngestionResult and logged.

        Args:
            event: Parsed file_shared event

        Returns:
            IngestionResult with the terminal state
        """
        state = IngestionState.RECEIVED
        artifact_id = None
        viewer_url = None
        title = None
        logger.info(
            f"File shared event received: file={event.file_id} "
            f"channel={event.channel_id} team={event.tenant_id}"
        )

        try:
            shared_file = event.file
            doc_type = None
            if shared_file is not None:
                doc_type = self.validate(shared_file)
                state = IngestionState.VALIDATED

            resolved = await self.token_resolver.resolve(event.context_token, event.tenant_id)
            state = IngestionState.TOKEN_RESOLVED
            logger.debug(f"Using {resolved.source.value} token for team {event.tenant_id}")

            if shared_file is None:
                shared_file = await self.slack_client.get_file_info(event.file_id, resolved.token)
                doc_type = self.validate(shared_file)

            raw = await self.slack_client.download_file(
                shared_file.url_private_download, resolved.token
            )
            state = IngestionState.DOWNLOADED

            output = self.renderer.render(shared_file.name, doc_type, raw)
            title = output.title
            state = IngestionState.RENDERED

            document = RenderedDocument(
                html=output.html,
                title=output.title,
                file_name=shared_file.name,
                file_type=doc_type,
                uploaded_by=event.user_id,
                conversation_id=event.channel_id,
                tenant_id=event.tenant_id,
            )
            try:
                artifact_id = await self.artifact_repository.put(document)
            except StorageError as e:
                raise PersistError(f"Failed to store rendered file: {e}", original_error=e) from e
            state = IngestionState.PERSISTED

            viewer_url = self.viewer_url(artifact_id)
            if event.channel_id:
                await self.slack_client.post_message(
                    resolved.token,
                    event.channel_id,
                    f"Markdown file rendered! View it here: {viewer_url}",
                    blocks=build_notification_blocks(title, viewer_url),
                )
            else:
                logger.warning(f"No channel for file {event.file_id}, skipping notification")
            state = IngestionState.NOTIFIED

            logger.info(
                f"Markdown rendered and message sent. URL: {viewer_url} (team: {event.tenant_id})"
            )
            return IngestionResult(
                state=IngestionState.DONE,
                artifact_id=artifact_id,
                viewer_url=viewer_url,
                title=title,
            )

        except ValidationRejectedError as e:
            logger.info(f"Not a supported document, skipping: {e}")
            return IngestionResult(
                state=IngestionState.REJECTED,
                failed_at=state,
                error_message=str(e),
                error_type=ErrorCategory.UNSUPPORTED_FILE.value,
            )
        except DomainError as e:
            logger.error(
                f"Error handling file_shared event {event.event_id} "
                f"(file {event.file_id}, team {event.tenant_id}) at {state.value}: {e}"
            )
            return IngestionResult(
                state=IngestionState.FAILED,
                failed_at=state,
                artifact_id=artifact_id,
                viewer_url=viewer_url,
                title=title,
                error_message=str(e),
                error_type=e.category.value,
            )
        except Exception as e:
            logger.exception(f"Unexpected error handling file {event.file_id}: {e}")
            return IngestionResult(
                state=IngestionState.FAILED,
                failed_at=state,
                artifact_id=artifact_id,
                viewer_url=viewer_url,
                title=title,
                error_message=str(e),
                error_type=ErrorCategory.SYSTEM_ERROR.value,
            )
