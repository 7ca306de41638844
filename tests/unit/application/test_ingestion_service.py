"""
Unit tests for IngestionService

Covers the workflow states for one "file shared" event: validation before
credential lookup, download, rendering, storage and notification, and the
terminal Rejected/Failed exits.
"""

from datetime import timedelta

import pytest

from mdviewer.application.ingestion_result import IngestionState
from mdviewer.application.ingestion_service import (
    VIEW_ACTION_ID,
    IngestionService,
    build_notification_blocks,
)
from mdviewer.domain.credentials.token_policy import TokenResolver
from mdviewer.domain.errors import (
    BackendUnavailableError,
    ErrorCategory,
    NotificationError,
    UpstreamFetchError,
)
from mdviewer.domain.rendering.services import DocumentRenderer
from mdviewer.infrastructure.memory_artifact_repository import InMemoryArtifactRepository

from tests.fixtures.domain_fixtures import (
    create_file_shared_event,
    create_installation,
    create_shared_file,
)
from tests.fixtures.mock_repositories import MockArtifactRepository, MockInstallationRepository
from tests.fixtures.mock_slack_client import FakeSlackClient

BASE_URL = "https://viewer.example.com"


@pytest.fixture
def shared_file():
    return create_shared_file()


@pytest.fixture
def registry():
    return MockInstallationRepository(create_installation(tenant_id="T123", bot_token="xoxb-registry"))


@pytest.fixture
def artifacts():
    return MockArtifactRepository()


@pytest.fixture
def slack(shared_file):
    client = FakeSlackClient({shared_file.url_private_download: "# Plan\n\nShip it."})
    client.file_info[shared_file.id] = shared_file
    return client


@pytest.fixture
def service(artifacts, registry, slack):
    return IngestionService(
        artifact_repository=artifacts,
        token_resolver=TokenResolver(registry, default_token="xoxb-default"),
        slack_client=slack,
        renderer=DocumentRenderer(),
        base_url=BASE_URL + "/",
    )


class TestSuccessfulIngestion:
    async def test_markdown_file_stored_and_announced(self, service, artifacts, slack):
        result = await service.handle_file_shared(create_file_shared_event())

        assert result.state is IngestionState.DONE
        assert result.success
        assert result.title == "Plan"
        assert result.viewer_url == f"{BASE_URL}/view/{result.artifact_id}"

        artifact = await artifacts.get(result.artifact_id)
        assert "<h1>Plan</h1>" in artifact.html
        assert artifact.uploaded_by == "U123"
        assert artifact.conversation_id == "C123"
        assert artifact.tenant_id == "T123"

        assert slack.downloads == [
            {"url": create_shared_file().url_private_download, "token": "xoxb-registry"}
        ]
        [message] = slack.messages
        assert message["channel"] == "C123"
        assert message["token"] == "xoxb-registry"
        assert message["text"] == f"Markdown file rendered! View it here: {result.viewer_url}"
        assert message["blocks"] == build_notification_blocks("Plan", result.viewer_url)

    async def test_context_token_preferred(self, service, registry, slack):
        await service.handle_file_shared(create_file_shared_event(context_token="xoxb-context"))

        assert slack.downloads[0]["token"] == "xoxb-context"
        assert registry.calls_to("get") == 0

    async def test_html_file_passes_through(self, service, artifacts, slack):
        page = "<html><head><title>Report</title></head><body>x</body></html>"
        shared = create_shared_file(name="report.html", url="https://files/report.html")
        slack.files[shared.url_private_download] = page

        result = await service.handle_file_shared(create_file_shared_event(file=shared))

        assert result.title == "Report"
        assert (await artifacts.get(result.artifact_id)).html == page

    async def test_metadata_looked_up_when_missing(self, service, slack):
        result = await service.handle_file_shared(create_file_shared_event(with_file=False))

        assert result.state is IngestionState.DONE
        assert slack.info_requests == [{"file_id": "F123", "token": "xoxb-registry"}]

    async def test_no_channel_skips_notification(self, service, slack):
        result = await service.handle_file_shared(create_file_shared_event(channel_id=None))

        assert result.state is IngestionState.DONE
        assert slack.messages == []

    async def test_redelivery_creates_second_artifact(self, service, artifacts, slack):
        event = create_file_shared_event()

        first = await service.handle_file_shared(event)
        second = await service.handle_file_shared(event)

        assert first.artifact_id != second.artifact_id
        assert artifacts.calls_to("put") == 2
        assert len(slack.messages) == 2


class TestRejectedIngestion:
    async def test_unsupported_file_touches_nothing(self, service, artifacts, registry, slack):
        image = create_shared_file(name="image.png", url="https://files/image.png")

        result = await service.handle_file_shared(create_file_shared_event(file=image))

        assert result.state is IngestionState.REJECTED
        assert result.failed_at is IngestionState.RECEIVED
        assert result.error_type == ErrorCategory.UNSUPPORTED_FILE.value
        assert registry.get_call_history() == []
        assert artifacts.calls_to("put") == 0
        assert slack.downloads == []
        assert slack.messages == []

    async def test_unsupported_file_found_by_lookup(self, service, artifacts, slack):
        image = create_shared_file(name="image.png", url="https://files/image.png")
        slack.file_info["F123"] = image

        result = await service.handle_file_shared(create_file_shared_event(with_file=False))

        assert result.state is IngestionState.REJECTED
        assert slack.downloads == []
        assert artifacts.calls_to("put") == 0


class TestFailedIngestion:
    async def test_download_error_stores_nothing(self, service, artifacts, slack):
        slack.download_error = UpstreamFetchError("HTTP error! status: 404", status_code=404)

        result = await service.handle_file_shared(create_file_shared_event())

        assert result.state is IngestionState.FAILED
        assert result.failed_at is IngestionState.TOKEN_RESOLVED
        assert result.error_type == ErrorCategory.UPSTREAM_FETCH_FAILED.value
        assert artifacts.calls_to("put") == 0
        assert slack.messages == []

    async def test_no_credentials(self, artifacts, slack):
        service = IngestionService(
            artifacts,
            TokenResolver(MockInstallationRepository(), default_token=None),
            slack,
            DocumentRenderer(),
            BASE_URL,
        )

        result = await service.handle_file_shared(create_file_shared_event())

        assert result.state is IngestionState.FAILED
        assert result.failed_at is IngestionState.VALIDATED
        assert result.error_type == ErrorCategory.CREDENTIAL_UNRESOLVED.value
        assert slack.downloads == []

    async def test_registry_outage_fails_event(self, service, registry, slack):
        registry.error = BackendUnavailableError("redis down")

        result = await service.handle_file_shared(create_file_shared_event())

        assert result.state is IngestionState.FAILED
        assert result.error_type == ErrorCategory.STORAGE_UNAVAILABLE.value
        assert slack.downloads == []

    async def test_persist_failure_sends_no_notification(self, service, artifacts, slack):
        artifacts.error = BackendUnavailableError("redis down")

        result = await service.handle_file_shared(create_file_shared_event())

        assert result.state is IngestionState.FAILED
        assert result.failed_at is IngestionState.RENDERED
        assert result.error_type == ErrorCategory.PERSIST_FAILED.value
        assert result.artifact_id is None
        assert slack.messages == []

    async def test_notification_failure_keeps_artifact(self, service, artifacts, slack):
        slack.post_error = NotificationError("not_in_channel")

        result = await service.handle_file_shared(create_file_shared_event())

        assert result.state is IngestionState.FAILED
        assert result.failed_at is IngestionState.PERSISTED
        assert result.error_type == ErrorCategory.NOTIFICATION_FAILED.value
        assert await artifacts.get(result.artifact_id) is not None

    async def test_unexpected_error_is_contained(self, service, slack):
        slack.download_error = RuntimeError("boom")

        result = await service.handle_file_shared(create_file_shared_event())

        assert result.state is IngestionState.FAILED
        assert result.error_type == ErrorCategory.SYSTEM_ERROR.value


async def test_works_with_real_memory_store(registry, slack):
    store = InMemoryArtifactRepository(timedelta(hours=1))
    service = IngestionService(
        store, TokenResolver(registry), slack, DocumentRenderer(), BASE_URL
    )

    result = await service.handle_file_shared(create_file_shared_event())

    assert store.list_ids() == [result.artifact_id]


def test_notification_blocks():
    blocks = build_notification_blocks("Plan", "https://v/view/abc")

    assert blocks[0]["text"]["text"].startswith(":page_facing_up: *Plan*")
    button = blocks[1]["elements"][0]
    assert button["url"] == "https://v/view/abc"
    assert button["action_id"] == VIEW_ACTION_ID
