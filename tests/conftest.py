"""
Shared pytest fixtures and configuration for the markdown viewer test suite.

This module provides:
- Hypothesis configuration for property-based testing
- Store, fake Redis and fake Slack client fixtures
- A Flask app wired to local stores and the fake Slack client
"""

from datetime import timedelta

import pytest
from hypothesis import HealthCheck, Phase, settings

from mdviewer.config.settings import Settings
from mdviewer.infrastructure.local_installation_repository import LocalInstallationRepository
from mdviewer.infrastructure.memory_artifact_repository import InMemoryArtifactRepository
from mdviewer.infrastructure.redis_repository import RedisRepository
from mdviewer.infrastructure.storage_factory import BACKEND_LOCAL, Stores

from tests.fixtures.fake_redis import FakeRedis
from tests.fixtures.mock_slack_client import FakeSlackClient

# Register Hypothesis profiles
settings.register_profile(
    "default",
    max_examples=100,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.target, Phase.shrink],
)
settings.register_profile(
    "ci",
    max_examples=200,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
)
settings.register_profile(
    "dev",
    max_examples=10,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
)
settings.load_profile("default")


# =============================================================================
# Store Fixtures
# =============================================================================

@pytest.fixture
def ttl() -> timedelta:
    return timedelta(hours=24)


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def redis_repo(fake_redis) -> RedisRepository:
    return RedisRepository(fake_redis)


@pytest.fixture
def memory_artifacts(ttl) -> InMemoryArtifactRepository:
    return InMemoryArtifactRepository(ttl)


@pytest.fixture
def local_installations(tmp_path) -> LocalInstallationRepository:
    return LocalInstallationRepository(str(tmp_path / "data"))


@pytest.fixture
def fake_slack() -> FakeSlackClient:
    return FakeSlackClient()


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest.fixture
def app_settings(tmp_path) -> Settings:
    return Settings(
        {
            "BASE_URL": "https://viewer.example.com",
            "DATA_DIR": str(tmp_path / "data"),
            "ADMIN_API_KEY": "admin-secret",
            "SLACK_BOT_TOKEN": "xoxb-default",
        }
    )


@pytest.fixture
def app_stores(memory_artifacts, local_installations) -> Stores:
    return Stores(
        artifacts=memory_artifacts,
        installations=local_installations,
        backend=BACKEND_LOCAL,
    )


@pytest.fixture
def app(app_settings, app_stores, fake_slack):
    """Flask app with local stores and the fake Slack client."""
    from app_factory import create_app, shutdown_app

    flask_app = create_app(app_settings, stores=app_stores, slack_client=fake_slack)
    flask_app.config["TESTING"] = True
    yield flask_app
    shutdown_app(flask_app)


@pytest.fixture
def client(app):
    return app.test_client()


# =============================================================================
# Pytest Configuration Hooks
# =============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (require external services)"
    )
    config.addinivalue_line(
        "markers", "contract: Contract tests (verify interface compliance)"
    )
    config.addinivalue_line(
        "markers", "property: Property-based tests using Hypothesis"
    )


def pytest_collection_modifyitems(config, items):
    """
    Automatically mark tests based on their location.

    - tests/unit/* -> @pytest.mark.unit
    - tests/integration/* -> @pytest.mark.integration
    - tests/contracts/* -> @pytest.mark.contract
    - tests/property/* -> @pytest.mark.property
    """
    for item in items:
        test_path = str(item.fspath)

        if "/unit/" in test_path or "\\unit\\" in test_path:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in test_path or "\\integration\\" in test_path:
            item.add_marker(pytest.mark.integration)
        elif "/contracts/" in test_path or "\\contracts\\" in test_path:
            item.add_marker(pytest.mark.contract)
        elif "/property/" in test_path or "\\property\\" in test_path:
            item.add_marker(pytest.mark.property)
