"""
Unit tests for application assembly and shutdown.
"""

import pytest

from app_factory import create_app, shutdown_app
from mdviewer.application.ingestion_service import IngestionService
from mdviewer.application.installation_service import InstallationService
from mdviewer.config.settings import Settings
from mdviewer.domain.artifacts.repositories import ArtifactRepository
from mdviewer.domain.installations.repositories import InstallationRepository
from mdviewer.infrastructure.storage_factory import BACKEND_LOCAL


def test_services_registered(app, app_stores):
    container = app.container

    assert container.resolve(ArtifactRepository) is app_stores.artifacts
    assert container.resolve(InstallationRepository) is app_stores.installations
    assert isinstance(container.resolve(IngestionService), IngestionService)
    assert isinstance(container.resolve(InstallationService), InstallationService)


def test_local_backend_built_from_settings(tmp_path):
    app = create_app(Settings({"DATA_DIR": str(tmp_path), "SWEEP_INTERVAL_SECONDS": "60"}))
    try:
        assert app.stores.backend == BACKEND_LOCAL
        assert app.sweeper is not None and app.sweeper.is_running
        assert app.http_client is not None
    finally:
        shutdown_app(app)

    assert not app.event_loop.is_running
    assert app.http_client.is_closed


def test_injected_stores_skip_sweeper_for_redis_like_store(app_settings, fake_slack, local_installations):
    from tests.fixtures.mock_repositories import MockArtifactRepository
    from mdviewer.infrastructure.storage_factory import BACKEND_REDIS, Stores

    stores = Stores(MockArtifactRepository(), local_installations, BACKEND_REDIS)
    app = create_app(app_settings, stores=stores, slack_client=fake_slack)
    try:
        assert app.sweeper is None
    finally:
        shutdown_app(app)


def test_unreachable_redis_fails_startup(tmp_path):
    settings = Settings({"REDIS_URL": "redis://127.0.0.1:1/0", "DATA_DIR": str(tmp_path)})

    with pytest.raises(RuntimeError):
        create_app(settings)


def test_shutdown_is_idempotent(app):
    shutdown_app(app)
    shutdown_app(app)
