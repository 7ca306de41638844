"""
Application Factory

Creates and configures the Flask application with all dependencies.
Stores and clients are built once here and injected into the services;
tests pass their own stores or Slack client to replace the real ones.
"""

import logging
import time
from typing import Optional

import httpx
from flask import Flask, jsonify
from flask_cors import CORS

from mdviewer.application.dependency_container import DependencyContainer
from mdviewer.application.ingestion_service import IngestionService
from mdviewer.application.installation_service import InstallationService
from mdviewer.config.redis_config import init_redis
from mdviewer.config.settings import Settings
from mdviewer.domain.artifacts.repositories import ArtifactRepository
from mdviewer.domain.credentials.token_policy import TokenResolver
from mdviewer.domain.errors import StorageError
from mdviewer.domain.installations.repositories import InstallationRepository
from mdviewer.domain.rendering.services import DocumentRenderer
from mdviewer.infrastructure.event_loop import BackgroundEventLoop
from mdviewer.infrastructure.memory_artifact_repository import InMemoryArtifactRepository
from mdviewer.infrastructure.slack_web_client import SlackWebClient
from mdviewer.infrastructure.storage_factory import StorageFactory, Stores
from mdviewer.tasks.sweep_task import ArtifactSweeper

logger = logging.getLogger(__name__)

HTTP_TIMEOUT_SECONDS = 30.0


def create_app(
    settings: Optional[Settings] = None,
    stores: Optional[Stores] = None,
    slack_client: Optional[SlackWebClient] = None,
) -> Flask:
    """
    Create and configure Flask application.

    Args:
        settings: Application settings, read from the environment if None
        stores: Pre-built stores; selected by StorageFactory if None
        slack_client: Slack Web API client; built on a shared httpx client if None

    Returns:
        Configured Flask application

    Raises:
        RuntimeError: If the configured storage backend cannot be initialized
    """
    if settings is None:
        settings = Settings()

    # templates live in the mdviewer package
    app = Flask("mdviewer")
    app.settings = settings
    app.started_at = time.monotonic()

    # Configure CORS
    CORS(
        app,
        resources={
            r"/api/*": {
                "origins": "*",
                "methods": ["GET", "DELETE", "OPTIONS"],
                "allow_headers": ["Content-Type", "X-API-Key"],
                "max_age": 3600,
            }
        },
    )

    app.event_loop = BackgroundEventLoop().start()
    try:
        _initialize_infrastructure(app, settings, stores, slack_client)
    except Exception:
        app.event_loop.stop()
        raise

    _initialize_services(app, settings)
    _register_blueprints(app, settings)
    _register_health_endpoint(app)

    if not settings.slack.signing_secret:
        logger.warning("SLACK_SIGNING_SECRET not set, Slack request verification is disabled")

    return app


def _initialize_infrastructure(
    app: Flask,
    settings: Settings,
    stores: Optional[Stores],
    slack_client: Optional[SlackWebClient],
) -> None:
    """
    Initialize stores, HTTP client and the sweeper on the background loop.

    Args:
        app: Flask application
        settings: Application settings
        stores: Pre-built stores, or None to select them from settings
        slack_client: Pre-built Slack client, or None
    """
    app.redis_manager = None
    app.http_client = None
    app.sweeper = None

    if stores is None:
        app.redis_manager = init_redis(settings)
        try:
            stores = app.event_loop.run(StorageFactory.create(settings, app.redis_manager))
        except Exception:
            if app.redis_manager is not None:
                app.event_loop.run(app.redis_manager.close())
            raise
    app.stores = stores
    logger.info(f"Storage backend: {stores.backend}")

    if slack_client is None:
        app.http_client = app.event_loop.run(_create_http_client())
        slack_client = SlackWebClient(app.http_client, settings.slack.api_base_url)
    app.slack_client = slack_client

    if isinstance(stores.artifacts, InMemoryArtifactRepository):
        app.sweeper = ArtifactSweeper(
            stores.artifacts, interval_seconds=settings.storage.sweep_interval_seconds
        )
        app.event_loop.run(_start_sweeper(app.sweeper))


async def _create_http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=HTTP_TIMEOUT_SECONDS)


async def _start_sweeper(sweeper: ArtifactSweeper) -> None:
    sweeper.start()


def _initialize_services(app: Flask, settings: Settings) -> None:
    """
    Build application services and register them in the DependencyContainer.

    Route handlers resolve services through app.container; nothing is
    reachable through module-level globals.

    Args:
        app: Flask application
        settings: Application settings
    """
    container = DependencyContainer()
    stores = app.stores

    container.register_singleton(Stores, stores)
    container.register_singleton(ArtifactRepository, stores.artifacts)
    container.register_singleton(InstallationRepository, stores.installations)
    container.register_singleton(SlackWebClient, app.slack_client)

    token_resolver = TokenResolver(stores.installations, settings.slack.bot_token)
    renderer = DocumentRenderer()
    container.register_singleton(TokenResolver, token_resolver)
    container.register_singleton(DocumentRenderer, renderer)

    ingestion_service = IngestionService(
        artifact_repository=stores.artifacts,
        token_resolver=token_resolver,
        slack_client=app.slack_client,
        renderer=renderer,
        base_url=settings.server.base_url,
    )
    installation_service = InstallationService(
        stores.installations,
        slack_client=app.slack_client,
        client_id=settings.slack.client_id,
        client_secret=settings.slack.client_secret,
    )
    container.register_singleton(IngestionService, ingestion_service)
    container.register_singleton(InstallationService, installation_service)

    app.container = container
    logger.info("Application services initialized")


def _register_blueprints(app: Flask, settings: Settings) -> None:
    """
    Register route blueprints.

    Args:
        app: Flask application
        settings: Application settings
    """
    from mdviewer.api.slack_events import slack_bp
    from mdviewer.api.v1 import api_v1_bp
    from mdviewer.api.viewer import viewer_bp

    app.register_blueprint(viewer_bp)
    app.register_blueprint(slack_bp)
    app.register_blueprint(api_v1_bp, url_prefix=f"/api/{settings.server.api_version}")

    logger.info(
        f"API {settings.server.api_version} registered at /api/{settings.server.api_version} "
        f"with Swagger UI at /api/{settings.server.api_version}/docs"
    )


async def _collect_counts(app: Flask) -> dict:
    return {
        "stored_files": await app.stores.artifacts.count(),
        "workspaces": await app.stores.installations.count(),
    }


def _get_health_status(app: Flask) -> tuple[dict, int]:
    """
    Get health status of the storage backend.

    Counts are best effort: stored_files is None when the backend cannot
    report it. A backend failure marks the service degraded.

    Args:
        app: Flask application instance

    Returns:
        Tuple of (health_status_dict, http_status_code)
    """
    health_status = {
        "status": "ok",
        "storage": app.stores.backend,
        "stored_files": None,
        "workspaces": None,
        "redis": "not_configured",
        "uptime_seconds": int(time.monotonic() - app.started_at),
    }

    if app.redis_manager is not None:
        try:
            connected = app.event_loop.run(app.redis_manager.health_check())
        except Exception as e:
            logger.error(f"Redis health check failed: {e}")
            connected = False
        health_status["redis"] = "connected" if connected else "disconnected"
        if not connected:
            health_status["status"] = "degraded"

    try:
        health_status.update(app.event_loop.run(_collect_counts(app)))
    except StorageError as e:
        logger.error(f"Storage unavailable during health check: {e}")
        health_status["status"] = "degraded"

    status_code = 200 if health_status["status"] == "ok" else 503
    return health_status, status_code


def _register_health_endpoint(app: Flask) -> None:
    """
    Register health check endpoint.

    Args:
        app: Flask application
    """

    @app.route("/health", methods=["GET"])
    def health():
        """
        Health check endpoint.
        Returns storage backend status and best-effort counts.
        """
        health_status, status_code = _get_health_status(app)
        return jsonify(health_status), status_code


def shutdown_app(app: Flask) -> None:
    """
    Release everything create_app opened.

    Stops the sweeper, closes the HTTP client and the Redis pool, then stops
    the background loop after in-flight events finish.

    Args:
        app: Flask application created by create_app
    """
    loop = getattr(app, "event_loop", None)
    if loop is None or not loop.is_running:
        return

    if app.sweeper is not None:
        loop.run(app.sweeper.stop())

    # in-flight events still use the HTTP client and the Redis pool
    loop.drain()
    if app.http_client is not None:
        loop.run(app.http_client.aclose())
    if app.redis_manager is not None:
        loop.run(app.redis_manager.close())

    loop.stop()
    logger.info("Application shut down")
