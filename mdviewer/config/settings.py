"""
Application Settings

Reads process configuration from environment variables.
"""

import os
from datetime import timedelta
from typing import Mapping, Optional

DEFAULT_TTL_MS = 24 * 60 * 60 * 1000
DEFAULT_SWEEP_INTERVAL_SECONDS = 60 * 60


def _parse_int(value: Optional[str], default: int) -> int:
    try:
        return int(value) if value not in (None, "") else default
    except ValueError:
        return default


class StorageConfig:
    """Artifact TTL and local fallback settings."""

    def __init__(self, environ: Mapping[str, str]):
        self.ttl_ms = _parse_int(environ.get("STORAGE_TTL"), DEFAULT_TTL_MS)
        if self.ttl_ms <= 0:
            self.ttl_ms = DEFAULT_TTL_MS
        self.data_dir = environ.get("DATA_DIR", "./data")
        self.sweep_interval_seconds = max(
            1,
            _parse_int(environ.get("SWEEP_INTERVAL_SECONDS"), DEFAULT_SWEEP_INTERVAL_SECONDS),
        )

    @property
    def ttl(self) -> timedelta:
        return timedelta(milliseconds=self.ttl_ms)

    @property
    def ttl_seconds(self) -> int:
        """TTL in whole seconds for second-granularity expiry (floor, at least 1)."""
        return max(1, self.ttl_ms // 1000)


class SlackConfig:
    """Slack app credentials."""

    def __init__(self, environ: Mapping[str, str]):
        self.bot_token = environ.get("SLACK_BOT_TOKEN") or None
        self.signing_secret = environ.get("SLACK_SIGNING_SECRET") or None
        self.client_id = environ.get("SLACK_CLIENT_ID") or None
        self.client_secret = environ.get("SLACK_CLIENT_SECRET") or None
        self.api_base_url = environ.get("SLACK_API_URL", "https://slack.com/api")
        self.scopes = environ.get("SLACK_SCOPES", "files:read,chat:write")

    @property
    def oauth_enabled(self) -> bool:
        return bool(self.client_id and self.client_secret)


class ServerConfig:
    """HTTP server settings."""

    def __init__(self, environ: Mapping[str, str]):
        self.host = environ.get("HOST", "0.0.0.0")
        self.port = _parse_int(environ.get("PORT"), 3000)
        self.base_url = environ.get("BASE_URL", "http://localhost:3000").rstrip("/")
        self.debug = environ.get("FLASK_DEBUG", "false").lower() == "true"
        self.admin_api_key = environ.get("ADMIN_API_KEY") or None
        self.api_version = environ.get("API_VERSION", "v1")


class Settings:
    """
    Process-wide configuration.

    Args:
        environ: Mapping to read from (default: os.environ)
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        if environ is None:
            environ = os.environ

        self.storage = StorageConfig(environ)
        self.slack = SlackConfig(environ)
        self.server = ServerConfig(environ)
        self.redis_url = environ.get("REDIS_URL") or None
        self.redis_max_connections = _parse_int(
            environ.get("REDIS_MAX_CONNECTIONS"), 20
        )
        self.log_level = environ.get("LOG_LEVEL", "INFO").upper()

    @property
    def uses_redis(self) -> bool:
        return self.redis_url is not None
