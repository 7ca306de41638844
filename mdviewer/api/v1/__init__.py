"""
API v1 - Admin REST API

Versioned admin endpoints with OpenAPI/Swagger documentation.
"""

from flask import Blueprint
from flask_restx import Api

# app_factory mounts the blueprint at /api/<API_VERSION>
api_v1_bp = Blueprint("api_v1", __name__, url_prefix="/api/v1")

api = Api(
    api_v1_bp,
    version="1.0",
    title="Markdown Viewer Admin API",
    description="Workspace installation management for the Slack markdown viewer",
    doc="/docs",
    authorizations={
        "apikey": {"type": "apiKey", "in": "header", "name": "X-API-Key"},
    },
    security="apikey",
)

# Import namespaces after api is created to avoid circular imports
from .namespaces import installation_ns  # noqa: E402

api.add_namespace(installation_ns, path="/installations")
