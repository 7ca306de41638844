"""
API Models for response validation and Swagger documentation
"""

from flask_restx import fields

from mdviewer.api.v1 import api

installation_response = api.model(
    "Installation",
    {
        "tenant_id": fields.String(description="Workspace (team) id", example="T0123ABCD"),
        "tenant_name": fields.String(description="Workspace name", allow_null=True),
        "bot_user_id": fields.String(description="Bot user id", allow_null=True),
        "bot_id": fields.String(description="Bot id", allow_null=True),
        "installed_at": fields.String(description="Installation time (ISO 8601)"),
    },
)

installation_list_response = api.model(
    "InstallationList",
    {
        "count": fields.Integer(description="Number of installations"),
        "installations": fields.List(fields.Nested(installation_response)),
    },
)

error_response = api.model(
    "ErrorResponse",
    {
        "error": fields.String(description="Error category", example="not_installed"),
        "title": fields.String(description="Short error title"),
        "message": fields.String(description="User-friendly message"),
        "action": fields.String(description="Suggested next step"),
    },
)
