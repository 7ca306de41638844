"""
API Namespaces - Organized endpoint groups
"""

import hmac
from functools import wraps

from flask import current_app, request
from flask_restx import Namespace, Resource

from mdviewer.api.helpers import resolve, run_async
from mdviewer.api.v1.models import (
    error_response,
    installation_list_response,
    installation_response,
)
from mdviewer.application.installation_service import InstallationService
from mdviewer.domain.errors import (
    ErrorCategory,
    InstallationNotFoundError,
    StorageError,
    create_error_response,
)


def require_api_key(func):
    """Reject requests without the configured X-API-Key."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        expected = current_app.settings.server.admin_api_key
        provided = request.headers.get("X-API-Key", "")
        if not expected or not hmac.compare_digest(expected, provided):
            return create_error_response(
                ErrorCategory.UNAUTHORIZED, "Missing or invalid API key", status_code=403
            )
        return func(*args, **kwargs)

    return wrapper


def _storage_unavailable(e: StorageError):
    current_app.logger.error(f"Installation registry unavailable: {e}")
    return create_error_response(
        ErrorCategory.STORAGE_UNAVAILABLE, str(e), status_code=503
    )


# =============================================================================
# Installation Namespace - Workspace credential management
# =============================================================================

installation_ns = Namespace("installations", description="Workspace installation operations")


@installation_ns.route("/")
class InstallationList(Resource):
    """Installed workspaces"""

    method_decorators = [require_api_key]

    @installation_ns.doc("list_installations")
    @installation_ns.response(200, "Success", installation_list_response)
    @installation_ns.response(403, "Forbidden", error_response)
    @installation_ns.response(503, "Storage Unavailable", error_response)
    def get(self):
        """
        List installed workspaces

        Bot tokens are never included in the response.
        """
        try:
            installations = run_async(resolve(InstallationService).list_installations())
        except StorageError as e:
            return _storage_unavailable(e)

        return {
            "count": len(installations),
            "installations": [i.to_public_dict() for i in installations],
        }, 200


@installation_ns.route("/<string:tenant_id>")
@installation_ns.param("tenant_id", "The workspace (team) identifier")
class Installation(Resource):
    """Single workspace installation"""

    method_decorators = [require_api_key]

    @installation_ns.doc("get_installation")
    @installation_ns.response(200, "Success", installation_response)
    @installation_ns.response(404, "Not Installed", error_response)
    @installation_ns.response(503, "Storage Unavailable", error_response)
    def get(self, tenant_id):
        """
        Get a workspace installation

        404 means the workspace has not installed the app; 503 means the
        registry could not be reached and the answer is unknown.
        """
        try:
            installation = run_async(resolve(InstallationService).find(tenant_id))
        except InstallationNotFoundError as e:
            return create_error_response(ErrorCategory.NOT_INSTALLED, str(e), status_code=404)
        except StorageError as e:
            return _storage_unavailable(e)

        return installation.to_public_dict(), 200

    @installation_ns.doc("revoke_installation")
    @installation_ns.response(204, "Installation revoked")
    @installation_ns.response(404, "Not Installed", error_response)
    @installation_ns.response(503, "Storage Unavailable", error_response)
    def delete(self, tenant_id):
        """
        Revoke a workspace installation

        Removes the stored bot token; events from the workspace fall back to
        the default token, if one is configured.
        """
        try:
            removed = run_async(resolve(InstallationService).revoke(tenant_id))
        except StorageError as e:
            return _storage_unavailable(e)

        if not removed:
            return create_error_response(
                ErrorCategory.NOT_INSTALLED, f"No installation for {tenant_id}", status_code=404
            )
        return "", 204
