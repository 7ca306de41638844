"""
Viewer Routes

Serves stored artifacts as web pages. Anyone holding an artifact id can view
it; an unknown, expired or unreachable artifact always renders the same
generic "expired or missing" page.
"""

import logging

from flask import Blueprint, current_app, render_template
from pygments.formatters import HtmlFormatter

from mdviewer.api.helpers import resolve, run_async
from mdviewer.domain.artifacts.repositories import ArtifactRepository
from mdviewer.domain.artifacts.value_objects import DocumentType, is_valid_artifact_id
from mdviewer.domain.errors import ERROR_MESSAGES, ErrorCategory, StorageError

logger = logging.getLogger(__name__)

viewer_bp = Blueprint("viewer", __name__)

# matches the css_class the markdown converter gives code blocks
PYGMENTS_CSS = HtmlFormatter(style="default").get_style_defs(".highlight")


def _not_found_page(status_code: int = 404):
    return (
        render_template("message.html", **ERROR_MESSAGES[ErrorCategory.NOT_FOUND]),
        status_code,
    )


@viewer_bp.route("/", methods=["GET"])
def index():
    """Landing page."""
    return render_template(
        "index.html", oauth_enabled=current_app.settings.slack.oauth_enabled
    )


@viewer_bp.route("/view/<string:artifact_id>", methods=["GET"])
def view(artifact_id: str):
    """Render one artifact, or the generic not-found page."""
    if not is_valid_artifact_id(artifact_id):
        return _not_found_page()

    try:
        artifact = run_async(resolve(ArtifactRepository).get(artifact_id))
    except StorageError as e:
        logger.error(f"Artifact store unavailable while serving {artifact_id}: {e}")
        return _not_found_page(503)

    if artifact is None:
        return _not_found_page()

    if artifact.file_type is DocumentType.HTML:
        # uploaded pages run in an opaque origin, away from this app's routes
        return artifact.html, 200, {
            "Content-Type": "text/html; charset=utf-8",
            "Content-Security-Policy": "sandbox allow-scripts allow-popups",
        }

    return render_template(
        "viewer.html",
        title=artifact.title,
        html=artifact.html,
        file_name=artifact.file_name,
        pygments_css=PYGMENTS_CSS,
    )
