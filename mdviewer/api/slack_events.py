"""
Slack Routes

Events API and interactivity endpoints plus the OAuth install flow.
Events are acknowledged immediately and processed in the background, which
keeps responses inside Slack's three-second window.
"""

import json
import logging
from urllib.parse import urlencode

from flask import Blueprint, current_app, jsonify, redirect, render_template, request

from mdviewer.api.helpers import resolve, run_async, submit_async
from mdviewer.api.slack_signature import (
    make_oauth_state,
    verify_oauth_state,
    verify_slack_signature,
)
from mdviewer.application.ingestion_service import IngestionService, acknowledge_interaction
from mdviewer.application.installation_service import InstallationService
from mdviewer.domain.errors import DomainError, StorageError
from mdviewer.domain.events import FileSharedEvent

logger = logging.getLogger(__name__)

slack_bp = Blueprint("slack", __name__, url_prefix="/slack")

AUTHORIZE_URL = "https://slack.com/oauth/v2/authorize"


def _verified() -> bool:
    """Check the request signature; allow everything when no secret is set."""
    secret = current_app.settings.slack.signing_secret
    if not secret:
        return True
    return verify_slack_signature(
        secret,
        request.headers.get("X-Slack-Request-Timestamp"),
        request.get_data(cache=True),
        request.headers.get("X-Slack-Signature"),
    )


def _redirect_uri() -> str:
    return f"{current_app.settings.server.base_url}/slack/oauth_redirect"


@slack_bp.route("/events", methods=["POST"])
def events():
    """Events API endpoint."""
    if not _verified():
        logger.warning("Rejected Slack event with an invalid signature")
        return jsonify({"error": "invalid_signature"}), 401

    envelope = request.get_json(silent=True) or {}
    envelope_type = envelope.get("type")

    if envelope_type == "url_verification":
        return jsonify({"challenge": envelope.get("challenge")}), 200

    if envelope_type == "event_callback":
        _dispatch_event(envelope)

    return "", 200


def _dispatch_event(envelope: dict) -> None:
    event = envelope.get("event") or {}
    event_type = event.get("type")
    team_id = envelope.get("team_id")

    if event_type == "file_shared":
        try:
            shared = FileSharedEvent.from_event_callback(envelope)
        except ValueError as e:
            logger.warning(f"Ignoring malformed file_shared event: {e}")
            return
        submit_async(resolve(IngestionService).handle_file_shared(shared))

    elif event_type == "app_uninstalled" or (
        event_type == "tokens_revoked" and (event.get("tokens") or {}).get("bot")
    ):
        if team_id:
            logger.info(f"Received {event_type} for team {team_id}")
            submit_async(resolve(InstallationService).revoke(team_id))

    else:
        logger.debug(f"Ignoring event type {event_type}")


@slack_bp.route("/interactions", methods=["POST"])
def interactions():
    """Interactivity endpoint: acknowledge and do nothing else."""
    if not _verified():
        return jsonify({"error": "invalid_signature"}), 401

    payload = None
    raw_payload = request.form.get("payload")
    if raw_payload:
        try:
            payload = json.loads(raw_payload)
        except ValueError:
            logger.debug("Interaction payload is not valid JSON")

    acknowledge_interaction(payload)
    return "", 200


@slack_bp.route("/install", methods=["GET"])
def install():
    """Redirect to Slack's OAuth authorize page."""
    slack = current_app.settings.slack
    if not slack.oauth_enabled:
        return render_template(
            "message.html",
            title="Install Unavailable",
            message="OAuth is not configured for this deployment.",
            action="Set SLACK_CLIENT_ID and SLACK_CLIENT_SECRET.",
        ), 404

    query = urlencode(
        {
            "client_id": slack.client_id,
            "scope": slack.scopes,
            "redirect_uri": _redirect_uri(),
            "state": make_oauth_state(slack.client_secret),
        }
    )
    return redirect(f"{AUTHORIZE_URL}?{query}")


@slack_bp.route("/oauth_redirect", methods=["GET"])
def oauth_redirect():
    """Complete the OAuth flow and store the workspace installation."""
    slack = current_app.settings.slack
    if not slack.oauth_enabled:
        return render_template(
            "message.html",
            title="Install Unavailable",
            message="OAuth is not configured for this deployment.",
            action="Set SLACK_CLIENT_ID and SLACK_CLIENT_SECRET.",
        ), 404

    if request.args.get("error"):
        return render_template(
            "message.html",
            title="Installation Cancelled",
            message=f"Slack returned: {request.args.get('error')}",
            action="Start the installation again if this was a mistake.",
        ), 400

    code = request.args.get("code")
    if not code or not verify_oauth_state(slack.client_secret, request.args.get("state")):
        return render_template(
            "message.html",
            title="Invalid Request",
            message="The installation link is invalid or has expired.",
            action="Start the installation again.",
        ), 400

    try:
        installation = run_async(
            resolve(InstallationService).complete_oauth(code, _redirect_uri())
        )
    except StorageError as e:
        logger.error(f"Could not save installation: {e}")
        return render_template(
            "message.html",
            title="Temporarily Unavailable",
            message="The installation could not be saved.",
            action="Please try again in a few moments.",
        ), 503
    except (DomainError, ValueError) as e:
        logger.error(f"OAuth completion failed: {e}")
        return render_template(
            "message.html",
            title="Installation Failed",
            message="Slack did not accept the installation request.",
            action="Start the installation again.",
        ), 502

    return render_template(
        "message.html",
        title="Installed",
        message=f"The app is now installed in {installation.tenant_name or installation.tenant_id}.",
        action="Share a .md or .html file in any channel the bot is in.",
    ), 200
