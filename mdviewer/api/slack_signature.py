"""
Slack Request Signatures

HMAC helpers for verifying inbound Slack requests and for the stateless
OAuth `state` parameter.
"""

import hashlib
import hmac
import secrets
import time
from typing import Optional

SIGNATURE_VERSION = "v0"
MAX_REQUEST_AGE_SECONDS = 60 * 5
MAX_STATE_AGE_SECONDS = 60 * 10


def compute_signature(signing_secret: str, timestamp: str, body: bytes) -> str:
    """Compute the v0 signature Slack sends in X-Slack-Signature."""
    base = f"{SIGNATURE_VERSION}:{timestamp}:".encode("utf-8") + body
    digest = hmac.new(signing_secret.encode("utf-8"), base, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_VERSION}={digest}"


def verify_slack_signature(
    signing_secret: str,
    timestamp: Optional[str],
    body: bytes,
    signature: Optional[str],
    now: Optional[float] = None,
) -> bool:
    """
    Verify an inbound request signature.

    Args:
        signing_secret: App signing secret
        timestamp: X-Slack-Request-Timestamp header
        body: Raw request body
        signature: X-Slack-Signature header
        now: Current epoch seconds (default: time.time())

    Returns:
        True if the signature matches and the request is fresh
    """
    if not timestamp or not signature:
        return False

    try:
        request_time = int(timestamp)
    except ValueError:
        return False

    now = time.time() if now is None else now
    if abs(now - request_time) > MAX_REQUEST_AGE_SECONDS:
        return False

    expected = compute_signature(signing_secret, timestamp, body)
    return hmac.compare_digest(expected, signature)


def make_oauth_state(secret: str, now: Optional[float] = None) -> str:
    """Create a signed, time-limited OAuth state value."""
    issued = str(int(time.time() if now is None else now))
    nonce = secrets.token_hex(8)
    payload = f"{issued}.{nonce}"
    digest = hmac.new(secret.encode("utf-8"), payload.encode("utf-8"), hashlib.sha256).hexdigest()
    return f"{payload}.{digest}"


def verify_oauth_state(secret: str, state: Optional[str], now: Optional[float] = None) -> bool:
    """Check a state value produced by make_oauth_state."""
    if not state or state.count(".") != 2:
        return False

    issued, nonce, digest = state.split(".")
    payload = f"{issued}.{nonce}"
    expected = hmac.new(secret.encode("utf-8"), payload.encode("utf-8"), hashlib.sha256).hexdigest()
    if not hmac.compare_digest(expected, digest):
        return False

    try:
        age = (time.time() if now is None else now) - int(issued)
    except ValueError:
        return False
    return 0 <= age <= MAX_STATE_AGE_SECONDS
