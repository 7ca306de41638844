"""
Installation Entities

Per-workspace credential records.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# camelCase field names written by earlier deployments of the viewer
LEGACY_FIELD_NAMES = {
    "teamId": "tenant_id",
    "teamName": "tenant_name",
    "botToken": "bot_token",
    "botUserId": "bot_user_id",
    "botId": "bot_id",
    "installedAt": "installed_at",
}


@dataclass(frozen=True)
class Installation:
    """
    Entity representing one workspace installation.

    At most one record exists per tenant_id; a re-installation replaces the
    previous record wholesale.
    """

    tenant_id: str
    tenant_name: Optional[str]
    bot_token: str
    bot_user_id: Optional[str] = None
    bot_id: Optional[str] = None
    installed_at: datetime = field(default_factory=_utcnow)

    @classmethod
    def from_oauth_response(
        cls, payload: Dict[str, Any], bot_id: Optional[str] = None
    ) -> "Installation":
        """
        Build a record from an oauth.v2.access response.

        Args:
            payload: Decoded JSON body of the OAuth token exchange
            bot_id: Bot id, when known from a separate identity lookup

        Returns:
            New Installation stamped with the current time

        Raises:
            ValueError: If the payload has no team id or no access token
        """
        team = payload.get("team") or {}
        tenant_id = team.get("id")
        bot_token = payload.get("access_token")

        if not tenant_id or not bot_token:
            raise ValueError("OAuth response is missing team.id or access_token")

        return cls(
            tenant_id=tenant_id,
            tenant_name=team.get("name"),
            bot_token=bot_token,
            bot_user_id=payload.get("bot_user_id"),
            bot_id=bot_id or payload.get("bot_id"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization (includes the token)."""
        data = asdict(self)
        data["installed_at"] = self.installed_at.isoformat()
        return data

    def to_public_dict(self) -> Dict[str, Any]:
        """Convert to dictionary without the secret token."""
        data = self.to_dict()
        data.pop("bot_token", None)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Installation":
        """Create an Installation from its serialized form (snake_case or legacy camelCase)."""
        data = {LEGACY_FIELD_NAMES.get(k, k): v for k, v in data.items()}
        installed_at = data.get("installed_at")
        if isinstance(installed_at, (int, float)):
            # epoch milliseconds
            installed_at = datetime.fromtimestamp(installed_at / 1000, tz=timezone.utc)
        elif installed_at:
            installed_at = datetime.fromisoformat(installed_at)
            if installed_at.tzinfo is None:
                installed_at = installed_at.replace(tzinfo=timezone.utc)
        else:
            installed_at = _utcnow()

        return cls(
            tenant_id=data["tenant_id"],
            tenant_name=data.get("tenant_name"),
            bot_token=data["bot_token"],
            bot_user_id=data.get("bot_user_id"),
            bot_id=data.get("bot_id"),
            installed_at=installed_at,
        )
