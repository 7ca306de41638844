"""
Installation Service

Application service for the workspace installation lifecycle: completing
the OAuth flow, looking installations up, listing and revoking them.
"""

import logging
from typing import List, Optional

from mdviewer.domain.errors import DomainError, InstallationNotFoundError
from mdviewer.domain.installations.entities import Installation
from mdviewer.domain.installations.repositories import InstallationRepository
from mdviewer.infrastructure.slack_web_client import SlackWebClient

logger = logging.getLogger(__name__)


class InstallationService:
    """
    Manages per-workspace credentials.

    Lookups distinguish "not installed" (InstallationNotFoundError) from
    "storage unavailable" (BackendUnavailableError), so callers can tell a
    user to install the app versus to try again later.
    """

    def __init__(
        self,
        installation_repository: InstallationRepository,
        slack_client: Optional[SlackWebClient] = None,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
    ):
        self.installation_repository = installation_repository
        self.slack_client = slack_client
        self.client_id = client_id
        self.client_secret = client_secret

    @property
    def oauth_enabled(self) -> bool:
        return bool(self.slack_client and self.client_id and self.client_secret)

    async def complete_oauth(self, code: str, redirect_uri: Optional[str] = None) -> Installation:
        """
        Exchange an authorization code and store the resulting installation.

        Args:
            code: Authorization code from the OAuth redirect
            redirect_uri: Redirect URI used in the authorize step

        Returns:
            The saved Installation

        Raises:
            RuntimeError: If OAuth is not configured
            UpstreamFetchError: If the code exchange fails
            StorageError: If the record cannot be saved
        """
        if not self.oauth_enabled:
            raise RuntimeError("OAuth is not configured (SLACK_CLIENT_ID/SLACK_CLIENT_SECRET)")

        payload = await self.slack_client.exchange_oauth_code(
            code, self.client_id, self.client_secret, redirect_uri
        )

        bot_id = None
        try:
            identity = await self.slack_client.auth_test(payload.get("access_token", ""))
            bot_id = identity.get("bot_id")
        except DomainError as e:
            logger.warning(f"Could not look up bot id after install: {e}")

        installation = Installation.from_oauth_response(payload, bot_id=bot_id)
        await self.register(installation)
        return installation

    async def register(self, installation: Installation) -> None:
        """Save an installation, replacing any previous one for the workspace."""
        await self.installation_repository.save(installation)

    async def find(self, tenant_id: str) -> Installation:
        """
        Look up a workspace installation.

        Raises:
            InstallationNotFoundError: If the workspace is not installed
            BackendUnavailableError: If the registry cannot be reached
        """
        installation = await self.installation_repository.get(tenant_id)
        if installation is None:
            raise InstallationNotFoundError(tenant_id)
        return installation

    async def list_installations(self) -> List[Installation]:
        return await self.installation_repository.list_all()

    async def revoke(self, tenant_id: str) -> bool:
        """
        Remove a workspace installation.

        Returns:
            True if an installation was removed
        """
        removed = await self.installation_repository.delete(tenant_id)
        if removed:
            logger.info(f"Revoked installation for team {tenant_id}")
        return removed

    async def count(self) -> int:
        return await self.installation_repository.count()
