"""
Token Resolution Policy

Decides which bot token to use for an inbound event. First match wins:

1. A token already attached to the event's delivery context
2. The installation record for the event's workspace
3. The process-wide default token (single-workspace deployments)

If none of them yields a token, resolution fails instead of returning an
empty credential.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..errors import CredentialUnresolvedError
from ..installations.repositories import InstallationRepository

logger = logging.getLogger(__name__)


class TokenSource(Enum):
    """Where a resolved token came from."""

    CONTEXT = "context"
    REGISTRY = "registry"
    DEFAULT = "default"


@dataclass(frozen=True)
class ResolvedToken:
    """A bot token together with the rule that produced it."""

    token: str
    source: TokenSource

    def __repr__(self) -> str:
        return f"ResolvedToken(source={self.source.value}, token=***)"


async def resolve_bot_token(
    context_token: Optional[str],
    tenant_id: Optional[str],
    registry: InstallationRepository,
    default_token: Optional[str] = None,
) -> ResolvedToken:
    """
    Resolve the bot token for one event.

    Args:
        context_token: Token attached by the event transport, if any
        tenant_id: Workspace identifier from the event, if any
        registry: Installation registry to consult
        default_token: Process-wide fallback token, if configured

    Returns:
        ResolvedToken with the winning token and its source

    Raises:
        CredentialUnresolvedError: If no rule yields a token
        BackendUnavailableError: If the registry cannot be reached
    """
    if context_token:
        return ResolvedToken(context_token, TokenSource.CONTEXT)

    if tenant_id:
        installation = await registry.get(tenant_id)
        if installation is not None and installation.bot_token:
            return ResolvedToken(installation.bot_token, TokenSource.REGISTRY)
        logger.debug(f"No installation token for workspace {tenant_id}")

    if default_token:
        return ResolvedToken(default_token, TokenSource.DEFAULT)

    raise CredentialUnresolvedError(
        f"No bot token available for workspace {tenant_id or '<unknown>'}"
    )


class TokenResolver:
    """Binds the policy to a registry and the configured default token."""

    def __init__(
        self, registry: InstallationRepository, default_token: Optional[str] = None
    ):
        self.registry = registry
        self.default_token = default_token

    async def resolve(
        self, context_token: Optional[str], tenant_id: Optional[str]
    ) -> ResolvedToken:
        return await resolve_bot_token(
            context_token, tenant_id, self.registry, self.default_token
        )
