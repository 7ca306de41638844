"""
Credentials Domain

Bot token resolution for multi-workspace deployments.
"""

from .token_policy import ResolvedToken, TokenResolver, TokenSource, resolve_bot_token

__all__ = [
    'ResolvedToken',
    'TokenResolver',
    'TokenSource',
    'resolve_bot_token',
]
