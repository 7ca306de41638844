"""
Installations Domain

Durable per-workspace bot credentials.
"""

from .entities import Installation
from .repositories import InstallationRepository

__all__ = [
    'Installation',
    'InstallationRepository',
]
