"""
Dependency Injection Container

Holds the explicitly constructed service instances for one application.
"""

import logging
import threading
from typing import Any, Dict, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')


class DependencyNotFoundError(Exception):
    """Raised when attempting to resolve an unregistered dependency."""
    pass


class DependencyContainer:
    """
    Registry of singleton services keyed by type.

    Thread-safe: Flask request threads resolve while the app is running.
    """

    def __init__(self):
        self._singletons: Dict[Type, Any] = {}
        self._lock = threading.Lock()

    def register_singleton(self, interface: Type[T], implementation: T) -> None:
        """
        Register a singleton service.

        Args:
            interface: The interface or class type to register
            implementation: The concrete instance to use
        """
        with self._lock:
            self._singletons[interface] = implementation
            logger.debug(f"Registered singleton: {interface.__name__}")

    def resolve(self, interface: Type[T]) -> T:
        """
        Resolve a registered service.

        Raises:
            DependencyNotFoundError: If nothing is registered for the type
        """
        with self._lock:
            if interface in self._singletons:
                return self._singletons[interface]
        raise DependencyNotFoundError(f"No registration for {interface.__name__}")
