"""
Shared helpers for request handlers.
"""

from typing import Any, Coroutine, Type, TypeVar

from flask import current_app

T = TypeVar("T")


def resolve(interface: Type[T]) -> T:
    """Resolve a service from the application's dependency container."""
    return current_app.container.resolve(interface)


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Run a coroutine on the application's event loop and wait for it."""
    return current_app.event_loop.run(coro)


def submit_async(coro: Coroutine[Any, Any, Any]) -> None:
    """Schedule a coroutine on the application's event loop without waiting."""
    current_app.event_loop.submit(coro)
