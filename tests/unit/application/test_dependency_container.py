"""
Unit tests for DependencyContainer
"""

import pytest

from mdviewer.application.dependency_container import (
    DependencyContainer,
    DependencyNotFoundError,
)


class DummyInterface:
    pass


class DummyImplementation(DummyInterface):
    pass


def test_register_and_resolve():
    container = DependencyContainer()
    implementation = DummyImplementation()

    container.register_singleton(DummyInterface, implementation)

    assert container.resolve(DummyInterface) is implementation


def test_unregistered_type():
    container = DependencyContainer()

    with pytest.raises(DependencyNotFoundError):
        container.resolve(DummyInterface)


def test_registration_replaces_previous():
    container = DependencyContainer()
    container.register_singleton(DummyInterface, DummyImplementation())
    replacement = DummyImplementation()

    container.register_singleton(DummyInterface, replacement)

    assert container.resolve(DummyInterface) is replacement
