"""Test configuration for pytest."""

import pytest

from bluechain.persistence.ledger import InMemoryLedger
from bluechain.registry import LEGACY_SCHEMA, SupplyRegistry
from tests.support import FlakyLedger


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "conformance: API contract conformance tests")


@pytest.fixture
def ledger():
    return FlakyLedger()


@pytest.fixture
def registry(ledger):
    """Initialized registry using the ownership-tracking schema."""
    registry = SupplyRegistry(ledger)
    registry.initialize()
    return registry


@pytest.fixture
def legacy_registry():
    """Initialized registry using the schema without ownership."""
    registry = SupplyRegistry(InMemoryLedger(), schema=LEGACY_SCHEMA)
    registry.initialize()
    return registry
