import pytest

import quantal
from quantal.core import catalog


@pytest.fixture
def units():
    """A new registry of predefined units for each test."""
    return catalog.registry()


@pytest.fixture(autouse=True)
def restore_settings():
    """Undo run-time overrides of package settings after each test."""
    yield
    quantal.settings()
