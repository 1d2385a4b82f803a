"""Shared fixtures for storechain tests."""

import pytest

from sample_chain import counter, seen
from storechain.config import clear_config_instance


@pytest.fixture
def reducer():
    """Counter reducer."""
    return counter


@pytest.fixture
def log() -> list[str]:
    """Shared dispatch log."""
    return []


@pytest.fixture(autouse=True)
def cleanup():
    """Clean up global config and sample middleware state between tests."""
    yield
    clear_config_instance()
    seen.clear()
