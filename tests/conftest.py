"""
Shared test fixtures for the Spinel test suite.
"""

import os

import pytest

from spinel.registry import set_default_registry

# Import fixtures so pytest can discover them
from spinel.testing import (  # noqa: F401
    spi_registry,
    default_spi_registry,
)


@pytest.fixture(autouse=True)
def _reset_default_registry():
    """Every test starts without a process-wide registry."""
    previous = set_default_registry(None)
    yield
    set_default_registry(previous)


@pytest.fixture(autouse=True)
def _clean_spinel_env(monkeypatch):
    """Keep SPINEL_* variables from the host out of config tests."""
    for key in list(os.environ):
        if key.startswith("SPINEL_"):
            monkeypatch.delenv(key, raising=False)
