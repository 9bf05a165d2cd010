"""
Pytest configuration and shared fixtures for whitelist-merkle tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_common = importlib.import_module("fixtures.common")

make_addresses = _common.make_addresses
make_leaf_values = _common.make_leaf_values
write_whitelist = _common.write_whitelist


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def addresses():
    """Five distinct lowercase addresses."""
    return make_addresses(5)


@pytest.fixture
def leaf_values(addresses):
    """(address, 0) leaves for the default addresses."""
    return make_leaf_values(addresses)


@pytest.fixture
def whitelist_file(tmp_path, addresses):
    """A whitelist.txt in a temporary directory."""
    return write_whitelist(tmp_path / "whitelist.txt", addresses)


@pytest.fixture
def isolated_cwd(tmp_path, monkeypatch):
    """Run with a clean working directory and no WHITELIST_MERKLE_* variables."""
    import os

    for key in list(os.environ):
        if key.startswith("WHITELIST_MERKLE_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
