"""
Pytest configuration and shared fixtures for merkledb tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import asyncio
import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

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

make_leaf_value = _common.make_leaf_value

from merkledb.config.runtime import set_default_config
from merkledb.store import InMemoryStore, SQLiteStore


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def run():
    """Run a coroutine to completion on a fresh event loop."""
    return asyncio.run


@pytest.fixture
def store():
    """Provide an empty in-memory store."""
    return InMemoryStore()


@pytest.fixture
def sqlite_path(tmp_path):
    """Provide a path for a throwaway SQLite database."""
    return tmp_path / "trees.db"


@pytest.fixture
def sqlite_store(sqlite_path):
    """Provide an open SQLite store, closed after the test."""
    store = SQLiteStore(sqlite_path)
    yield store
    asyncio.run(store.close())


@pytest.fixture
def leaf_value():
    """Provide a default 64-byte leaf value."""
    return make_leaf_value(0xAB)


@pytest.fixture(autouse=True)
def _reset_default_config(monkeypatch):
    """Keep MERKLEDB_* variables and the cached default config out of tests."""
    import os
    for key in list(os.environ):
        if key.startswith("MERKLEDB_"):
            monkeypatch.delenv(key, raising=False)
    set_default_config(None)
    yield
    set_default_config(None)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
