"""
Key-value store backends for the Merkle tree engine.

Provides:
- KeyValueStore / WriteBatch: the async store contract
- InMemoryStore: dict-backed, for tests and ephemeral trees
- SQLiteStore: persistent single-file store
- create_store: build a backend from a StoreConfig
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .base import (
    KeyValueStore,
    WriteBatch,
    StoreError,
    KeyNotFoundError,
    StoreClosedError,
)
from .memory import InMemoryStore
from .sqlite import SQLiteStore

if TYPE_CHECKING:
    from merkledb.config.runtime import StoreConfig


STORE_BACKENDS = {
    "memory": InMemoryStore,
    "sqlite": SQLiteStore,
}


def create_store(config: "StoreConfig") -> KeyValueStore:
    """
    Create a store backend from configuration.

    Raises:
        ValueError: If the backend is unknown or a sqlite path is missing
    """
    backend = config.backend.lower()
    if backend not in STORE_BACKENDS:
        raise ValueError(
            f"Unknown store backend '{config.backend}'. "
            f"Available: {sorted(STORE_BACKENDS)}"
        )
    if backend == "sqlite":
        if not config.path:
            raise ValueError("sqlite store backend requires a path")
        return SQLiteStore(config.path)
    return InMemoryStore()


__all__ = [
    "KeyValueStore",
    "WriteBatch",
    "StoreError",
    "KeyNotFoundError",
    "StoreClosedError",
    "InMemoryStore",
    "SQLiteStore",
    "STORE_BACKENDS",
    "create_store",
]
