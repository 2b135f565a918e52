"""
Guarded Merkle Tree
Task-safe handle around a MerkleTree.

A MerkleTree update reads the root, walks the store, writes a batch and
then replaces the root. Two overlapping updates on one instance would both
start from the same root and the later assignment would drop the other's
leaf. GuardedMerkleTree runs every update under an asyncio.Lock so each
one starts from the root left by the previous one.

Reads are not locked: they take the root once and walk records that are
never rewritten.

Usage:
    tree = await GuardedMerkleTree.open_or_create(store, "accounts", depth=20)
    root = await tree.update(3, value)
    path = await tree.hash_path(3)
    assert path.verify(tree.root(), value, 3)
"""
from __future__ import annotations

import asyncio
import logging
from typing import Iterable, Optional

from merkledb.config.logs import setup_logging_from_config
from merkledb.config.runtime import RuntimeConfig, get_default_config
from merkledb.store import KeyValueStore, create_store

from .hash_path import HashPath
from .merkle_tree import MerkleTree


logger = logging.getLogger(__name__)


class GuardedMerkleTree:
    """Single-writer handle serializing updates to one MerkleTree."""

    def __init__(self, tree: MerkleTree, *, owns_store: bool = False) -> None:
        self._tree = tree
        self._lock = asyncio.Lock()
        self._owns_store = owns_store

    @classmethod
    async def open_or_create(
        cls,
        store: KeyValueStore,
        name: str,
        depth: Optional[int] = None,
    ) -> "GuardedMerkleTree":
        """Open the named tree in store, creating it at depth if absent."""
        tree = await MerkleTree.new(store, name, depth)
        return cls(tree)

    @property
    def tree(self) -> MerkleTree:
        return self._tree

    @property
    def name(self) -> str:
        return self._tree.name

    @property
    def depth(self) -> int:
        return self._tree.depth

    def root(self) -> bytes:
        return self._tree.get_root()

    async def hash_path(self, index: int, root: Optional[bytes] = None) -> HashPath:
        return await self._tree.get_hash_path(index, root)

    async def leaf_hash(self, index: int) -> bytes:
        return await self._tree.get_leaf_hash(index)

    async def update(self, index: int, value: bytes) -> bytes:
        """Set the leaf at index and return the new root."""
        async with self._lock:
            return await self._tree.update_element(index, value)

    async def update_many(self, items: Iterable[tuple[int, bytes]]) -> bytes:
        """
        Apply (index, value) updates in order under one lock acquisition.

        Each update is committed on its own; if one fails, earlier ones stay
        applied and the error propagates.

        Returns:
            Root after the last update (the current root if items is empty)
        """
        async with self._lock:
            for index, value in items:
                await self._tree.update_element(index, value)
            return self._tree.get_root()

    async def close(self) -> None:
        """Close the backing store if this handle opened it."""
        if self._owns_store:
            await self._tree.store.close()

    async def __aenter__(self) -> "GuardedMerkleTree":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"GuardedMerkleTree({self._tree!r})"


async def open_tree(
    config: Optional[RuntimeConfig] = None,
    *,
    configure_logging: bool = False,
) -> GuardedMerkleTree:
    """
    Open the store and tree described by a runtime configuration.

    The returned handle owns the store; close it (or use it as an async
    context manager) when done.

    Args:
        config: Runtime configuration (default: get_default_config())
        configure_logging: Install log handlers from config.logging
    """
    config = config or get_default_config()
    if configure_logging:
        setup_logging_from_config(config.logging)

    store = create_store(config.store)
    logger.info(
        f"Opening tree '{config.tree.name}' on {config.store.backend} store"
    )
    try:
        tree = await MerkleTree.new(store, config.tree.name, config.tree.depth)
    except BaseException:
        await store.close()
        raise
    return GuardedMerkleTree(tree, owns_store=True)


__all__ = [
    "GuardedMerkleTree",
    "open_tree",
]
