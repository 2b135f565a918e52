"""
Indexed Merkle Tree
Fixed-depth, content-addressed binary Merkle tree persisted in a key-value store.

This module provides:
- Default-tree bootstrap (every leaf is the 64-byte zero value)
- Hash path retrieval for any leaf index
- Indexed leaf updates returning the new root
- Persisted (root, depth) metadata keyed by tree name

Storage Rules (Hard Contracts):
1. Node record: key = C(left, right), value = left || right (64 bytes)
2. Metadata record: key = tree name (UTF-8), value = TreeMetadata.to_bytes()
3. Leaf values are never stored; the leaf digest L(value) lives in its
   parent's record
4. Records are never deleted; every historical root stays readable

Index Bits:
    Level 0 (root) reads the most significant of the depth index bits,
    the leaf-adjacent level reads the least significant one.

    is_right(index, current_depth) = (index >> (depth - current_depth - 1)) & 1

Concurrency Notes:
- A MerkleTree is single-writer. Use GuardedMerkleTree to serialize updates.
- New node records and the new metadata are committed in one batch, and the
  in-memory root is only replaced after that batch is written.
"""
from __future__ import annotations

import logging
from typing import Optional, Sequence

from merkledb.crypto.hashing import (
    DIGEST_BYTES,
    LEAF_BYTES,
    NODE_BYTES,
    ZERO_LEAF_HASH,
    compress,
    hash_leaf,
    to_hex,
)
from merkledb.schemas.errors import (
    IndexOutOfRangeException,
    InvalidDepthException,
    InvalidLeafValueException,
    NodeNotFoundException,
)
from merkledb.schemas.metadata import MAX_DEPTH, TreeMetadata
from merkledb.store.base import KeyNotFoundError, KeyValueStore

from .hash_path import HashPath


logger = logging.getLogger(__name__)

DEFAULT_DEPTH = MAX_DEPTH


def validate_depth(depth: int) -> int:
    """
    Check that depth is an integer in [1, MAX_DEPTH].

    Raises:
        InvalidDepthException: Otherwise
    """
    if isinstance(depth, bool) or not isinstance(depth, int) or not 1 <= depth <= MAX_DEPTH:
        raise InvalidDepthException(
            f"Tree depth must be an integer in [1, {MAX_DEPTH}], got {depth!r}",
            depth=depth,
        )
    return depth


def is_right(index: int, current_depth: int, depth: int) -> bool:
    """Whether the path to index takes the right child below current_depth."""
    return ((index >> (depth - current_depth - 1)) & 1) != 0


def default_tree_records(depth: int) -> tuple[bytes, list[tuple[bytes, bytes]]]:
    """
    Compute the root and node records of a tree whose leaves are all zero.

    Two identical children determine their parent, so one record per level
    describes all 2**depth leaves.

    Returns:
        (root, records) with records ordered from the leaf level upward
    """
    node = ZERO_LEAF_HASH
    records: list[tuple[bytes, bytes]] = []
    for _ in range(depth):
        parent = compress(node, node)
        records.append((parent, node + node))
        node = parent
    return node, records


def default_root(depth: int) -> bytes:
    """Root of the all-zero tree of the given depth."""
    root, _ = default_tree_records(validate_depth(depth))
    return root


def stage_path_update(
    chain: Sequence[tuple[bytes, bytes]],
    index: int,
    leaf_hash: bytes,
    depth: int,
) -> tuple[bytes, list[tuple[bytes, bytes]]]:
    """
    Recompute the path from a new leaf digest up to the root.

    Pure function: no store access. The caller writes the returned records.

    Args:
        chain: chain[d] = (left, right) children of the node at depth d on
               the current path, root first (as returned by collect_path)
        index: Leaf index being replaced
        leaf_hash: New leaf digest, L(value)
        depth: Tree depth (len(chain))

    Returns:
        (new_root, records) with records ordered from the leaf level upward
    """
    if len(chain) != depth:
        raise ValueError(f"Path chain has {len(chain)} levels, expected {depth}")

    node = leaf_hash
    records: list[tuple[bytes, bytes]] = []
    for current_depth in range(depth - 1, -1, -1):
        left, right = chain[current_depth]
        if is_right(index, current_depth, depth):
            right = node
        else:
            left = node
        node = compress(left, right)
        records.append((node, left + right))
    return node, records


class MerkleTree:
    """
    A persisted, fixed-depth Merkle tree with indexed updates.

    Use the async MerkleTree.new() to open or create a named tree. The
    constructor only sets state: without a root it computes the default
    root but writes nothing.

    Example:
        >>> store = InMemoryStore()
        >>> tree = await MerkleTree.new(store, "accounts", depth=20)
        >>> root = await tree.update_element(5, bytes(64))
        >>> path = await tree.get_hash_path(5)
    """

    def __init__(
        self,
        store: KeyValueStore,
        name: str,
        depth: int = DEFAULT_DEPTH,
        root: Optional[bytes] = None,
    ) -> None:
        self.store = store
        self.name = name
        self.depth = validate_depth(depth)

        if root is None:
            self._root = default_root(self.depth)
        else:
            if len(root) != DIGEST_BYTES:
                raise ValueError(f"Root must be {DIGEST_BYTES} bytes, got {len(root)}")
            self._root = bytes(root)

    @classmethod
    async def new(
        cls,
        store: KeyValueStore,
        name: str,
        depth: Optional[int] = None,
    ) -> "MerkleTree":
        """
        Restore the tree called name, or create it if the store has none.

        Args:
            store: Backing key-value store
            name: Tree name, used as the metadata key
            depth: Depth for a new tree (default 32). Ignored when a tree
                   with this name already exists.

        Raises:
            InvalidDepthException: If depth is given and outside [1, 32];
                raised before the store is touched
            CorruptMetadataException: If the stored metadata is malformed
        """
        if depth is not None:
            validate_depth(depth)

        key = cls._metadata_key(name)
        try:
            raw = await store.get(key)
        except KeyNotFoundError:
            raw = None

        if raw is not None:
            meta = TreeMetadata.from_bytes(raw, name=name)
            if depth is not None and depth != meta.depth:
                logger.warning(
                    f"Tree '{name}' exists with depth {meta.depth}, "
                    f"ignoring requested depth {depth}"
                )
            logger.info(f"Restored tree '{name}' depth={meta.depth} root={to_hex(meta.root)}")
            return cls(store, name, meta.depth, meta.root)

        tree = cls(store, name, depth if depth is not None else DEFAULT_DEPTH)
        await tree._write_bootstrap()
        logger.info(f"Created tree '{name}' depth={tree.depth} root={to_hex(tree.root)}")
        return tree

    @staticmethod
    def _metadata_key(name: str) -> bytes:
        return name.encode("utf-8")

    async def _write_bootstrap(self) -> None:
        """Write the default-tree records and metadata in one batch."""
        root, records = default_tree_records(self.depth)
        batch = self.store.batch()
        for key, payload in records:
            batch.put(key, payload)
        batch.put(self._metadata_key(self.name), TreeMetadata(root, self.depth).to_bytes())
        await batch.write()

    @property
    def root(self) -> bytes:
        return self._root

    def get_root(self) -> bytes:
        return self._root

    def get_metadata(self) -> TreeMetadata:
        return TreeMetadata(root=self._root, depth=self.depth)

    @property
    def size(self) -> int:
        """Number of leaf slots, 2**depth."""
        return 1 << self.depth

    def is_right(self, index: int, current_depth: int) -> bool:
        return is_right(index, current_depth, self.depth)

    def _check_index(self, index: int) -> None:
        if isinstance(index, bool) or not isinstance(index, int):
            raise IndexOutOfRangeException(
                f"Leaf index must be an integer, got {type(index).__name__}",
                depth=self.depth,
            )
        if not 0 <= index < self.size:
            raise IndexOutOfRangeException(
                f"Leaf index {index} out of range for tree of depth {self.depth}",
                index=index,
                depth=self.depth,
            )

    async def _get_node(self, digest: bytes, level: int) -> tuple[bytes, bytes]:
        """Fetch and split the node record stored under digest."""
        try:
            payload = await self.store.get(digest)
        except KeyNotFoundError as e:
            raise NodeNotFoundException(
                f"No node record for {to_hex(digest)} at depth {level}",
                digest=digest,
                level=level,
            ) from e

        if len(payload) != NODE_BYTES:
            raise NodeNotFoundException(
                f"Node record for {to_hex(digest)} is {len(payload)} bytes, "
                f"expected {NODE_BYTES}",
                digest=digest,
                level=level,
                details={"size": len(payload)},
            )
        left, right = payload[:DIGEST_BYTES], payload[DIGEST_BYTES:]
        if compress(left, right) != digest:
            raise NodeNotFoundException(
                f"Node record for {to_hex(digest)} does not hash to its key",
                digest=digest,
                level=level,
            )
        return left, right

    async def collect_path(
        self,
        index: int,
        root: Optional[bytes] = None,
    ) -> list[tuple[bytes, bytes]]:
        """
        Descend from root to the leaf at index, collecting every node's children.

        Returns:
            chain with chain[d] = (left, right) of the node at depth d, root first

        Raises:
            IndexOutOfRangeException: If index is outside [0, 2**depth)
            NodeNotFoundException: If a node on the path has no record
        """
        self._check_index(index)
        cursor = self._root if root is None else bytes(root)
        chain: list[tuple[bytes, bytes]] = []
        for current_depth in range(self.depth):
            left, right = await self._get_node(cursor, current_depth)
            chain.append((left, right))
            cursor = right if self.is_right(index, current_depth) else left
        return chain

    async def get_hash_path(self, index: int, root: Optional[bytes] = None) -> HashPath:
        """
        Return the hash path for index.

        Args:
            index: Leaf index in [0, 2**depth)
            root: Historical root to read from (default: current root)

        Returns:
            HashPath with the leaf-adjacent pair at level 0

        Raises:
            IndexOutOfRangeException: If index is outside [0, 2**depth)
            NodeNotFoundException: If a node on the path has no record
        """
        chain = await self.collect_path(index, root)
        logger.debug(
            f"Hash path for '{self.name}' index={index} "
            f"root={to_hex(self._root if root is None else root)}"
        )
        return HashPath(tuple(reversed(chain)))

    async def get_leaf_hash(self, index: int, root: Optional[bytes] = None) -> bytes:
        """Digest currently stored for the leaf at index."""
        path = await self.get_hash_path(index, root)
        left, right = path[0]
        return right if index & 1 else left

    async def update_element(self, index: int, value: bytes) -> bytes:
        """
        Set the leaf at index to value and return the new root.

        Descends once to collect the current path, recomputes the path from
        L(value) upward, then commits the new node records together with the
        new metadata. The in-memory root is replaced only after the commit,
        so a failed or cancelled write leaves the tree unchanged.

        Raises:
            IndexOutOfRangeException: If index is outside [0, 2**depth)
            InvalidLeafValueException: If value is not LEAF_BYTES long
            NodeNotFoundException: If a node on the path has no record
        """
        self._check_index(index)
        if not isinstance(value, (bytes, bytearray, memoryview)) or len(value) != LEAF_BYTES:
            size = len(value) if isinstance(value, (bytes, bytearray, memoryview)) else None
            raise InvalidLeafValueException(
                f"Leaf value must be {LEAF_BYTES} bytes",
                size=size,
            )

        old_root = self._root
        chain = await self.collect_path(index, old_root)
        new_root, records = stage_path_update(chain, index, hash_leaf(value), self.depth)

        batch = self.store.batch()
        for key, payload in records:
            batch.put(key, payload)
        batch.put(self._metadata_key(self.name), TreeMetadata(new_root, self.depth).to_bytes())
        await batch.write()

        self._root = new_root
        logger.debug(
            f"Updated '{self.name}' index={index}: {to_hex(old_root)} -> {to_hex(new_root)}"
        )
        return new_root

    def __repr__(self) -> str:
        return f"MerkleTree(name={self.name!r}, depth={self.depth}, root={to_hex(self._root)})"


__all__ = [
    "DEFAULT_DEPTH",
    "MerkleTree",
    "validate_depth",
    "is_right",
    "default_tree_records",
    "default_root",
    "stage_path_update",
]
