"""
Indexed Merkle Tree and Hash Paths
Fixed-depth, content-addressed Merkle tree persisted in a key-value store.

This module provides:
- HashPath: Sibling-pair inclusion path for one leaf
- MerkleTree: Tree engine (bootstrap/restore, hash paths, indexed updates)
- GuardedMerkleTree: Task-safe handle serializing updates
- open_tree: Open a tree from a RuntimeConfig

Canonical Commitment Rules:
1. Leaf hashing: L(leaf) = sha256(leaf), leaf is 64 bytes
2. Parent hashing: C(left, right) = sha256(left + right)
3. Default leaf: 64 zero bytes
4. Node records are keyed by their own digest

Usage:
    from merkledb.merkle import GuardedMerkleTree
    from merkledb.store import InMemoryStore

    tree = await GuardedMerkleTree.open_or_create(InMemoryStore(), "t", depth=4)
    root = await tree.update(3, value)
    path = await tree.hash_path(3)
    assert path.verify(root, value, 3)
"""
from .hash_path import HashPath
from .merkle_tree import (
    DEFAULT_DEPTH,
    MerkleTree,
    validate_depth,
    is_right,
    default_tree_records,
    default_root,
    stage_path_update,
)
from .guarded import GuardedMerkleTree, open_tree


__all__ = [
    # Core types
    "HashPath",
    "MerkleTree",
    "GuardedMerkleTree",
    "DEFAULT_DEPTH",
    # Core functions
    "validate_depth",
    "is_right",
    "default_tree_records",
    "default_root",
    "stage_path_update",
    "open_tree",
]
