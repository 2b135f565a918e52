"""
merkledb - Indexed Merkle tree persisted in a key-value store.

    from merkledb import GuardedMerkleTree, InMemoryStore

    tree = await GuardedMerkleTree.open_or_create(InMemoryStore(), "accounts", depth=20)
    root = await tree.update(7, bytes(64))
    path = await tree.hash_path(7)
"""

from merkledb.crypto import hash_leaf, compress, to_hex, from_hex
from merkledb.schemas import (
    MerkleDBException,
    InvalidDepthException,
    IndexOutOfRangeException,
    InvalidLeafValueException,
    NodeNotFoundException,
    CorruptMetadataException,
    MerkleVerificationException,
    TreeMetadata,
)
from merkledb.store import KeyValueStore, InMemoryStore, SQLiteStore, create_store
from merkledb.merkle import HashPath, MerkleTree, GuardedMerkleTree, open_tree
from merkledb.config import RuntimeConfig


__version__ = "0.1.0"

__all__ = [
    "hash_leaf",
    "compress",
    "to_hex",
    "from_hex",
    "MerkleDBException",
    "InvalidDepthException",
    "IndexOutOfRangeException",
    "InvalidLeafValueException",
    "NodeNotFoundException",
    "CorruptMetadataException",
    "MerkleVerificationException",
    "TreeMetadata",
    "KeyValueStore",
    "InMemoryStore",
    "SQLiteStore",
    "create_store",
    "HashPath",
    "MerkleTree",
    "GuardedMerkleTree",
    "open_tree",
    "RuntimeConfig",
]
