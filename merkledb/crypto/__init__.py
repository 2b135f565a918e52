"""
Core cryptographic utilities.

Provides the leaf hash and compression function shared by every tree level.
"""
from .hashing import (
    DIGEST_BYTES,
    LEAF_BYTES,
    NODE_BYTES,
    ZERO_LEAF_HASH,
    sha256,
    hash_leaf,
    compress,
    to_hex,
    from_hex,
)

__all__ = [
    "DIGEST_BYTES",
    "LEAF_BYTES",
    "NODE_BYTES",
    "ZERO_LEAF_HASH",
    "sha256",
    "hash_leaf",
    "compress",
    "to_hex",
    "from_hex",
]
