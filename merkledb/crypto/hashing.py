"""
Digest Primitives
Leaf hashing and two-to-one compression for the indexed Merkle tree.

This module provides:
- SHA-256 hashing for raw bytes
- Leaf hash L(leaf) and compression C(left, right)
- Hex encoding/decoding with 0x prefix

Size Rules (Hard Contracts):
1. Every digest is DIGEST_BYTES (32) bytes
2. Every leaf value is LEAF_BYTES (64) bytes
3. Every node payload is left || right, NODE_BYTES (64) bytes

Both L and C use SHA-256, so digests are interchangeable as node
identities and as store keys.
"""
from __future__ import annotations

import hashlib


DIGEST_BYTES = 32
LEAF_BYTES = 64
NODE_BYTES = 2 * DIGEST_BYTES


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte SHA-256 digest

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def hash_leaf(leaf: bytes) -> bytes:
    """
    Hash a leaf value into its tree digest (L).

    Args:
        leaf: Raw leaf value (LEAF_BYTES in a well-formed tree)

    Returns:
        32-byte leaf digest
    """
    return sha256(bytes(leaf))


def compress(left: bytes, right: bytes) -> bytes:
    """
    Compress two child digests into their parent digest (C).

    parent = sha256(left + right)

    Args:
        left: Left child digest (32 bytes)
        right: Right child digest (32 bytes)

    Returns:
        32-byte parent digest
    """
    return sha256(bytes(left) + bytes(right))


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


# Digest of the all-zero leaf every bootstrapped tree starts from
ZERO_LEAF_HASH: bytes = hash_leaf(bytes(LEAF_BYTES))


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
