"""
Tree Metadata Record
File: metadata.py

Purpose: Bit-exact encoding of the persisted (root, depth) record.

Layout (little-endian):
    [0:32)   root digest
    [32:36)  depth, unsigned 32-bit
    [36:40)  zero padding

Records are written as 40 bytes. Unpadded 36-byte records are accepted
on read.
"""
from __future__ import annotations

import struct
from dataclasses import dataclass

from merkledb.crypto.hashing import DIGEST_BYTES
from .errors import CorruptMetadataException


MAX_DEPTH = 32

METADATA_BYTES = DIGEST_BYTES + 4
PADDED_METADATA_BYTES = METADATA_BYTES + 4

_DEPTH_FORMAT = "<I"


@dataclass(frozen=True)
class TreeMetadata:
    """
    Persisted state of a named tree.

    Attributes:
        root: Current root digest (32 bytes)
        depth: Number of levels between the root and the leaves
    """
    root: bytes
    depth: int

    def to_bytes(self) -> bytes:
        """Encode as the padded 40-byte record."""
        return (
            bytes(self.root)
            + struct.pack(_DEPTH_FORMAT, self.depth)
            + bytes(PADDED_METADATA_BYTES - METADATA_BYTES)
        )

    @classmethod
    def from_bytes(cls, data: bytes, name: str | None = None) -> "TreeMetadata":
        """
        Decode a stored record.

        Args:
            data: Raw record bytes (36 or 40 bytes)
            name: Tree name, used only for error details

        Raises:
            CorruptMetadataException: On a bad length, non-zero padding,
                or a depth outside [1, MAX_DEPTH]
        """
        if len(data) not in (METADATA_BYTES, PADDED_METADATA_BYTES):
            raise CorruptMetadataException(
                f"Metadata record must be {METADATA_BYTES} or "
                f"{PADDED_METADATA_BYTES} bytes, got {len(data)}",
                name=name,
                details={"size": len(data)},
            )
        if any(data[METADATA_BYTES:]):
            raise CorruptMetadataException(
                "Metadata padding bytes must be zero",
                name=name,
            )

        root = bytes(data[:DIGEST_BYTES])
        (depth,) = struct.unpack_from(_DEPTH_FORMAT, data, DIGEST_BYTES)
        if not 1 <= depth <= MAX_DEPTH:
            raise CorruptMetadataException(
                f"Stored depth {depth} outside [1, {MAX_DEPTH}]",
                name=name,
                details={"depth": depth},
            )
        return cls(root=root, depth=depth)


__all__ = [
    "MAX_DEPTH",
    "METADATA_BYTES",
    "PADDED_METADATA_BYTES",
    "TreeMetadata",
]
