"""
Hash Path
Sibling-pair inclusion path for a single leaf of a fixed-depth tree.

Layout:
    data[0]          children of the leaf's immediate parent
    data[depth - 1]  children of the root

Each entry holds both children (left, right), not just the sibling, so
a path can be folded without knowing which side the leaf sits on; the
index bits only select which child must match the value folded so far.

    d0:                 [ root ]               <- compress(*data[2])
    d1:        [ a ]               [ b ]       <- data[2] = (a, b)
    d2:    [ c ]   [ d ]       [ e ]   [ f ]   <- data[1] = (c, d) for index 0..1
    d3:  [0] [1] [2] [3]  ...                  <- data[0] = (L(leaf0), L(leaf1))
"""
from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Any, Iterator

from merkledb.crypto.hashing import (
    DIGEST_BYTES,
    NODE_BYTES,
    compress,
    from_hex,
    hash_leaf,
    to_hex,
)
from merkledb.schemas.errors import (
    IndexOutOfRangeException,
    MerkleVerificationException,
)


_COUNT_FORMAT = ">I"
_COUNT_BYTES = struct.calcsize(_COUNT_FORMAT)


@dataclass(frozen=True)
class HashPath:
    """
    An ordered, fixed-length list of (left, right) digest pairs.

    Attributes:
        data: One pair per level, leaf-adjacent level first
    """
    data: tuple[tuple[bytes, bytes], ...]

    def __post_init__(self) -> None:
        """Validate pair structure and digest sizes."""
        pairs = tuple((bytes(left), bytes(right)) for left, right in self.data)
        for level, (left, right) in enumerate(pairs):
            if len(left) != DIGEST_BYTES or len(right) != DIGEST_BYTES:
                raise ValueError(
                    f"Hash path level {level} must hold two {DIGEST_BYTES}-byte digests"
                )
        object.__setattr__(self, "data", pairs)

    @classmethod
    def empty(cls, depth: int) -> "HashPath":
        """Zero-filled path of the given depth."""
        zero = bytes(DIGEST_BYTES)
        return cls(tuple((zero, zero) for _ in range(depth)))

    @property
    def depth(self) -> int:
        return len(self.data)

    def __len__(self) -> int:
        return len(self.data)

    def __getitem__(self, level: int) -> tuple[bytes, bytes]:
        return self.data[level]

    def __iter__(self) -> Iterator[tuple[bytes, bytes]]:
        return iter(self.data)

    def compute_root(self, leaf_hash: bytes, index: int) -> bytes:
        """
        Fold the path upward from a leaf digest.

        At every level the child selected by the index bit must equal the
        digest folded so far; the parent is compress(left, right).

        Args:
            leaf_hash: Digest of the leaf value, L(value)
            index: Leaf index the path was taken for

        Returns:
            The root digest the path commits to

        Raises:
            IndexOutOfRangeException: If index has more bits than the path
            MerkleVerificationException: If a level does not contain the
                digest folded from below
        """
        if isinstance(index, bool) or not isinstance(index, int):
            raise IndexOutOfRangeException(
                f"Leaf index must be an integer, got {type(index).__name__}",
                depth=self.depth,
            )
        if not 0 <= index < (1 << self.depth):
            raise IndexOutOfRangeException(
                f"Index {index} out of range for hash path of depth {self.depth}",
                index=index,
                depth=self.depth,
            )

        current = bytes(leaf_hash)
        for level, (left, right) in enumerate(self.data):
            selected = right if (index >> level) & 1 else left
            if selected != current:
                raise MerkleVerificationException(
                    f"Hash path level {level} does not contain the expected child",
                    leaf_index=index,
                    details={"level": level, "expected": to_hex(current)},
                )
            current = compress(left, right)
        return current

    def verify(self, root: bytes, leaf_value: bytes, index: int) -> bool:
        """
        Check that this path proves leaf_value at index under root.

        Returns:
            True if the path folds to root, False otherwise
        """
        try:
            return self.compute_root(hash_leaf(leaf_value), index) == root
        except (MerkleVerificationException, IndexOutOfRangeException):
            return False

    def to_bytes(self) -> bytes:
        """Serialize as a big-endian pair count followed by left||right per level."""
        parts = [struct.pack(_COUNT_FORMAT, self.depth)]
        for left, right in self.data:
            parts.append(left)
            parts.append(right)
        return b"".join(parts)

    @classmethod
    def from_bytes(cls, data: bytes) -> "HashPath":
        """
        Parse the to_bytes() encoding.

        Raises:
            ValueError: If the buffer length does not match the pair count
        """
        if len(data) < _COUNT_BYTES:
            raise ValueError("Hash path buffer too short for pair count")
        (count,) = struct.unpack_from(_COUNT_FORMAT, data, 0)
        expected = _COUNT_BYTES + count * NODE_BYTES
        if len(data) != expected:
            raise ValueError(
                f"Hash path buffer must be {expected} bytes for {count} pairs, "
                f"got {len(data)}"
            )
        pairs = []
        for level in range(count):
            offset = _COUNT_BYTES + level * NODE_BYTES
            pairs.append((
                data[offset:offset + DIGEST_BYTES],
                data[offset + DIGEST_BYTES:offset + NODE_BYTES],
            ))
        return cls(tuple(pairs))

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly view with 0x-prefixed hex digests."""
        return {
            "depth": self.depth,
            "pairs": [[to_hex(left), to_hex(right)] for left, right in self.data],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HashPath":
        pairs = tuple(
            (from_hex(left), from_hex(right)) for left, right in data["pairs"]
        )
        if "depth" in data and data["depth"] != len(pairs):
            raise ValueError(
                f"Hash path depth {data['depth']} does not match {len(pairs)} pairs"
            )
        return cls(pairs)


__all__ = [
    "HashPath",
]
