"""
Schemas for the Merkle tree engine: error taxonomy and the persisted
metadata record.
"""

from .errors import (
    ErrorCodes,
    MerkleDBError,
    MerkleDBException,
    InvalidDepthException,
    IndexOutOfRangeException,
    InvalidLeafValueException,
    NodeNotFoundException,
    CorruptMetadataException,
    MerkleVerificationException,
)
from .metadata import (
    MAX_DEPTH,
    METADATA_BYTES,
    PADDED_METADATA_BYTES,
    TreeMetadata,
)

__all__ = [
    # Errors
    "ErrorCodes",
    "MerkleDBError",
    "MerkleDBException",
    "InvalidDepthException",
    "IndexOutOfRangeException",
    "InvalidLeafValueException",
    "NodeNotFoundException",
    "CorruptMetadataException",
    "MerkleVerificationException",
    # Metadata
    "MAX_DEPTH",
    "METADATA_BYTES",
    "PADDED_METADATA_BYTES",
    "TreeMetadata",
]
