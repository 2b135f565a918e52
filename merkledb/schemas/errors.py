"""
Error Taxonomy
File: errors.py

Purpose: Standard error taxonomy for the Merkle tree engine.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.

None of these failures is retried internally. A missing node or malformed
metadata record means the store no longer matches the tree's root and
needs external intervention (a known-good root or a store backup).
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the tree engine."""

    # Construction Errors
    INVALID_DEPTH = "INVALID_DEPTH"
    CORRUPT_METADATA = "CORRUPT_METADATA"

    # Access Errors
    INDEX_OUT_OF_RANGE = "INDEX_OUT_OF_RANGE"
    INVALID_LEAF_VALUE = "INVALID_LEAF_VALUE"

    # Store Consistency Errors
    NODE_NOT_FOUND = "NODE_NOT_FOUND"

    # Merkle & Commitment Errors
    MERKLE_PROOF_INVALID = "MERKLE_PROOF_INVALID"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class MerkleDBError(BaseModel):
    """
    Base error model for structured error communication.

    Used to hand tree failures to callers that log or serialize them
    rather than re-raise.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.NODE_NOT_FOUND],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "MerkleDBException":
        """Convert this error model to a raised exception."""
        return MerkleDBException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class MerkleDBException(Exception):
    """
    Base exception for all Merkle tree errors.

    This exception carries structured error information and can be
    converted to/from MerkleDBError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "MERKLEDB_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> MerkleDBError:
        """Convert this exception to a MerkleDBError model."""
        return MerkleDBError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class InvalidDepthException(MerkleDBException):
    """Exception raised when a tree depth is outside [1, MAX_DEPTH]."""

    def __init__(
        self,
        message: str,
        depth: Any = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if depth is not None:
            full_details["depth"] = depth
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_DEPTH,
            details=full_details,
            retryable=False,
        )


class IndexOutOfRangeException(MerkleDBException):
    """Exception raised when a leaf index is outside [0, 2**depth)."""

    def __init__(
        self,
        message: str,
        index: Any = None,
        depth: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if index is not None:
            full_details["index"] = index
        if depth is not None:
            full_details["depth"] = depth
        super().__init__(
            message=message,
            code=ErrorCodes.INDEX_OUT_OF_RANGE,
            details=full_details,
            retryable=False,
        )


class InvalidLeafValueException(MerkleDBException):
    """Exception raised when a leaf value is not exactly LEAF_BYTES long."""

    def __init__(
        self,
        message: str,
        size: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if size is not None:
            full_details["size"] = size
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_LEAF_VALUE,
            details=full_details,
            retryable=False,
        )


class NodeNotFoundException(MerkleDBException):
    """
    Exception raised when a digest does not resolve to a node record.

    Indicates store corruption or a root that does not belong to the store.
    """

    def __init__(
        self,
        message: str,
        digest: bytes | None = None,
        level: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if digest is not None:
            full_details["digest"] = "0x" + digest.hex()
        if level is not None:
            full_details["level"] = level
        super().__init__(
            message=message,
            code=ErrorCodes.NODE_NOT_FOUND,
            details=full_details,
            retryable=False,
        )


class CorruptMetadataException(MerkleDBException):
    """Exception raised when a persisted tree metadata record is malformed."""

    def __init__(
        self,
        message: str,
        name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if name:
            full_details["name"] = name
        super().__init__(
            message=message,
            code=ErrorCodes.CORRUPT_METADATA,
            details=full_details,
            retryable=False,
        )


class MerkleVerificationException(MerkleDBException):
    """Exception raised when a hash path does not fold into a consistent root."""

    def __init__(
        self,
        message: str,
        leaf_index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if leaf_index is not None:
            full_details["leaf_index"] = leaf_index
        super().__init__(
            message=message,
            code=ErrorCodes.MERKLE_PROOF_INVALID,
            details=full_details,
            retryable=False,
        )
