"""
Error Taxonomy Unit Tests
Tests for merkledb/schemas/errors.py
"""
import pytest

from merkledb.crypto.hashing import sha256
from merkledb.schemas.errors import (
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


class TestExceptionCodes:

    @pytest.mark.parametrize("exc, code", [
        (InvalidDepthException("bad", depth=0), ErrorCodes.INVALID_DEPTH),
        (IndexOutOfRangeException("bad", index=9, depth=3), ErrorCodes.INDEX_OUT_OF_RANGE),
        (InvalidLeafValueException("bad", size=3), ErrorCodes.INVALID_LEAF_VALUE),
        (NodeNotFoundException("bad"), ErrorCodes.NODE_NOT_FOUND),
        (CorruptMetadataException("bad", name="t"), ErrorCodes.CORRUPT_METADATA),
        (MerkleVerificationException("bad", leaf_index=1), ErrorCodes.MERKLE_PROOF_INVALID),
    ])
    def test_codes(self, exc, code):
        assert isinstance(exc, MerkleDBException)
        assert exc.code == code
        assert exc.retryable is False

    def test_details_populated(self):
        exc = IndexOutOfRangeException("out", index=8, depth=3)
        assert exc.details == {"index": 8, "depth": 3}

    def test_node_digest_rendered_as_hex(self):
        digest = sha256(b"node")
        exc = NodeNotFoundException("missing", digest=digest, level=2)

        assert exc.details["digest"] == "0x" + digest.hex()
        assert exc.details["level"] == 2

    def test_repr(self):
        exc = InvalidDepthException("Tree depth bad", depth=40)
        assert repr(exc) == "InvalidDepthException(code='INVALID_DEPTH', message='Tree depth bad')"


class TestErrorModel:

    def test_exception_to_model(self):
        model = CorruptMetadataException("broken", name="t").to_error_model()

        assert isinstance(model, MerkleDBError)
        assert model.code == ErrorCodes.CORRUPT_METADATA
        assert model.details == {"name": "t"}
        assert model.retryable is False

    def test_model_to_exception(self):
        model = MerkleDBError(code=ErrorCodes.NODE_NOT_FOUND, message="gone")
        exc = model.to_exception()

        assert isinstance(exc, MerkleDBException)
        assert exc.code == ErrorCodes.NODE_NOT_FOUND
        assert str(exc) == "gone"

    def test_model_forbids_extra_fields(self):
        from pydantic import ValidationError

        with pytest.raises(ValidationError):
            MerkleDBError(code="X", message="y", unexpected=True)
