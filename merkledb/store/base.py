"""
Key-Value Store Interface

Defines the async store contract the tree engine persists into:
- get(key) -> bytes, raising KeyNotFoundError when absent
- put(key, value)
- batch() -> WriteBatch, committed atomically by write()

Keys and values are raw bytes. The store imposes no schema; the tree
engine keys node records by their own digest and metadata by tree name.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator


class StoreError(Exception):
    """Error raised by a store backend."""
    pass


class KeyNotFoundError(StoreError):
    """Requested key has no record in the store."""
    def __init__(self, key: bytes):
        self.key = key
        super().__init__(f"Key not found: 0x{key.hex()}")


class StoreClosedError(StoreError):
    """Operation attempted on a closed store."""
    pass


def _as_bytes(data: bytes | bytearray | memoryview | str) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


class WriteBatch:
    """
    Staged puts committed together.

    Usage:
        batch = store.batch()
        batch.put(key_a, value_a).put(key_b, value_b)
        await batch.write()

    A later put to the same key overrides an earlier one. A batch
    can be written once.
    """

    def __init__(self, store: "KeyValueStore") -> None:
        self._store = store
        self._ops: dict[bytes, bytes] = {}
        self._written = False

    def put(self, key: bytes | str, value: bytes) -> "WriteBatch":
        if self._written:
            raise StoreError("Batch has already been written")
        self._ops[_as_bytes(key)] = _as_bytes(value)
        return self

    def __len__(self) -> int:
        return len(self._ops)

    def __iter__(self) -> Iterator[tuple[bytes, bytes]]:
        return iter(self._ops.items())

    async def write(self) -> None:
        """Commit every staged put atomically."""
        if self._written:
            raise StoreError("Batch has already been written")
        self._store._check_open()
        await self._store._apply_batch(list(self._ops.items()))
        self._written = True


class KeyValueStore(ABC):
    """
    Abstract base class for async key-value stores.

    Subclasses implement _get, _put and _apply_batch; key normalization
    and closed-state checks live here.
    """

    name: str = "base"

    def __init__(self) -> None:
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise StoreClosedError(f"Store '{self.name}' is closed")

    async def get(self, key: bytes | str) -> bytes:
        """
        Fetch the value stored under key.

        Raises:
            KeyNotFoundError: If the key has no record
        """
        self._check_open()
        key = _as_bytes(key)
        value = await self._get(key)
        if value is None:
            raise KeyNotFoundError(key)
        return value

    async def put(self, key: bytes | str, value: bytes) -> None:
        """Store value under key, replacing any previous value."""
        self._check_open()
        await self._put(_as_bytes(key), _as_bytes(value))

    def batch(self) -> WriteBatch:
        """Start a batch of puts to be committed atomically."""
        self._check_open()
        return WriteBatch(self)

    async def close(self) -> None:
        self._closed = True

    async def __aenter__(self) -> "KeyValueStore":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @abstractmethod
    async def _get(self, key: bytes) -> bytes | None:
        """Return the value for key, or None when absent."""
        ...

    @abstractmethod
    async def _put(self, key: bytes, value: bytes) -> None:
        ...

    @abstractmethod
    async def _apply_batch(self, ops: list[tuple[bytes, bytes]]) -> None:
        """Apply all puts or none of them."""
        ...
