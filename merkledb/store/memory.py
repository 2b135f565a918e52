"""
In-Memory Store

Dict-backed store for tests and ephemeral trees. Nothing survives the
process, but the same instance can be reopened by several tree handles.
"""

from __future__ import annotations

from typing import Iterator, Optional

from .base import KeyValueStore


class InMemoryStore(KeyValueStore):
    """Simple in-memory store implementation."""

    name = "memory"

    def __init__(self, initial: Optional[dict[bytes, bytes]] = None) -> None:
        super().__init__()
        self._data: dict[bytes, bytes] = dict(initial or {})

    async def _get(self, key: bytes) -> bytes | None:
        return self._data.get(key)

    async def _put(self, key: bytes, value: bytes) -> None:
        self._data[key] = value

    async def _apply_batch(self, ops: list[tuple[bytes, bytes]]) -> None:
        # dict.update cannot partially fail for bytes keys
        self._data.update(ops)

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: bytes) -> bool:
        return key in self._data

    def keys(self) -> Iterator[bytes]:
        return iter(list(self._data))

    def clear(self) -> None:
        self._data.clear()
