"""
Common test fixtures shared by all test modules.

Provides factory functions and store doubles for tree tests:
- Leaf values and expected default roots
- Stores that yield to the event loop, fail, or block on batch writes
- A SQLite store that pauses its batch worker thread
"""

import asyncio
import threading
from typing import Optional

from merkledb.crypto.hashing import LEAF_BYTES, compress, hash_leaf
from merkledb.store import InMemoryStore, SQLiteStore, StoreError


# =============================================================================
# Value Factories
# =============================================================================

def make_leaf_value(seed: int = 1) -> bytes:
    """Deterministic 64-byte leaf value derived from seed."""
    return seed.to_bytes(8, "big") * (LEAF_BYTES // 8)


def fold_default_root(depth: int) -> bytes:
    """Apply C(x, x) depth times starting from L(zeros(64))."""
    node = hash_leaf(bytes(LEAF_BYTES))
    for _ in range(depth):
        node = compress(node, node)
    return node


def fold_path(path, index: int, leaf_hash: bytes) -> bytes:
    """
    Fold a hash path top-down: at every level the child picked by the
    index bit must match, and the last level must hold leaf_hash.
    """
    depth = len(path)
    root = compress(*path[depth - 1])
    for current_depth in range(depth):
        level = depth - 1 - current_depth
        left, right = path[level]
        bit = (index >> (depth - current_depth - 1)) & 1
        child = right if bit else left
        if level == 0:
            assert child == leaf_hash
        else:
            assert compress(*path[level - 1]) == child
    return root


# =============================================================================
# Store Doubles
# =============================================================================

class YieldingStore(InMemoryStore):
    """In-memory store that yields to the event loop on every call."""

    async def _get(self, key: bytes) -> Optional[bytes]:
        await asyncio.sleep(0)
        return await super()._get(key)

    async def _apply_batch(self, ops: list[tuple[bytes, bytes]]) -> None:
        await asyncio.sleep(0)
        await super()._apply_batch(ops)


class FailingBatchStore(InMemoryStore):
    """In-memory store whose batch writes fail once armed."""

    def __init__(self) -> None:
        super().__init__()
        self.fail_batches = False

    async def _apply_batch(self, ops: list[tuple[bytes, bytes]]) -> None:
        if self.fail_batches:
            raise StoreError("simulated write failure")
        await super()._apply_batch(ops)


class BlockingBatchStore(InMemoryStore):
    """In-memory store whose batch writes wait until released."""

    def __init__(self) -> None:
        super().__init__()
        self.block_batches = False
        self.batch_started: Optional[asyncio.Event] = None
        self.release: Optional[asyncio.Event] = None

    async def _apply_batch(self, ops: list[tuple[bytes, bytes]]) -> None:
        if self.block_batches:
            self.batch_started.set()
            await self.release.wait()
        await super()._apply_batch(ops)


class PausingSQLiteStore(SQLiteStore):
    """
    SQLite store whose batch worker thread pauses once armed.

    pause_before_commit=True pauses before the transaction starts, so a
    cancel lands ahead of COMMIT; False pauses after the batch committed.
    """

    def __init__(self, path: str) -> None:
        super().__init__(path)
        self.pause_batches = False
        self.pause_before_commit = True
        self.gate = None
        self.paused = threading.Event()
        self.release = threading.Event()

    def _apply_batch_sync(self, ops, gate=None) -> None:
        if not self.pause_batches:
            return super()._apply_batch_sync(ops, gate)
        self.gate = gate
        if not self.pause_before_commit:
            super()._apply_batch_sync(ops, gate)
        self.paused.set()
        self.release.wait(timeout=5)
        if self.pause_before_commit:
            super()._apply_batch_sync(ops, gate)
