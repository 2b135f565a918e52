"""
SQLite Store

Persistent store backed by a single SQLite table:

    kv(key BLOB PRIMARY KEY, value BLOB NOT NULL)

Blocking sqlite3 calls run in a worker thread via asyncio.to_thread.
A batch is applied inside one transaction, so either every staged put
becomes visible or none does.

Cancelling a coroutine does not stop its worker thread. A cancelled
batch write therefore waits for the worker: if cancellation reached the
worker before COMMIT, the transaction is rolled back and CancelledError
propagates; if COMMIT had already started, the write completes and the
task is re-cancelled so the caller observes a committed batch.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
import threading
from pathlib import Path

from .base import KeyValueStore, StoreError


logger = logging.getLogger(__name__)

MEMORY_PATH = ":memory:"


class _CommitGate:
    """Decides, exactly once, whether a batch commits or is cancelled."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._cancelled = False
        self._committing = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> bool:
        """Returns False if the worker has already started committing."""
        with self._lock:
            if self._committing:
                return False
            self._cancelled = True
            return True

    def begin_commit(self) -> bool:
        """Returns False if the batch was cancelled first."""
        with self._lock:
            if self._cancelled:
                return False
            self._committing = True
            return True


class SQLiteStore(KeyValueStore):
    """
    SQLite-backed store.

    Usage:
        async with SQLiteStore("./trees.db") as store:
            tree = await MerkleTree.new(store, "main")
    """

    name = "sqlite"

    def __init__(self, path: str | Path = MEMORY_PATH) -> None:
        super().__init__()
        self.path = str(path)
        if self.path != MEMORY_PATH:
            Path(self.path).expanduser().parent.mkdir(parents=True, exist_ok=True)
            self.path = str(Path(self.path).expanduser())

        self._lock = threading.Lock()
        self._conn = sqlite3.connect(
            self.path,
            check_same_thread=False,
            isolation_level=None,
        )
        self._init_schema()
        logger.debug(f"Opened SQLite store at {self.path}")

    def _init_schema(self) -> None:
        with self._lock:
            self._conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key BLOB PRIMARY KEY,
                    value BLOB NOT NULL
                )
                """
            )

    def _get_sync(self, key: bytes) -> bytes | None:
        with self._lock:
            row = self._conn.execute(
                "SELECT value FROM kv WHERE key = ?", (key,)
            ).fetchone()
        return bytes(row[0]) if row is not None else None

    def _put_sync(self, key: bytes, value: bytes) -> None:
        with self._lock:
            self._conn.execute(
                "INSERT OR REPLACE INTO kv (key, value) VALUES (?, ?)",
                (key, value),
            )

    def _apply_batch_sync(
        self,
        ops: list[tuple[bytes, bytes]],
        gate: _CommitGate | None = None,
    ) -> None:
        with self._lock:
            try:
                self._conn.execute("BEGIN")
                self._conn.executemany(
                    "INSERT OR REPLACE INTO kv (key, value) VALUES (?, ?)",
                    ops,
                )
                if gate is not None and not gate.begin_commit():
                    self._conn.execute("ROLLBACK")
                    logger.debug(f"Rolled back cancelled batch of {len(ops)} puts")
                    return
                self._conn.execute("COMMIT")
            except sqlite3.Error as e:
                if self._conn.in_transaction:
                    self._conn.execute("ROLLBACK")
                raise StoreError(f"Batch write failed: {e}") from e

    async def _get(self, key: bytes) -> bytes | None:
        return await asyncio.to_thread(self._get_sync, key)

    async def _put(self, key: bytes, value: bytes) -> None:
        await asyncio.to_thread(self._put_sync, key, value)

    async def _apply_batch(self, ops: list[tuple[bytes, bytes]]) -> None:
        gate = _CommitGate()
        worker = asyncio.ensure_future(
            asyncio.to_thread(self._apply_batch_sync, ops, gate)
        )
        try:
            await asyncio.shield(worker)
        except asyncio.CancelledError:
            rolled_back = gate.cancel()
            await asyncio.wait({worker})
            if rolled_back:
                if not worker.cancelled() and worker.exception() is not None:
                    logger.warning(f"Cancelled batch failed: {worker.exception()}")
                raise
            # Already committed: surface the write, then re-deliver the cancel.
            worker.result()
            asyncio.current_task().cancel()

    def count(self) -> int:
        """Number of records in the store."""
        with self._lock:
            (n,) = self._conn.execute("SELECT COUNT(*) FROM kv").fetchone()
        return n

    async def close(self) -> None:
        if self._closed:
            return
        with self._lock:
            self._conn.close()
        await super().close()
        logger.debug(f"Closed SQLite store at {self.path}")
