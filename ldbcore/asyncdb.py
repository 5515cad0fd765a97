"""Asynchronous access to a database from an asyncio event loop.

All operations run one after another on a single dedicated worker thread, so
the wrapped database is never touched by more than one thread at a time.
"""

from __future__ import annotations

import asyncio
import functools
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Protocol, TypeVar

T = TypeVar("T")


class Database(Protocol):
    """The database operations that AsyncDB relies on."""

    def put(self, key: bytes, value: bytes) -> None: ...

    def delete(self, key: bytes) -> None: ...

    def write(self, batch: Any, sync: bool) -> None: ...

    def flush(self) -> None: ...

    def get(self, key: bytes) -> bytes | None: ...

    def get_at(self, snapshot: Any, key: bytes) -> bytes | None: ...

    def get_snapshot(self) -> Any: ...

    def compact_range(self, start: bytes, limit: bytes) -> None: ...


class AsyncError(Exception):
    """Raised when a request cannot be delivered to or answered by the worker."""


@dataclass(frozen=True)
class SnapshotRef:
    """A handle to a snapshot held by the worker; release it with drop_snapshot()."""

    id: int


class AsyncDB:
    """Runs database operations on a worker thread and awaits their results."""

    def __init__(self, db: Database) -> None:
        self._db = db
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="asyncdb")
        self._snapshots: dict[int, Any] = {}
        self._snapshot_counter = 0
        self._closed = False

    async def __aenter__(self) -> AsyncDB:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        if not self._closed:
            await self.close()

    async def _call(self, func: Callable[..., T], *args: Any) -> T:
        if self._closed:
            raise AsyncError("database worker has been closed")
        loop = asyncio.get_running_loop()
        try:
            future = loop.run_in_executor(self._executor, functools.partial(func, *args))
        except RuntimeError as exc:
            raise AsyncError(str(exc)) from exc
        return await future

    # Work done on the worker thread.

    def _do_close(self) -> None:
        self._snapshots.clear()
        closer = getattr(self._db, "close", None)
        if callable(closer):
            closer()

    def _do_get_at(self, snapshot: SnapshotRef, key: bytes) -> bytes | None:
        try:
            snap = self._snapshots[snapshot.id]
        except KeyError:
            raise AsyncError("Unknown snapshot reference: this is a bug") from None
        return self._db.get_at(snap, key)

    def _do_get_snapshot(self) -> SnapshotRef:
        ref = SnapshotRef(self._snapshot_counter)
        self._snapshots[ref.id] = self._db.get_snapshot()
        self._snapshot_counter += 1
        return ref

    def _do_drop_snapshot(self, snapshot: SnapshotRef) -> None:
        self._snapshots.pop(snapshot.id, None)

    # Public interface.

    async def close(self) -> None:
        """Finish pending requests, close the database and stop the worker."""
        if self._closed:
            raise AsyncError("database worker has been closed")
        loop = asyncio.get_running_loop()
        future = loop.run_in_executor(self._executor, self._do_close)
        self._closed = True
        try:
            await future
        finally:
            self._executor.shutdown(wait=False)

    async def put(self, key: bytes, value: bytes) -> None:
        """Store value under key."""
        await self._call(self._db.put, bytes(key), bytes(value))

    async def delete(self, key: bytes) -> None:
        """Delete key."""
        await self._call(self._db.delete, bytes(key))

    async def write(self, batch: Any, sync: bool) -> None:
        """Apply a write batch, flushing it to disk if sync is true."""
        await self._call(self._db.write, batch, sync)

    async def flush(self) -> None:
        """Make sure all pending changes are stored on disk."""
        await self._call(self._db.flush)

    async def get(self, key: bytes) -> bytes | None:
        """Return the current value of key, or None."""
        return await self._call(self._db.get, bytes(key))

    async def get_at(self, snapshot: SnapshotRef, key: bytes) -> bytes | None:
        """Return the value of key as of snapshot, or None."""
        return await self._call(self._do_get_at, snapshot, bytes(key))

    async def get_snapshot(self) -> SnapshotRef:
        """Take a snapshot of the current state."""
        return await self._call(self._do_get_snapshot)

    async def drop_snapshot(self, snapshot: SnapshotRef) -> None:
        """Release a snapshot; it cannot be used afterwards."""
        await self._call(self._do_drop_snapshot, snapshot)

    async def compact_range(self, start: bytes, limit: bytes) -> None:
        """Compact the key range from start to limit."""
        await self._call(self._db.compact_range, bytes(start), bytes(limit))