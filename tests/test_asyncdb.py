import asyncio

import pytest

from ldbcore.asyncdb import AsyncDB, AsyncError, SnapshotRef


class MemoryDB:
    def __init__(self):
        self.log = []
        self.flushes = 0
        self.compactions = []
        self.closed = False

    def put(self, key, value):
        self.log.append((key, value))

    def delete(self, key):
        self.log.append((key, None))

    def write(self, batch, sync):
        self.log.extend(batch)
        if sync:
            self.flushes += 1

    def flush(self):
        self.flushes += 1

    def get_snapshot(self):
        return len(self.log)

    def get_at(self, snapshot, key):
        value = None
        for k, v in self.log[:snapshot]:
            if k == key:
                value = v
        return value

    def get(self, key):
        return self.get_at(len(self.log), key)

    def compact_range(self, start, limit):
        self.compactions.append((start, limit))

    def close(self):
        self.closed = True


class FailingDB(MemoryDB):
    def put(self, key, value):
        raise OSError("disk full")


@pytest.mark.asyncio
async def test_put_get_delete():
    adb = AsyncDB(MemoryDB())
    await adb.put(b"Hello", b"World")
    assert await adb.get(b"Hello") == b"World"
    await adb.delete(b"Hello")
    assert await adb.get(b"Hello") is None
    await adb.close()


@pytest.mark.asyncio
async def test_snapshot_travels_back_in_time():
    adb = AsyncDB(MemoryDB())
    await adb.put(b"Hello", b"World")
    snapshot = await adb.get_snapshot()
    await adb.delete(b"Hello")
    assert await adb.get_at(snapshot, b"Hello") == b"World"
    assert await adb.get(b"Hello") is None

    await adb.drop_snapshot(snapshot)
    with pytest.raises(AsyncError, match="Unknown snapshot reference: this is a bug"):
        await adb.get_at(snapshot, b"Hello")
    await adb.flush()
    await adb.close()


@pytest.mark.asyncio
async def test_snapshot_refs_are_distinct():
    adb = AsyncDB(MemoryDB())
    first = await adb.get_snapshot()
    second = await adb.get_snapshot()
    assert first != second
    assert isinstance(first, SnapshotRef) and second.id > first.id
    await adb.close()


@pytest.mark.asyncio
async def test_drop_unknown_snapshot_is_ok():
    adb = AsyncDB(MemoryDB())
    await adb.drop_snapshot(SnapshotRef(99))
    with pytest.raises(AsyncError):
        await adb.get_at(SnapshotRef(99), b"k")
    await adb.close()


@pytest.mark.asyncio
async def test_write_flush_compact_reach_db():
    db = MemoryDB()
    adb = AsyncDB(db)
    await adb.write([(b"a", b"1"), (b"b", b"2")], True)
    await adb.flush()
    await adb.compact_range(b"a", b"z")
    assert await adb.get(b"b") == b"2"
    assert db.flushes == 2
    assert db.compactions == [(b"a", b"z")]
    await adb.close()


@pytest.mark.asyncio
async def test_close_closes_db_and_rejects_requests():
    db = MemoryDB()
    adb = AsyncDB(db)
    await adb.close()
    assert db.closed
    with pytest.raises(AsyncError):
        await adb.put(b"k", b"v")
    with pytest.raises(AsyncError):
        await adb.close()


@pytest.mark.asyncio
async def test_database_errors_propagate():
    adb = AsyncDB(FailingDB())
    with pytest.raises(OSError, match="disk full"):
        await adb.put(b"k", b"v")
    await adb.close()


@pytest.mark.asyncio
async def test_concurrent_requests_are_serialised():
    db = MemoryDB()
    async with AsyncDB(db) as adb:
        keys = [f"key{i}".encode() for i in range(20)]
        await asyncio.gather(*(adb.put(k, k) for k in keys))
        values = await asyncio.gather(*(adb.get(k) for k in keys))
        assert values == keys
    assert db.closed