# ldbcore

Pieces of a LevelDB-style key-value store in plain Python, with no
third-party runtime dependencies.

## Modules

| Module | Contents |
| --- | --- |
| `ldbcore.comparator` | `Comparator`, the abstract interface for key ordering, and `BytewiseComparator`, the default unsigned byte-wise order with separator and successor helpers. |
| `ldbcore.blockhandle` | `encode_varint` / `decode_varint` for base-128 varints and `BlockHandle`, an `(offset, size)` pointer into a table file. |
| `ldbcore.cache` | `LRUCache`, a fixed-capacity least-recently-used cache. |
| `ldbcore.block_builder` | `BlockBuilder`, which writes sorted key/value entries into the prefix-compressed block format with restart points. |
| `ldbcore.block` | `Block` and `BlockIterator`, which read such blocks forwards and backwards and seek within them. |
| `ldbcore.asyncdb` | `AsyncDB`, an asyncio front end running every call to a database object on one worker thread, with `SnapshotRef` handles and `AsyncError`. |
| `ldbcore.tools` | Helpers for command-style use of a database (`get`, `put`, `delete`, `iterate`, `compact`) and for word counting (`update_count`, `count_words`). |
| `ldbcore.kvserver` | `KVService`, a WSGI application exposing a database over HTTP. |

## Comparators

```python
from ldbcore.comparator import BytewiseComparator

cmp = BytewiseComparator()
cmp.compare(b"abc", b"abd")               # negative
cmp.find_shortest_sep(b"abcd", b"abcf")   # b"abce"
cmp.find_shortest_sep(b"abc", b"zzz")     # b"b"
cmp.find_short_succ(b"abcd")              # b"b"
cmp.find_short_succ(b"\xff\xff")          # b"\xff\xff\xff"
```

`compare` returns a negative number, zero or a positive number.
`find_shortest_sep(start, limit)` returns `start` when the two are equal, and
otherwise a short key at least `start` and below `limit`. `find_short_succ`
returns a short key at least as large as its argument. The comparator's
`name` is `"leveldb.BytewiseComparator"`.

## Varints and block handles

```python
from ldbcore.blockhandle import BlockHandle, decode_varint, encode_varint

encode_varint(300)                  # b"\xac\x02"
decode_varint(b"\xac\x02", 0)       # (300, 2)

handle = BlockHandle(offset=890, size=777)
BlockHandle.decode(handle.encode()) # (BlockHandle(offset=890, size=777), 4)
```

`encode_varint` rejects negative numbers and `decode_varint` rejects truncated
or overlong input, both with `ValueError`.

## Blocks

A block is a run of entries followed by the restart offsets and their count,
each a little-endian 32-bit integer. Each entry stores how many key bytes it
shares with the previous key, the remaining key bytes and the value.

```python
from ldbcore.block import Block
from ldbcore.block_builder import BlockBuilder

builder = BlockBuilder(restart_interval=3)
for key in (b"key1", b"prefix_key1", b"prefix_key2"):
    builder.add(key, b"value")
contents = builder.finish()

for key, value in Block(contents).iter():
    print(key, value)
```

`BlockBuilder(restart_interval=16, comparator=None, block_size=4096)` accepts
keys only in strictly increasing order and raises `ValueError` otherwise. It
offers `entries`, `last_key`, `size_estimate()`, `reset()` and `finish()`.

`Block(contents, comparator=None)` raises `ValueError` for contents too short
to hold a restart count. `Block.iter()` returns a `BlockIterator`, which yields
`(key, value)` pairs as a Python iterator and also offers cursor-style
`advance()`, `prev()`, `seek(target)`, `seek_to_last()`, `reset()`, `valid()`
and `current()`; `current()` returns `None` when the iterator is not on an
entry.

## Cache

```python
from ldbcore.cache import LRUCache

cache = LRUCache(3)
cache.insert(b"a", 1)
cache.get(b"a")      # 1, and marks it as recently used
cache.remove(b"a")   # 1
len(cache)           # 0
```

Inserting into a full cache evicts the least recently used entry; inserting an
existing key replaces its value. `get` and `remove` return `None` for missing
keys. `new_cache_id()` hands out increasing ids so several users can partition
one cache. A capacity below 1 raises `ValueError`.

## Async access

`AsyncDB` wraps an already open database object that provides `put`,
`delete`, `write`, `flush`, `get`, `get_at`, `get_snapshot` and
`compact_range`, and runs each call on a single worker thread. It can be used
as an async context manager, which closes it on exit.

```python
async with AsyncDB(db) as adb:
    await adb.put(b"Hello", b"World")
    snapshot = await adb.get_snapshot()
    await adb.delete(b"Hello")
    await adb.get_at(snapshot, b"Hello")   # b"World"
    await adb.drop_snapshot(snapshot)
```

Using a `SnapshotRef` after `drop_snapshot()`, or any call after `close()`,
raises `AsyncError`. `close()` also calls the wrapped object's `close()` if it
has one.

## Command helpers

`ldbcore.tools` holds functions taking an open database object:
`get(db, key, out=None)` prints `key => value` (or `<not found>`) to standard
error by default; `put` and `delete` flush after writing; `iterate(db, out=None)`
writes every entry from `db.new_iter()` as a `key => value` line to standard
output by default; `compact(db, start, limit)` calls `compact_range`.
`count_words(db, lines)` lowercases each whitespace-separated word, keeps only
ASCII letters and digits, and increments its decimal counter with
`update_count`.

## HTTP key-value service

`KVService(db)` is a WSGI callable:

- `GET /kvs/get/<key>` returns the stored value as `text/plain`, or 404 if the
  key is missing.
- `PUT` or `POST /kvs/put/<key>` stores the request body under the key.

Other paths give 404 and other methods 405. Requests are served one at a time.
Host it with any WSGI server.

## What this package does not do

There is no storage engine here: no database object, write batches, memtable,
write-ahead log, table files, compaction or snapshots of its own. `AsyncDB`,
the helpers in `ldbcore.tools` and `KVService` all work on a database object
you supply. The package installs no command-line programs and ships no HTTP
server.