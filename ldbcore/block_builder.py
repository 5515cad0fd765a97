"""Building of blocks made of prefix-compressed key/value entries."""

from __future__ import annotations

import struct

from ldbcore.blockhandle import encode_varint
from ldbcore.comparator import BytewiseComparator, Comparator

_U32 = struct.Struct("<I")


def _shared_prefix_len(a: bytes, b: bytes) -> int:
    count = 0
    for x, y in zip(a, b):
        if x != y:
            break
        count += 1
    return count


class BlockBuilder:
    """Accumulates sorted key/value entries and serialises them as a block.

    Every ``restart_interval`` entries a restart point is written, at which the
    key is stored in full instead of sharing a prefix with the previous key.
    """

    def __init__(
        self,
        restart_interval: int = 16,
        comparator: Comparator | None = None,
        block_size: int = 4096,
    ) -> None:
        if restart_interval < 1:
            raise ValueError("restart interval must be at least 1")
        self.restart_interval = restart_interval
        self.comparator = comparator if comparator is not None else BytewiseComparator()
        self.block_size = block_size
        self._buffer = bytearray()
        self._restarts = [0]
        self._last_key = b""
        self._restart_counter = 0
        self._counter = 0

    @property
    def entries(self) -> int:
        """Number of entries added since creation or the last reset."""
        return self._counter

    @property
    def last_key(self) -> bytes:
        """The most recently added key."""
        return self._last_key

    def size_estimate(self) -> int:
        """Size in bytes the block would have if finished now."""
        return len(self._buffer) + 4 * len(self._restarts) + 4

    def reset(self) -> None:
        """Discard all entries and restart points."""
        self._buffer.clear()
        self._restarts.clear()
        self._last_key = b""
        self._restart_counter = 0
        self._counter = 0

    def add(self, key: bytes, value: bytes) -> None:
        """Append an entry; keys must be added in strictly increasing order."""
        key, value = bytes(key), bytes(value)
        if self._buffer and self.comparator.compare(self._last_key, key) >= 0:
            raise ValueError("keys must be added in strictly increasing order")

        if self._restart_counter < self.restart_interval:
            shared = _shared_prefix_len(self._last_key, key)
        else:
            self._restarts.append(len(self._buffer))
            self._last_key = b""
            self._restart_counter = 0
            shared = 0

        non_shared = len(key) - shared
        self._buffer += encode_varint(shared)
        self._buffer += encode_varint(non_shared)
        self._buffer += encode_varint(len(value))
        self._buffer += key[shared:]
        self._buffer += value

        self._last_key = key
        self._restart_counter += 1
        self._counter += 1

    def finish(self) -> bytes:
        """Return the serialised block: entries, restart offsets and their count."""
        out = bytearray(self._buffer)
        for restart in self._restarts:
            out += _U32.pack(restart)
        out += _U32.pack(len(self._restarts))
        return bytes(out)