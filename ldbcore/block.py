"""Reading of blocks made of prefix-compressed key/value entries.

A block is a sequence of ENTRIES followed by RESTARTS and a fixed little-endian
u32 holding the number of restarts. An entry is three varints (SHARED,
NON_SHARED, VALSIZE) followed by the non-shared part of the key and the value.
A restart is a fixed u32 offset of an entry whose key is stored in full.
"""

from __future__ import annotations

import struct
from collections.abc import Iterator

from ldbcore.blockhandle import decode_varint
from ldbcore.comparator import BytewiseComparator, Comparator

_U32 = struct.Struct("<I")


class Block:
    """An immutable, ordered set of key/value entries."""

    def __init__(self, contents: bytes, comparator: Comparator | None = None) -> None:
        contents = bytes(contents)
        if len(contents) <= 4:
            raise ValueError("block is too short to hold a restart count")
        (restarts,) = _U32.unpack_from(contents, len(contents) - 4)
        if len(contents) - 4 - 4 * restarts < 0:
            raise ValueError("block restart count exceeds block size")
        self.contents = contents
        self.comparator = comparator if comparator is not None else BytewiseComparator()

    def iter(self) -> BlockIterator:
        """Return a new iterator over the entries of this block."""
        return BlockIterator(self.contents, self.comparator)

    def __iter__(self) -> Iterator[tuple[bytes, bytes]]:
        return self.iter()


class BlockIterator:
    """A bidirectional, seekable iterator over the entries of a block.

    The iterator starts out positioned before the first entry; ``advance``
    moves to the next entry and ``current`` returns the entry it points to.
    """

    def __init__(self, contents: bytes, comparator: Comparator) -> None:
        self._block = contents
        self._cmp = comparator
        self._num_restarts = _U32.unpack_from(contents, len(contents) - 4)[0]
        self._restarts_off = len(contents) - 4 - 4 * self._num_restarts

        self._offset = 0
        self._current_entry_offset = 0
        self._current_restart_ix = 0
        self._key = b""
        self._val_offset = 0

    # Internal helpers

    def _restart_point(self, ix: int) -> int:
        return _U32.unpack_from(self._block, self._restarts_off + 4 * ix)[0]

    def _parse_entry_and_advance(self) -> tuple[int, int, int, int]:
        """Parse the entry header at the current offset and move past the entry.

        Returns SHARED, NON_SHARED, VALSIZE and the length of the header.
        """
        try:
            shared, n1 = decode_varint(self._block, self._offset)
            non_shared, n2 = decode_varint(self._block, self._offset + n1)
            valsize, n3 = decode_varint(self._block, self._offset + n1 + n2)
        except ValueError as exc:
            raise ValueError(f"corrupt block entry at offset {self._offset}") from exc
        head_len = n1 + n2 + n3
        self._val_offset = self._offset + head_len + non_shared
        self._offset = self._val_offset + valsize
        return shared, non_shared, valsize, head_len

    def _assemble_key(self, off: int, shared: int, non_shared: int) -> None:
        self._key = self._key[:shared] + self._block[off : off + non_shared]

    def _seek_to_restart_point(self, ix: int) -> None:
        off = self._restart_point(ix)
        self._offset = off
        self._current_entry_offset = off
        self._current_restart_ix = ix
        shared, non_shared, _, head_len = self._parse_entry_and_advance()
        if shared != 0:
            raise ValueError("corrupt block: restart entry shares a key prefix")
        self._assemble_key(off + head_len, shared, non_shared)

    # Public interface

    def advance(self) -> bool:
        """Move to the next entry; return False (and reset) when past the end."""
        if self._offset >= self._restarts_off:
            self.reset()
            return False
        self._current_entry_offset = self._offset
        current_off = self._current_entry_offset

        shared, non_shared, _, head_len = self._parse_entry_and_advance()
        self._assemble_key(current_off + head_len, shared, non_shared)

        while (
            self._current_restart_ix + 1 < self._num_restarts
            and self._restart_point(self._current_restart_ix + 1) < self._current_entry_offset
        ):
            self._current_restart_ix += 1
        return True

    def prev(self) -> bool:
        """Move to the previous entry; return False (and reset) at the beginning."""
        orig_offset = self._current_entry_offset
        if orig_offset == 0:
            self.reset()
            return False

        while (
            self._current_restart_ix > 0
            and self._restart_point(self._current_restart_ix) >= orig_offset
        ):
            self._current_restart_ix -= 1

        self._offset = self._restart_point(self._current_restart_ix)
        result = False
        # Scan forward until the next entry would be the original one.
        while True:
            result = self.advance()
            if self._offset >= orig_offset:
                break
        return result

    def seek(self, target: bytes) -> None:
        """Position at the first entry whose key is >= target, or become invalid."""
        target = bytes(target)
        self.reset()

        left = 0
        right = self._num_restarts - 1 if self._num_restarts else 0
        while left < right:
            middle = (left + right + 1) // 2
            self._seek_to_restart_point(middle)
            if self._cmp.compare(self._key, target) < 0:
                left = middle
            else:
                right = middle - 1

        self._current_restart_ix = left
        self._offset = self._restart_point(left) if self._num_restarts else 0

        while self.advance():
            entry = self.current()
            if entry is None:
                return
            if self._cmp.compare(entry[0], target) >= 0:
                return

    def seek_to_last(self) -> None:
        """Position at the last entry of the block."""
        if self._restarts_off == 0:
            self.reset()
            return
        if self._num_restarts > 0:
            self._seek_to_restart_point(self._num_restarts - 1)
        else:
            self.reset()
        # Stop at the last entry, before the iterator runs off the end.
        while self._offset < self._restarts_off:
            self.advance()

    def reset(self) -> None:
        """Return to the position before the first entry."""
        self._offset = 0
        self._val_offset = 0
        self._current_restart_ix = 0
        self._key = b""

    def valid(self) -> bool:
        """Whether the iterator points at an entry."""
        return bool(self._key) and 0 < self._val_offset <= self._restarts_off

    def current(self) -> tuple[bytes, bytes] | None:
        """Return the (key, value) pair at the current position, or None."""
        if not self.valid():
            return None
        return self._key, self._block[self._val_offset : self._offset]

    def __iter__(self) -> BlockIterator:
        return self

    def __next__(self) -> tuple[bytes, bytes]:
        if not self.advance():
            raise StopIteration
        entry = self.current()
        if entry is None:
            raise StopIteration
        return entry