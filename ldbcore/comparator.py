"""Key comparators that define the sort order of keys."""

from __future__ import annotations

from abc import ABC, abstractmethod


class Comparator(ABC):
    """Orders byte strings and derives short keys that respect that order."""

    name: str = ""

    @abstractmethod
    def compare(self, a: bytes, b: bytes) -> int:
        """Return a negative number, zero or a positive number as a < b, a == b or a > b."""

    @abstractmethod
    def find_shortest_sep(self, start: bytes, limit: bytes) -> bytes:
        """Return a short key that is >= start and < limit (start when they are equal)."""

    @abstractmethod
    def find_short_succ(self, key: bytes) -> bytes:
        """Return a short key that compares greater than or equal to key."""


class BytewiseComparator(Comparator):
    """Orders keys lexicographically by their unsigned bytes."""

    name = "leveldb.BytewiseComparator"

    def compare(self, a: bytes, b: bytes) -> int:
        a, b = bytes(a), bytes(b)
        return (a > b) - (a < b)

    def find_shortest_sep(self, start: bytes, limit: bytes) -> bytes:
        start, limit = bytes(start), bytes(limit)
        if start == limit:
            return start

        shortest = min(len(start), len(limit))
        diff_at = 0
        while diff_at < shortest and start[diff_at] == limit[diff_at]:
            diff_at += 1

        # Prefer cutting the key right after a byte that can be bumped by one.
        for pos in range(diff_at, shortest):
            byte = start[pos]
            if byte < 0xFF and byte + 1 < limit[pos]:
                sep = bytearray(start[: pos + 1])
                sep[pos] += 1
                return bytes(sep)

        sep = bytearray(start)
        if sep:
            i = len(sep) - 1
            while i > 0 and sep[i] == 0xFF:
                i -= 1
            if sep[i] < 0xFF:
                sep[i] += 1
                if self.compare(sep, limit) < 0:
                    return bytes(sep)
                sep[i] -= 1

        # Fallback: appending a zero byte yields a key just above start.
        sep.append(0)
        return bytes(sep)

    def find_short_succ(self, key: bytes) -> bytes:
        key = bytes(key)
        for pos, byte in enumerate(key):
            if byte != 0xFF:
                return key[:pos] + bytes([byte + 1])
        return key + b"\xff"