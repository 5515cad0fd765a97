"""Varint coding and block handles that point into table files."""

from __future__ import annotations

from dataclasses import dataclass

_MAX_VARINT_LEN = 10


def encode_varint(value: int) -> bytes:
    """Encode a non-negative integer as a little-endian base-128 varint."""
    if value < 0:
        raise ValueError("varints encode non-negative integers only")
    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def decode_varint(data: bytes, offset: int = 0) -> tuple[int, int]:
    """Decode a varint starting at offset; return (value, number of bytes read)."""
    value = 0
    shift = 0
    for count, byte in enumerate(memoryview(data)[offset : offset + _MAX_VARINT_LEN], 1):
        value |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return value, count
        shift += 7
    raise ValueError("truncated or overlong varint")


@dataclass(frozen=True)
class BlockHandle:
    """An offset and a size locating a block inside a table file."""

    offset: int
    size: int

    @classmethod
    def decode(cls, data: bytes) -> tuple[BlockHandle, int]:
        """Decode a handle from the start of data; return it and the bytes consumed."""
        offset, offset_len = decode_varint(data, 0)
        size, size_len = decode_varint(data, offset_len)
        return cls(offset, size), offset_len + size_len

    def encode(self) -> bytes:
        """Return the handle encoded as two varints."""
        return encode_varint(self.offset) + encode_varint(self.size)