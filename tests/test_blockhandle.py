import pytest

from ldbcore.blockhandle import BlockHandle, decode_varint, encode_varint


def test_blockhandle_round_trip():
    bh = BlockHandle(890, 777)
    encoded = bh.encode()
    buf = encoded + bytes(128 - len(encoded))

    bh2, consumed = BlockHandle.decode(buf)

    assert consumed == len(encoded)
    assert bh2.size == bh.size
    assert bh2.offset == bh.offset
    assert bh2 == bh


@pytest.mark.parametrize(
    ("value", "encoded"),
    [(0, b"\x00"), (1, b"\x01"), (127, b"\x7f"), (128, b"\x80\x01"), (300, b"\xac\x02")],
)
def test_varint_known_encodings(value, encoded):
    assert encode_varint(value) == encoded
    assert decode_varint(encoded) == (value, len(encoded))


@pytest.mark.parametrize("value", [0, 5, 2**14, 2**32 - 1, 2**63, 2**64 - 1])
def test_varint_round_trip(value):
    enc = encode_varint(value)
    assert decode_varint(enc, 0) == (value, len(enc))


def test_varint_decode_at_offset():
    data = b"zz" + encode_varint(890) + b"tail"
    assert decode_varint(data, 2) == (890, 2)


def test_varint_negative_rejected():
    with pytest.raises(ValueError):
        encode_varint(-1)


def test_varint_truncated_rejected():
    with pytest.raises(ValueError):
        decode_varint(b"\x80\x80")


def test_varint_empty_rejected():
    with pytest.raises(ValueError):
        decode_varint(b"")


def test_blockhandle_truncated_rejected():
    with pytest.raises(ValueError):
        BlockHandle.decode(encode_varint(890))


def test_blockhandle_encoding_bytes():
    assert BlockHandle(0, 300).encode() == b"\x00\xac\x02"