import struct
import zlib

import pytest

from lsd2dsl.archive import (
    DECODED_BLOCK_SIZE,
    Archive,
    FsdFile,
    decode_bof_block,
    parse_index,
)
from lsd2dsl.bitstream import InMemoryStream


def _deflate(data):
    comp = zlib.compressobj(wbits=-15)
    return comp.compress(data) + comp.flush()


def _build(data, block_size=DECODED_BLOCK_SIZE):
    bof = b""
    offsets = []
    for start in range(0, len(data), block_size):
        offsets.append(len(bof))
        bof += _deflate(data[start:start + block_size])
    offsets.append(len(bof))
    offsets.append(len(data))
    index = struct.pack(f"<{len(offsets)}I", *offsets)
    return Archive(InMemoryStream(index), InMemoryStream(bof))


DATA = bytes(range(256)) * 100


def test_decode_bof_block_round_trip():
    payload = b"abcdef" * 500
    assert decode_bof_block(_deflate(payload)) == payload


def test_decode_bof_block_garbage_raises():
    with pytest.raises(ValueError):
        decode_bof_block(b"\xff\xff\xff\xff")


def test_decode_bof_block_too_large_raises():
    with pytest.raises(ValueError):
        decode_bof_block(_deflate(b"\0" * 40000))


def test_parse_index_ignores_trailing_bytes():
    raw = struct.pack("<3I", 1, 2, 0xFFFFFFFF) + b"\x01\x02"
    assert parse_index(InMemoryStream(raw)) == [1, 2, 0xFFFFFFFF]


def test_decoded_size():
    assert _build(DATA).decoded_size() == len(DATA)


def test_read_within_block():
    archive = _build(DATA)
    assert archive.read(10, 20) == DATA[10:30]


def test_read_across_blocks():
    archive = _build(DATA)
    start = DECODED_BLOCK_SIZE - 16
    assert archive.read(start, 64) == DATA[start:start + 64]


def test_read_all():
    archive = _build(DATA)
    assert archive.read(0, -1) == DATA


def test_read_clipped_at_end():
    archive = _build(DATA)
    start = len(DATA) - 5
    assert archive.read(start, 100) == DATA[start:]


def test_read_past_end_raises():
    archive = _build(DATA)
    with pytest.raises(ValueError):
        archive.read(len(DATA), 1)


def test_oversized_block_raises():
    archive = _build(b"x" * (DECODED_BLOCK_SIZE + 1), block_size=DECODED_BLOCK_SIZE + 1)
    with pytest.raises(ValueError):
        archive.read(0, 1)


def test_empty_index_raises():
    with pytest.raises(ValueError):
        Archive(InMemoryStream(b""), InMemoryStream(b""))


def test_fsd_read_and_padding():
    fsd = FsdFile(InMemoryStream(b"abcdef"))
    assert fsd.read(2, 3) == b"cde"
    assert fsd.read(4, 5) == b"ef\0\0\0"


def test_fsd_decoded_size_unbounded():
    assert FsdFile(InMemoryStream(b"")).decoded_size() == 0xFFFFFFFF