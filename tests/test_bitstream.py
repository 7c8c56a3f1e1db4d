import struct

import pytest

from lsd2dsl.bitstream import (
    BitStreamAdapter,
    FileStream,
    InMemoryStream,
    XoringStreamAdapter,
    peek32,
    read8,
    read16,
    read32,
    read_line,
)


def test_in_memory_read_some_and_tell():
    stream = InMemoryStream(b"abcdef")
    assert stream.read_some(4) == b"abcd"
    assert stream.tell() == 4
    assert stream.read_some(10) == b"ef"
    assert stream.tell() == 6
    assert stream.read_some(1) == b""


def test_in_memory_seek():
    stream = InMemoryStream(b"abcdef")
    stream.seek(2)
    assert stream.read_some(2) == b"cd"
    stream.seek(6)
    assert stream.read_some(1) == b""


def test_in_memory_seek_past_end_raises():
    stream = InMemoryStream(b"abc")
    with pytest.raises(ValueError):
        stream.seek(4)


def test_read_integers_little_endian():
    data = struct.pack("<BHI", 0xAB, 0xBEEF, 0xDEADBEEF)
    stream = InMemoryStream(data)
    assert read8(stream) == 0xAB
    assert read16(stream) == 0xBEEF
    assert read32(stream) == 0xDEADBEEF
    assert stream.tell() == len(data)


def test_read_past_end_raises():
    stream = InMemoryStream(b"\x01\x02")
    with pytest.raises(EOFError):
        read32(stream)


def test_peek32_does_not_advance():
    stream = InMemoryStream(struct.pack("<II", 0xA1A1A1A1, 7))
    assert peek32(stream) == 0xA1A1A1A1
    assert stream.tell() == 0
    assert read32(stream) == 0xA1A1A1A1
    assert peek32(stream) == 7
    assert stream.tell() == 4


def test_read_line_splits_lines():
    stream = InMemoryStream(b"one\n\ntwo")
    assert read_line(stream) == b"one"
    assert read_line(stream) == b""
    assert read_line(stream) == b"two"
    assert read_line(stream) is None


def test_read_line_custom_separator():
    stream = InMemoryStream(b"head\x00tail\x00")
    assert read_line(stream, b"\x00") == b"head"
    assert read_line(stream, b"\x00") == b"tail"
    assert read_line(stream, b"\x00") is None


def test_bit_reading_msb_first():
    bits = BitStreamAdapter(InMemoryStream(bytes([0b10100101])))
    assert bits.read(1) == 0b1
    assert bits.read(3) == 0b010
    assert bits.read(4) == 0b0101


def test_bit_reading_across_bytes():
    bits = BitStreamAdapter(InMemoryStream(struct.pack(">HI", 0x1234, 0xCAFEBABE)))
    assert bits.read(16) == 0x1234
    assert bits.read(32) == 0xCAFEBABE


def test_to_nearest_byte_skips_rest_of_byte():
    bits = BitStreamAdapter(InMemoryStream(bytes([0xFF, 0x42])))
    bits.read(3)
    bits.to_nearest_byte()
    assert bits.read(8) == 0x42


def test_bit_adapter_seek_resets_bit_position():
    bits = BitStreamAdapter(InMemoryStream(bytes([0x0F, 0xF0])))
    bits.read(5)
    bits.seek(1)
    assert bits.tell() == 1
    assert bits.read(8) == 0xF0


def test_xoring_uses_initial_key_and_pad():
    stream = XoringStreamAdapter(InMemoryStream(b"\x00\x00"))
    assert stream.read_some(2) == b"\x7f\x9c"


def test_xoring_seek_resets_key():
    data = bytes(range(40))
    stream = XoringStreamAdapter(InMemoryStream(data))
    first = stream.read_some(40)
    stream.seek(0)
    assert stream.read_some(40) == first


def test_xoring_chunked_equals_whole():
    data = bytes((i * 37) % 256 for i in range(64))
    whole = XoringStreamAdapter(InMemoryStream(data)).read_some(64)
    chunked_stream = XoringStreamAdapter(InMemoryStream(data))
    chunked = b"".join(chunked_stream.read_some(n) for n in (1, 7, 20, 36))
    assert chunked == whole


def test_xoring_bits_come_from_descrambled_bytes():
    data = bytes([0x12, 0x34, 0x56])
    plain = XoringStreamAdapter(InMemoryStream(data)).read_some(3)
    bits = XoringStreamAdapter(InMemoryStream(data))
    assert bits.read(24) == int.from_bytes(plain, "big")


def test_file_stream(tmp_path):
    path = tmp_path / "data.bin"
    path.write_bytes(b"0123456789")
    with FileStream(path) as stream:
        assert stream.read_some(3) == b"012"
        assert stream.tell() == 3
        stream.seek(7)
        assert stream.read_some(10) == b"789"
        assert stream.tell() == 10


def test_file_stream_missing_file(tmp_path):
    with pytest.raises(OSError):
        FileStream(tmp_path / "missing.bin")