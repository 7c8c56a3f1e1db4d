"""Random-access byte streams, a bit reader on top of them and small binary helpers."""

from __future__ import annotations

import struct
from abc import ABC, abstractmethod
from os import PathLike
from typing import BinaryIO

from .common import open_for_reading

_XOR_PAD = bytes((
    0x9C, 0xDF, 0x9B, 0xF3, 0xBE, 0x3A, 0x83, 0xD8,
    0xC9, 0xF5, 0x50, 0x98, 0x35, 0x4E, 0x7F, 0xBB,
    0x89, 0xC7, 0xE9, 0x6B, 0xC4, 0xC8, 0x4F, 0x85,
    0x1A, 0x10, 0x43, 0x66, 0x65, 0x57, 0x55, 0x54,
    0xB4, 0xFF, 0xD7, 0x17, 0x06, 0x31, 0xAC, 0x4B,
    0x42, 0x53, 0x5A, 0x46, 0xC5, 0xF8, 0xCA, 0x5E,
    0x18, 0x38, 0x5D, 0x91, 0xAA, 0xA5, 0x58, 0x23,
    0x67, 0xBF, 0x30, 0x3C, 0x8C, 0xCF, 0xD5, 0xA8,
    0x20, 0xEE, 0x0B, 0x8E, 0xA6, 0x5B, 0x49, 0x3F,
    0xC0, 0xF4, 0x13, 0x80, 0xCB, 0x7B, 0xA7, 0x1D,
    0x81, 0x8B, 0x01, 0xDD, 0xE3, 0x4C, 0x9A, 0xCE,
    0x40, 0x72, 0xDE, 0x0F, 0x26, 0xBD, 0x3B, 0xA3,
    0x05, 0x37, 0xE1, 0x5F, 0x9D, 0x1E, 0xCD, 0x69,
    0x6E, 0xAB, 0x6D, 0x6C, 0xC3, 0x71, 0x1F, 0xA9,
    0x84, 0x63, 0x45, 0x76, 0x25, 0x70, 0xD6, 0x8F,
    0xFD, 0x04, 0x2E, 0x2A, 0x22, 0xF0, 0xB8, 0xF2,
    0xB6, 0xD0, 0xDA, 0x62, 0x75, 0xB7, 0x77, 0x34,
    0xA2, 0x41, 0xB9, 0xB1, 0x74, 0xE4, 0x95, 0x1B,
    0x3E, 0xE7, 0x00, 0xBC, 0x93, 0x7A, 0xE8, 0x86,
    0x59, 0xA0, 0x92, 0x11, 0xF7, 0xFE, 0x03, 0x2F,
    0x28, 0xFA, 0x27, 0x02, 0xE5, 0x39, 0x21, 0x96,
    0x33, 0xD1, 0xB2, 0x7C, 0xB3, 0x73, 0xC6, 0xE6,
    0xA1, 0x52, 0xFB, 0xD4, 0x9E, 0xB0, 0xE2, 0x16,
    0x97, 0x08, 0xF6, 0x4A, 0x78, 0x29, 0x14, 0x12,
    0x4D, 0xC1, 0x99, 0xBA, 0x0D, 0x3D, 0xEF, 0x19,
    0xAF, 0xF9, 0x6F, 0x0A, 0x6A, 0x47, 0x36, 0x82,
    0x07, 0x9F, 0x7D, 0xA4, 0xEA, 0x44, 0x09, 0x5C,
    0x8D, 0xCC, 0x87, 0x88, 0x2D, 0x8A, 0xEB, 0x2C,
    0xB5, 0xE0, 0x32, 0xAD, 0xD3, 0x61, 0xAE, 0x15,
    0x60, 0xF1, 0x48, 0x0E, 0x7E, 0x94, 0x51, 0x0C,
    0xEC, 0xDB, 0xD2, 0x64, 0xDC, 0xFC, 0xC2, 0x56,
    0x24, 0xED, 0x2B, 0xD9, 0x1C, 0x68, 0x90, 0x79,
))

_INITIAL_KEY = 0x7F


class RandomAccessStream(ABC):
    """A seekable source of bytes."""

    @abstractmethod
    def read_some(self, count: int) -> bytes:
        """Read up to ``count`` bytes; fewer are returned at the end of the stream."""

    @abstractmethod
    def seek(self, pos: int) -> None:
        """Move to an absolute byte position."""

    @abstractmethod
    def tell(self) -> int:
        """Return the current byte position."""


class InMemoryStream(RandomAccessStream):
    """A stream over a bytes-like buffer."""

    def __init__(self, data: bytes) -> None:
        self._buf = bytes(data)
        self._pos = 0

    def read_some(self, count: int) -> bytes:
        chunk = self._buf[self._pos:self._pos + count]
        self._pos += len(chunk)
        return chunk

    def seek(self, pos: int) -> None:
        if not 0 <= pos <= len(self._buf):
            raise ValueError(f"seek position {pos} is outside the buffer")
        self._pos = pos

    def tell(self) -> int:
        return self._pos


class FileStream(RandomAccessStream):
    """A stream reading a file opened in binary mode."""

    def __init__(self, path: str | PathLike) -> None:
        self._file: BinaryIO = open_for_reading(path)
        self._pos = 0

    def read_some(self, count: int) -> bytes:
        chunk = self._file.read(count)
        self._pos += len(chunk)
        return chunk

    def seek(self, pos: int) -> None:
        if self._pos != pos:
            self._file.seek(pos)
            self._pos = pos

    def tell(self) -> int:
        return self._pos

    def close(self) -> None:
        self._file.close()

    def __enter__(self) -> "FileStream":
        return self

    def __exit__(self, *args) -> None:
        self.close()


class BitStreamAdapter(RandomAccessStream):
    """Reads a wrapped stream bit by bit, most significant bit first."""

    def __init__(self, stream: RandomAccessStream) -> None:
        self._stream = stream
        self._bit_pos = 0
        self._cache = 0

    def _read_bit(self) -> int:
        if self._bit_pos == 0:
            byte = self.read_some(1)
            if byte:
                self._cache = byte[0]
        bit = (self._cache >> (7 - self._bit_pos)) & 1
        self._bit_pos = (self._bit_pos + 1) % 8
        return bit

    def read(self, count: int) -> int:
        """Read ``count`` bits and return them as an unsigned integer."""
        result = 0
        for _ in range(count):
            result = (result << 1) | self._read_bit()
        return result

    def read_some(self, count: int) -> bytes:
        return self._stream.read_some(count)

    def seek(self, pos: int) -> None:
        self._stream.seek(pos)
        self._bit_pos = 0

    def tell(self) -> int:
        return self._stream.tell()

    def to_nearest_byte(self) -> None:
        """Discard the rest of the current byte."""
        self._bit_pos = 0


class XoringStreamAdapter(BitStreamAdapter):
    """A bit reader that descrambles bytes with a running XOR key."""

    def __init__(self, stream: RandomAccessStream) -> None:
        super().__init__(stream)
        self._key = _INITIAL_KEY

    def read_some(self, count: int) -> bytes:
        raw = super().read_some(count)
        out = bytearray(len(raw))
        for i, byte in enumerate(raw):
            out[i] = byte ^ self._key
            self._key = _XOR_PAD[byte]
        return bytes(out)

    def seek(self, pos: int) -> None:
        super().seek(pos)
        self._key = _INITIAL_KEY


def _read_exact(stream: RandomAccessStream, fmt: str) -> int:
    size = struct.calcsize(fmt)
    data = stream.read_some(size)
    if len(data) != size:
        raise EOFError(f"expected {size} bytes, got {len(data)}")
    return struct.unpack(fmt, data)[0]


def read8(stream: RandomAccessStream) -> int:
    """Read an unsigned byte."""
    return _read_exact(stream, "<B")


def read16(stream: RandomAccessStream) -> int:
    """Read a little-endian unsigned 16-bit integer."""
    return _read_exact(stream, "<H")


def read32(stream: RandomAccessStream) -> int:
    """Read a little-endian unsigned 32-bit integer."""
    return _read_exact(stream, "<I")


def peek32(stream: RandomAccessStream) -> int:
    """Read a 32-bit integer without moving the stream position."""
    value = read32(stream)
    stream.seek(stream.tell() - 4)
    return value


def read_line(stream: RandomAccessStream, sep: bytes = b"\n") -> bytes | None:
    """Read bytes up to ``sep`` (not included); return None at the end of the stream."""
    line = bytearray()
    while True:
        ch = stream.read_some(1)
        if not ch:
            return bytes(line) if line else None
        if ch == sep:
            return bytes(line)
        line += ch