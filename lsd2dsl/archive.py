"""Readers for block-compressed BOF/IDX archives and plain FSD blobs."""

from __future__ import annotations

import struct
import zlib

from .bitstream import RandomAccessStream

DECODED_BLOCK_SIZE = 0x2000
_MAX_INFLATED_SIZE = 32 << 10
_FSD_DECODED_SIZE = 0xFFFFFFFF


def decode_bof_block(block: bytes) -> bytes:
    """Inflate one raw-deflate compressed block."""
    inflater = zlib.decompressobj(-zlib.MAX_WBITS)
    try:
        output = inflater.decompress(bytes(block), _MAX_INFLATED_SIZE)
    except zlib.error as exc:
        raise ValueError("inflate failed") from exc
    if inflater.unconsumed_tail or not inflater.eof:
        raise ValueError("inflate failed")
    return output


def parse_index(stream: RandomAccessStream) -> list[int]:
    """Read little-endian 32-bit entries until the stream runs out."""
    values = []
    while True:
        chunk = stream.read_some(4)
        if len(chunk) != 4:
            return values
        values.append(struct.unpack("<I", chunk)[0])


class Archive:
    """Random access to the decoded contents of a BOF file described by an IDX file."""

    def __init__(self, index: RandomAccessStream, bof: RandomAccessStream) -> None:
        self._index = parse_index(index)
        if not self._index:
            raise ValueError("empty archive index")
        self._decoded_size = self._index.pop()
        self._bof = bof
        self._last_block: int | None = None
        self._block = b""

    def _read_block(self, number: int) -> bool:
        if number == self._last_block:
            return True
        if number + 1 >= len(self._index):
            return False
        offset = self._index[number]
        size = self._index[number + 1] - offset
        if size <= 0:
            return False
        self._bof.seek(offset)
        decoded = decode_bof_block(self._bof.read_some(size))
        if len(decoded) > DECODED_BLOCK_SIZE:
            raise ValueError("bof block is too large")
        self._block = decoded
        self._last_block = number
        return True

    def read(self, plain_offset: int, size: int) -> bytes:
        """Read ``size`` decoded bytes; a negative size reads to the end."""
        if plain_offset >= self._decoded_size:
            raise ValueError("reading past the end of archive")
        output = bytearray()
        block, offset = divmod(plain_offset, DECODED_BLOCK_SIZE)
        while (size < 0 or len(output) != size) and self._read_block(block):
            chunk = self._block[offset:]
            if size >= 0:
                chunk = chunk[:size - len(output)]
            output += chunk
            block += 1
            offset = 0
        return bytes(output)

    def decoded_size(self) -> int:
        """Total size of the decoded contents."""
        return self._decoded_size


class FsdFile:
    """Uncompressed resource blob read directly by offset."""

    def __init__(self, stream: RandomAccessStream) -> None:
        self._stream = stream

    def read(self, plain_offset: int, size: int) -> bytes:
        """Read ``size`` bytes, zero-padded if the blob ends early."""
        self._stream.seek(plain_offset)
        return self._stream.read_some(size).ljust(size, b"\0")

    def decoded_size(self) -> int:
        """The blob has no known size limit."""
        return _FSD_DECODED_SIZE