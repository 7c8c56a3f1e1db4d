"""Parsing of FSI resource directory files."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from .bitstream import RandomAccessStream, peek32, read8, read16, read32
from .encoding import win1252_to_utf8

_BLOCK_SIZE = 0x400
_BLOCK_COUNT_OFFSET = 0x12
_ENTRY_BLOCK_TYPE = 0xC
_LAST_MARK = 0xA1
_END_SENTINEL = 0xA1A1A1A1
_ENTRY_RE = re.compile(rb"([^\n\r]+?);([0-9]+)")


@dataclass(frozen=True, order=True)
class FsiEntry:
    """A named resource at an offset in an archive; ordered by offset and size."""

    name: str = field(compare=False)
    offset: int
    size: int


def _parse_entry(raw: bytes) -> tuple[bytes, int]:
    match = _ENTRY_RE.fullmatch(raw)
    if match is None:
        raise ValueError("parsing error")
    return match.group(1), int(match.group(2)) & 0xFFFFFFFF


def _parse_string(stream: RandomAccessStream) -> tuple[bool, bytes]:
    text = bytearray()
    while True:
        byte = read8(stream)
        if byte == _LAST_MARK:
            return True, bytes(text)
        if byte == 0:
            return False, bytes(text)
        text.append(byte)


def parse_fsi_block(stream: RandomAccessStream) -> list[FsiEntry]:
    """Parse one FSI block at the current position."""
    block_type = read16(stream)
    read32(stream)
    raw_count = read16(stream)
    entries: list[FsiEntry] = []
    if block_type != _ENTRY_BLOCK_TYPE:
        return entries
    stream.seek(stream.tell() + 7)
    for _ in range(raw_count * 2):
        offset = read32(stream)
        last, text = _parse_string(stream)
        if not text:
            if offset == 0:
                break
            read8(stream)
            last, text = _parse_string(stream)
        if offset == 0 and not text:
            break
        name, size = _parse_entry(text)
        entries.append(FsiEntry(win1252_to_utf8(name), offset, size))
        if last or peek32(stream) == _END_SENTINEL:
            break
        read8(stream)
    return entries


def parse_fsi_file(stream: RandomAccessStream) -> list[FsiEntry]:
    """Parse all blocks; return entries unique by offset and size, in order."""
    stream.seek(_BLOCK_COUNT_OFFSET)
    block_count = read16(stream)
    unique: dict[tuple[int, int], FsiEntry] = {}
    for number in range(1, block_count + 1):
        stream.seek(number * _BLOCK_SIZE)
        for entry in parse_fsi_block(stream):
            unique.setdefault((entry.offset, entry.size), entry)
    return sorted(unique.values())