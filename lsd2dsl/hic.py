"""Parsing of HIC heading hierarchy files and grouping of their headings."""

from __future__ import annotations

import re
import struct
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional, Union

from .bitstream import RandomAccessStream, read8, read16, read32, read_line
from .encoding import duden_to_utf8, win1252_to_utf8

_MAGIC = b"compressed PC-Bibliothek Hierarchy"
_HEADER_CORE_SIZE = 20
_HEADER_PREFIX_SIZES = {3: 0, 4: 14}
_LATEST_HEADER_PREFIX_SIZE = 18

_DOT = "[^\\n\\r\\u2028\\u2029]"
_HEADING_RE = re.compile(
    rf"({_DOT}*?)( \$\$\$\$\s+(-?[0-9]+)\s([0-9]+)\s-?[0-9]+(\s-?[0-9]+)?)?"
)


class HicEntryType(IntEnum):
    """Kinds of HIC leaf entries."""

    PLAIN = 1
    REFERENCE = 2
    PLAIN3 = 3
    RANGE = 4
    PERSON = 6
    VARIANT_WITH = 7
    VARIANT_WITHOUT = 8
    VARIANT = 10
    UNKNOWN11 = 11


def _entry_type(value: int) -> Union[HicEntryType, int]:
    try:
        return HicEntryType(value)
    except ValueError:
        return value


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value >= 1 << 31 else value


@dataclass
class HicLeaf:
    """A heading pointing into the article text."""

    heading: str
    type: Union[HicEntryType, int]
    text_offset: int


@dataclass
class HicNode:
    """A heading pointing to a child page."""

    heading: str
    page: Optional["HicPage"]
    count: int
    delta: int
    hic_offset: int


HicEntry = Union[HicLeaf, HicNode]


@dataclass
class HicPage:
    """One block of the hierarchy, at its file offset."""

    offset: int
    entries: list = field(default_factory=list)


@dataclass
class HicFile:
    """A parsed HIC file."""

    name: str
    version: int
    root: Optional[HicPage] = None


@dataclass
class HeadingGroup:
    """Headings that share one article."""

    headings: list = field(default_factory=list)
    article_size: int = -1


def _decode_heading_prefixes(raw: list[bytes]) -> list[bytes]:
    decoded = []
    current = b""
    for heading in raw:
        if heading and heading[0] < 0x20:
            heading = current[:heading[0]] + heading[1:]
        decoded.append(heading)
        current = heading
    return decoded


def _read_headings(stream: RandomAccessStream, entries: list) -> None:
    raw = [read_line(stream, b"\0") or b"" for _ in entries]
    for entry, heading in zip(entries, _decode_heading_prefixes(raw)):
        entry.heading = duden_to_utf8(heading)


def parse_hic_node6(stream: RandomAccessStream) -> list:
    """Parse one page of a version 6 or later HIC file."""
    count = read8(stream)
    if not count:
        raise ValueError("empty hic node")
    entries: list = []
    for _ in range(count):
        raw = read32(stream)
        type_byte = read8(stream)
        if raw & 1 == 0:
            entries.append(HicLeaf("", _entry_type(type_byte >> 4),
                                   ((raw >> 1) - 1) & 0xFFFFFFFF))
        else:
            delta = _to_int32(read32(stream))
            entries.append(HicNode("", None, type_byte, delta, raw >> 1))
    _read_headings(stream, entries)
    return entries


def parse_hic_node45(stream: RandomAccessStream) -> list:
    """Parse one page of a version 3 to 5 HIC file."""
    count = read8(stream)
    entries: list = []
    for _ in range(count):
        raw = read32(stream)
        if raw & 1 == 0:
            entries.append(HicLeaf("", _entry_type((raw >> 1) & 0xF),
                                   ((raw >> 5) - 1) & 0xFFFFFFFF))
        else:
            delta = _to_int32(read32(stream))
            entries.append(HicNode("", None, (raw >> 1) & 0xF, delta, raw >> 9))
    _read_headings(stream, entries)
    return entries


def _read_header(stream: RandomAccessStream, version: int) -> tuple[int, int, int]:
    prefix = _HEADER_PREFIX_SIZES.get(version, _LATEST_HEADER_PREFIX_SIZE)
    size = prefix + _HEADER_CORE_SIZE
    data = stream.read_some(size)
    if len(data) != size:
        raise ValueError("truncated HIC header")
    heading_count, block_count = struct.unpack_from("<II", data, prefix)
    return heading_count, block_count, data[-1]


def parse_hic_file(stream: RandomAccessStream) -> HicFile:
    """Parse a HIC file and link its pages into a tree."""
    if stream.read_some(len(_MAGIC)) != _MAGIC:
        raise ValueError("not a HIC file")
    read8(stream)
    version = read8(stream)
    if version < 3:
        raise ValueError("unsupported version")

    _heading_count, block_count, name_length = _read_header(stream, version)
    if name_length < 1:
        raise ValueError("invalid HIC name length")
    name = win1252_to_utf8(stream.read_some(name_length - 1))
    read8(stream)
    hic = HicFile(name, version)

    parse_node = parse_hic_node6 if version >= 6 else parse_hic_node45
    pages: dict[int, HicPage] = {}
    for block in range(block_count):
        position = stream.tell()
        node_size = read16(stream)
        entries = parse_node(stream)
        stream.seek(position + node_size + 2)
        page = HicPage(position, entries)
        pages[position] = page
        if block == 0:
            hic.root = page

    for page in pages.values():
        for entry in page.entries:
            if isinstance(entry, HicNode):
                child = pages.get(entry.hic_offset)
                if child is None:
                    raise ValueError("hic is misformed")
                entry.page = child

    return hic


def _parse_heading(heading: str) -> Optional[tuple[str, int]]:
    match = _HEADING_RE.fullmatch(heading)
    if match is None:
        raise ValueError("can't parse heading")
    if match.group(5):
        return None
    offset = int(match.group(4)) - 1 if match.group(4) else -1
    return match.group(1), offset


def group_hic_entries(entries) -> dict[int, HeadingGroup]:
    """Group leaf headings by article offset, ordered by offset.

    Each group's article size is the distance to the next group; the last
    group keeps -1.
    """
    groups: dict[int, HeadingGroup] = {}
    for entry in entries:
        parsed = _parse_heading(entry.heading)
        if parsed is None:
            continue
        name, offset = parsed
        if offset == -1:
            offset = entry.text_offset
        if entry.type == HicEntryType.VARIANT:
            continue
        groups.setdefault(_to_int32(offset), HeadingGroup()).headings.append(name)

    ordered = dict(sorted(groups.items()))
    keys = list(ordered)
    for key, next_key in zip(keys, keys[1:]):
        ordered[key].article_size = next_key - key
    for group in ordered.values():
        group.headings.sort()
    return ordered