"""Parsing of LD dictionary description files."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from .bitstream import RandomAccessStream, read_line
from .encoding import win1252_to_utf8

_REFERENCE_RE = re.compile(r"[^\r\n]([^\r\n]*?)\|([^\r\n]*?)\|([^\r\n]*?)")
_RANGE_RE = re.compile(r"D([^\r\n]+?) ([0-9]+) ([0-9]+)[^\r\n]*")

_LANGUAGE_CODES = {
    "deu": 1031,
    "enu": 1033,
    "fra": 1036,
    "esn": 1034,
    "ita": 1040,
    "rus": 1049,
}


@dataclass
class ReferenceRange:
    """A range of reference numbers stored in one file."""

    file_name: str
    first: int
    last: int


@dataclass
class ReferenceInfo:
    """A kind of cross reference."""

    type: str
    name: str
    code: str


@dataclass
class LdFile:
    """A parsed LD file."""

    base_file_name: str = ""
    name: str = ""
    source_language: str = ""
    source_language_code: int = -1
    target_language_code: int = -1
    references: list = field(default_factory=list)
    ranges: list = field(default_factory=list)


def parse_ld_file(stream: RandomAccessStream) -> LdFile:
    """Parse an LD file."""
    ld = LdFile(references=[ReferenceInfo("WEB", "Web", "W")])
    while (raw := read_line(stream)) is not None:
        raw = raw.strip()
        if not raw:
            continue
        line = win1252_to_utf8(raw)
        kind = line[0]
        if kind in "Gg":
            match = _REFERENCE_RE.fullmatch(line)
            if match is None:
                raise ValueError("LD parsing error")
            ld.references.append(ReferenceInfo(*match.groups()))
        elif kind == "B":
            ld.name = line[1:]
        elif kind == "S":
            ld.source_language = line[1:]
        elif kind == "K":
            ld.base_file_name = line[1:]
        elif kind == "D":
            match = _RANGE_RE.fullmatch(line)
            if match is None:
                raise ValueError("LD parsing error")
            ld.ranges.append(ReferenceRange(
                match.group(1),
                int(match.group(2)) & 0xFFFFFFFF,
                int(match.group(3)) & 0xFFFFFFFF,
            ))
    return ld


def duden_lang_to_code(lang: str) -> int:
    """Return the language code of a Duden language name, or 0."""
    return _LANGUAGE_CODES.get(lang, 0)


def update_language_codes(lds: list) -> None:
    """Set language codes of one LD file, or of a pair translating into each other.

    A single dictionary translates into German.
    """
    first = lds[0]
    second = lds[1] if len(lds) > 1 else None
    first_source = first.source_language
    second_source = second.source_language if second is not None else "deu"

    first.source_language_code = duden_lang_to_code(first_source)
    first.target_language_code = duden_lang_to_code(second_source)

    if second is not None:
        second.source_language_code = duden_lang_to_code(second_source)
        second.target_language_code = duden_lang_to_code(first_source)