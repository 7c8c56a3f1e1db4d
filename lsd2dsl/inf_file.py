"""Parsing of INF files that list the dictionaries and resource archives of a Duden product."""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import PurePath

from .bitstream import RandomAccessStream, read_line
from .encoding import win1252_to_utf8
from .filesystem import CaseInsensitiveSet
from .ld_file import parse_ld_file

_HEX_RE = re.compile(r"\s*([+-]?)(?:0[xX](?=[0-9a-fA-F]))?([0-9a-fA-F]+)")


@dataclass
class PrimaryArchive:
    """The archive holding the articles and its heading hierarchy."""

    bof: str = ""
    idx: str = ""
    hic: str = ""


@dataclass
class ResourceArchive:
    """An archive of pictures, sounds or other resources."""

    bof: str = ""
    idx: str = ""
    fsi: str = ""
    fsd: str = ""


@dataclass
class InfFile:
    """One dictionary described by an INF file."""

    version: int = 0
    supported: bool = False
    ld: str = ""
    primary: PrimaryArchive = field(default_factory=PrimaryArchive)
    resources: list = field(default_factory=list)


@contextmanager
def _opened(filesystem, name: str) -> Iterator[RandomAccessStream]:
    stream = filesystem.open(name)
    try:
        yield stream
    finally:
        close = getattr(stream, "close", None)
        if close is not None:
            close()


def _parse_hex(text: str) -> int:
    match = _HEX_RE.match(text)
    if match is None:
        raise ValueError(f"invalid INF version: {text!r}")
    value = int(match.group(2), 16)
    return -value if match.group(1) == "-" else value


def _fix_case(name: str, files: CaseInsensitiveSet) -> str:
    if not name:
        return name
    found = files.find(name)
    return PurePath(found).name if found is not None else name


def _stem(name: str) -> str:
    return PurePath(name).stem


def _find_ext(files: CaseInsensitiveSet, ext: str) -> str | None:
    return next((name for name in files if name.lower().endswith(ext)), None)


def parse_inf_file(stream: RandomAccessStream, filesystem) -> list[InfFile]:
    """Parse an INF file; ``filesystem`` provides ``files()`` and ``open(name)``."""
    version = 0
    files = CaseInsensitiveSet()
    lds: list[str] = []
    fs_files = filesystem.files()

    while (raw := read_line(stream)) is not None:
        if not raw:
            continue
        line = win1252_to_utf8(raw)
        kind = line[0]
        if kind == "V":
            version = _parse_hex(line[2:])
        elif kind == "L":
            index = line.find(" ", 2)
            if index == -1:
                raise ValueError("INF file syntax error")
            lds.append(_fix_case(line[index + 1:].strip("\r "), fs_files))
        elif kind == "F":
            index = line.find(";")
            if index == -1:
                raise ValueError("INF file syntax error")
            files.add(_fix_case(line[index + 1:].strip("\r "), fs_files))

    infs: list[InfFile] = []
    for name in lds:
        with _opened(filesystem, name) as ld_stream:
            ld = parse_ld_file(ld_stream)
        inf = InfFile(version=version, supported=True, ld=name)
        inf.primary.hic = _fix_case(ld.base_file_name + ".hic", files)
        inf.primary.idx = _fix_case(_stem(name) + ".idx", files)
        inf.primary.bof = _fix_case(_stem(name) + ".bof", files)
        files.discard(inf.primary.bof)
        files.discard(inf.primary.idx)
        infs.append(inf)

    fsi_resource = ResourceArchive()
    fsi = _find_ext(files, ".fsi")
    if fsi is not None:
        bof = files.find(_stem(fsi) + ".bof")
        idx = files.find(_stem(fsi) + ".idx")
        if bof is not None and idx is not None:
            fsi_resource.fsi = fsi
            fsi_resource.bof = _fix_case(bof, files)
            fsi_resource.idx = _fix_case(idx, files)
            files.discard(fsi_resource.bof)

    files_copy = CaseInsensitiveSet(files)
    for inf in infs:
        if fsi_resource.fsi:
            inf.resources.append(dataclasses.replace(fsi_resource))

        while True:
            fsd = _find_ext(files, ".fsd")
            if fsd is not None:
                files.discard(fsd)
                resource = ResourceArchive(fsd=fsd)
                resource.fsi = _fix_case(_stem(fsd) + ".fsi", files)
                if resource.fsi not in files:
                    raise ValueError("FSD blob doesn't have a corresponding FSI file")
                inf.resources.append(resource)
                continue

            bof = _find_ext(files, ".bof")
            if bof is None:
                break
            files.discard(bof)
            resource = ResourceArchive(bof=bof)
            base = _stem(bof)
            resource.fsi = _fix_case(base + ".fsi", files)
            resource.idx = _fix_case(base + ".idx", files)
            if resource.fsi not in files:
                resource.fsi = ""
            inf.resources.append(resource)

        files = CaseInsensitiveSet(files_copy)

    return infs