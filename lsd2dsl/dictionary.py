"""A Duden dictionary: its description, heading hierarchy and article archive."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from os import PathLike
from pathlib import PurePath

from .archive import Archive
from .bitstream import RandomAccessStream
from .encoding import duden_to_utf8
from .hic import HicEntryType, HicFile, HicLeaf, HicNode, HicPage, parse_hic_file
from .inf_file import InfFile, parse_inf_file
from .ld_file import LdFile, parse_ld_file, update_language_codes


@contextmanager
def _opened(filesystem, name: str) -> Iterator[RandomAccessStream]:
    stream = filesystem.open(name)
    try:
        yield stream
    finally:
        close = getattr(stream, "close", None)
        if close is not None:
            close()


def _collect_leafs(page: HicPage | None) -> Iterator[HicLeaf]:
    if page is None:
        return
    for entry in page.entries:
        if isinstance(entry, HicNode):
            yield from _collect_leafs(entry.page)
        else:
            yield entry


class Dictionary:
    """The dictionary number ``index`` of the INF file at ``inf_path``.

    ``filesystem`` provides ``files()`` and ``open(name)`` for the directory
    holding the dictionary files.
    """

    def __init__(self, filesystem, inf_path: str | PathLike, index: int) -> None:
        self._filesystem = filesystem
        with _opened(filesystem, PurePath(inf_path).name) as inf_stream:
            infs = parse_inf_file(inf_stream, filesystem)
        if not 0 <= index < len(infs):
            raise IndexError(f"dictionary index {index} is out of range")
        self._inf = infs[index]

        with _opened(filesystem, self._inf.ld) as ld_stream:
            self._ld = parse_ld_file(ld_stream)

        if len(infs) == 1:
            update_language_codes([self._ld])
        else:
            secondary = infs[0 if index == 1 else 1]
            with _opened(filesystem, secondary.ld) as ld_stream:
                secondary_ld = parse_ld_file(ld_stream)
            update_language_codes([self._ld, secondary_ld])

        with _opened(filesystem, self._inf.primary.hic) as hic_stream:
            self._hic = parse_hic_file(hic_stream)
        bof = filesystem.open(self._inf.primary.bof)
        with _opened(filesystem, self._inf.primary.idx) as idx_stream:
            self._articles = Archive(idx_stream, bof)
        self._leafs = list(_collect_leafs(self._hic.root))

    def article_count(self) -> int:
        """Number of plain and variant headings."""
        return sum(
            1 for leaf in self._leafs
            if leaf.type in (HicEntryType.PLAIN, HicEntryType.VARIANT)
        )

    def article_archive_decoded_size(self) -> int:
        """Decoded size of the article archive."""
        return self._articles.decoded_size()

    def entries(self) -> list[HicLeaf]:
        """All leaf headings of the hierarchy, in tree order."""
        return self._leafs

    def read_encoded(self, plain_offset: int, size: int) -> bytes:
        """Read raw article bytes; a negative size reads to the end."""
        return self._articles.read(plain_offset, size)

    def article(self, plain_offset: int, size: int) -> str:
        """Read and decode article text; a negative size reads to the end."""
        return duden_to_utf8(self._articles.read(plain_offset, size))

    def ld(self) -> LdFile:
        """The dictionary's LD description."""
        return self._ld

    def inf(self) -> InfFile:
        """The dictionary's INF entry."""
        return self._inf

    def hic(self) -> HicFile:
        """The dictionary's heading hierarchy."""
        return self._hic