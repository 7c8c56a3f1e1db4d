"""Case-insensitive file name sets and a directory-backed file system."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from os import PathLike
from pathlib import Path

from .bitstream import FileStream


class CaseInsensitiveSet:
    """A set of file names compared without regard to letter case.

    The first spelling added for a name is kept; iteration is ordered
    case-insensitively.
    """

    def __init__(self, names: Iterable[str | PathLike] = ()) -> None:
        self._items: dict[str, str] = {}
        for name in names:
            self.add(name)

    @staticmethod
    def _key(name: str | PathLike) -> str:
        return os.fspath(name).lower()

    def add(self, name: str | PathLike) -> None:
        """Add a name unless an equal one is already present."""
        self._items.setdefault(self._key(name), os.fspath(name))

    def discard(self, name: str | PathLike) -> None:
        """Remove a name if present."""
        self._items.pop(self._key(name), None)

    def find(self, name: str | PathLike) -> str | None:
        """Return the stored spelling of ``name``, or None."""
        return self._items.get(self._key(name))

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, (str, PathLike)):
            return False
        return self._key(name) in self._items

    def __iter__(self) -> Iterator[str]:
        return iter([self._items[key] for key in sorted(self._items)])

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"CaseInsensitiveSet({list(self)!r})"


class FileSystem:
    """Opens files relative to a root directory."""

    def __init__(self, root: str | PathLike) -> None:
        self._root = Path(root)
        self._files = CaseInsensitiveSet()

    @property
    def root(self) -> Path:
        """The directory files are opened from."""
        return self._root

    def open(self, path: str | PathLike) -> FileStream:
        """Open a file below the root for reading."""
        return FileStream(self._root / path)

    def files(self) -> CaseInsensitiveSet:
        """Names of the entries in the root directory, listed once."""
        if not len(self._files):
            self._files = CaseInsensitiveSet(entry.name for entry in self._root.iterdir())
        return self._files