"""Writer for DSL dictionary source files (UTF-16LE with a byte order mark)."""

from __future__ import annotations

from os import PathLike
from pathlib import Path

from .common import lang_from_code, open_for_writing

_UTF16_BOM = b"\xff\xfe"


def _encode(text: str) -> bytes:
    return text.encode("utf-16-le")


class DslWriter:
    """Writes a ``<name>.dsl`` file and its companion files into a directory."""

    def __init__(self, output_path: str | PathLike, name: str) -> None:
        self._path = Path(output_path) / (name + ".dsl")
        self._file = open_for_writing(self._path)
        self._file.write(_UTF16_BOM)

    @property
    def path(self) -> Path:
        """Full path of the DSL file."""
        return self._path

    @property
    def file_name(self) -> str:
        """File name of the DSL file."""
        return self._path.name

    def _write(self, text: str) -> None:
        self._file.write(_encode(text))

    def set_name(self, name: str) -> None:
        """Write the ``#NAME`` header."""
        self._write(f'#NAME\t"{name}"\r\n')

    def set_annotation(self, annotation: str) -> None:
        """Write the annotation into a ``.ann`` file next to the DSL file."""
        with open_for_writing(self._path.with_suffix(".ann")) as anno:
            anno.write(_UTF16_BOM)
            anno.write(_encode(annotation))

    def set_language(self, source: int, target: int) -> None:
        """Write the index and contents language headers."""
        self._write(f'#INDEX_LANGUAGE\t"{lang_from_code(source)}"\n')
        self._write(f'#CONTENTS_LANGUAGE\t"{lang_from_code(target)}"\n')

    def set_icon(self, icon: bytes) -> None:
        """Write the icon into a ``.bmp`` file and reference it from the header."""
        icon_path = self._path.with_suffix(".bmp")
        self._write(f'#ICON_FILE\t"{icon_path.name}"\n')
        with open_for_writing(icon_path) as file:
            file.write(bytes(icon))

    def write_new_line(self) -> None:
        """Write an empty line."""
        self._write("\n")

    def write_heading(self, heading: str) -> None:
        """Write one heading line."""
        self._write(heading + "\n")

    def write_article(self, article: str) -> None:
        """Write an article body, indenting every line with a tab."""
        self._write("\t" + article.replace("\n", "\n\t") + "\n")

    def close(self) -> None:
        """Close the DSL file."""
        self._file.close()

    def __enter__(self) -> "DslWriter":
        return self

    def __exit__(self, *args) -> None:
        self.close()