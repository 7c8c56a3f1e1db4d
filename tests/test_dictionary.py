import struct
import zlib

import pytest

from lsd2dsl.filesystem import FileSystem
from lsd2dsl.dictionary import Dictionary
from lsd2dsl.hic import HicEntryType
from lsd2dsl.ld_file import duden_lang_to_code

_MAGIC = b"compressed PC-Bibliothek Hierarchy"


def _deflate(data):
    compressor = zlib.compressobj(9, zlib.DEFLATED, -zlib.MAX_WBITS)
    return compressor.compress(data) + compressor.flush()


def _write_archive(directory, stem, text):
    block = _deflate(text)
    (directory / f"{stem}.bof").write_bytes(block)
    (directory / f"{stem}.idx").write_bytes(struct.pack("<3I", 0, len(block), len(text)))


def _hic_bytes(leaves):
    raws = b"".join(
        struct.pack("<I", ((offset + 1) << 5) | (int(kind) << 1))
        for _, kind, offset in leaves
    )
    headings = b"".join(heading + b"\0" for heading, _, _ in leaves)
    node = bytes([len(leaves)]) + raws + headings
    name = b"Test"
    header = struct.pack("<IIHHIHBB", len(leaves), 1, 0, 0, 0, 0, 0, len(name) + 1)
    return (_MAGIC + b"\0" + bytes([3]) + header + name + b"\0"
            + struct.pack("<H", len(node)) + node)


_LEAVES = [
    (b"apple", HicEntryType.PLAIN, 0),
    (b"banana", HicEntryType.VARIANT, 13),
    (b"cherry", HicEntryType.REFERENCE, 13),
]
_TEXT = b"@apple\nfruit\n@banana\nyellow\n"


def _make_dictionaries(directory, specs):
    lines = ["V 1"]
    for number, (stem, source, name) in enumerate(specs, start=1):
        (directory / f"{stem}.ld").write_bytes(
            f"B{name}\r\nS{source}\r\nK{stem}\r\n".encode("cp1252"))
        (directory / f"{stem}.hic").write_bytes(_hic_bytes(_LEAVES))
        _write_archive(directory, stem, _TEXT)
        lines.append(f"L{number} {stem}.ld")
        lines += [f"F1;{stem}.hic", f"F1;{stem}.idx", f"F1;{stem}.bof"]
    inf_path = directory / "product.inf"
    inf_path.write_bytes("".join(line + "\r\n" for line in lines).encode("cp1252"))
    return inf_path


def test_single_dictionary(tmp_path):
    inf_path = _make_dictionaries(tmp_path, [("main", "deu", "Sample")])
    dictionary = Dictionary(FileSystem(tmp_path), inf_path, 0)
    assert dictionary.ld().name == "Sample"
    assert dictionary.ld().source_language_code == duden_lang_to_code("deu")
    assert dictionary.ld().target_language_code == duden_lang_to_code("deu")
    assert dictionary.inf().primary.hic == "main.hic"
    assert dictionary.hic().version == 3
    assert [leaf.heading for leaf in dictionary.entries()] == ["apple", "banana", "cherry"]
    assert [leaf.text_offset for leaf in dictionary.entries()] == [0, 13, 13]


def test_article_count_counts_plain_and_variant(tmp_path):
    inf_path = _make_dictionaries(tmp_path, [("main", "deu", "Sample")])
    dictionary = Dictionary(FileSystem(tmp_path), inf_path, 0)
    expected = sum(1 for _, kind, _ in _LEAVES
                   if kind in (HicEntryType.PLAIN, HicEntryType.VARIANT))
    assert dictionary.article_count() == expected


def test_article_reading(tmp_path):
    inf_path = _make_dictionaries(tmp_path, [("main", "deu", "Sample")])
    dictionary = Dictionary(FileSystem(tmp_path), inf_path, 0)
    assert dictionary.article_archive_decoded_size() == len(_TEXT)
    assert dictionary.read_encoded(0, 6) == _TEXT[:6]
    assert dictionary.article(0, -1) == _TEXT.decode("ascii")
    assert dictionary.article(13, 7) == "@banana"


def test_reading_past_the_end_raises(tmp_path):
    inf_path = _make_dictionaries(tmp_path, [("main", "deu", "Sample")])
    dictionary = Dictionary(FileSystem(tmp_path), inf_path, 0)
    with pytest.raises(ValueError, match="past the end"):
        dictionary.read_encoded(len(_TEXT), 1)


def test_pair_of_dictionaries_swaps_languages(tmp_path):
    inf_path = _make_dictionaries(tmp_path, [("a", "deu", "First"), ("b", "enu", "Second")])
    fs = FileSystem(tmp_path)
    first = Dictionary(fs, inf_path, 0)
    second = Dictionary(fs, inf_path, 1)
    assert first.ld().name == "First"
    assert second.ld().name == "Second"
    assert first.ld().source_language_code == second.ld().target_language_code == 1031
    assert first.ld().target_language_code == second.ld().source_language_code == 1033
    assert second.inf().primary.bof == "b.bof"


def test_index_out_of_range(tmp_path):
    inf_path = _make_dictionaries(tmp_path, [("main", "deu", "Sample")])
    with pytest.raises(IndexError):
        Dictionary(FileSystem(tmp_path), inf_path, 1)


def test_missing_dictionary_file(tmp_path):
    inf_path = _make_dictionaries(tmp_path, [("main", "deu", "Sample")])
    (tmp_path / "main.hic").unlink()
    with pytest.raises(OSError):
        Dictionary(FileSystem(tmp_path), inf_path, 0)