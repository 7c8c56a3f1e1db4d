# lsd2dsl

A library for reading Duden dictionary files (INF, LD, HIC, IDX/BOF, FSI,
FSD, ADP) and for writing DSL dictionary source files.

## Installation

```
pip install .
```

## Usage

Open a dictionary described by an INF file:

```python
from lsd2dsl.dictionary import Dictionary
from lsd2dsl.filesystem import FileSystem

fs = FileSystem("path/to/dictionary")
dictionary = Dictionary(fs, "path/to/dictionary/dict.inf", 0)
print(dictionary.ld().name, dictionary.article_count())
```

Group the headings by article and read article text:

```python
from lsd2dsl.hic import group_hic_entries

groups = group_hic_entries(dictionary.entries())
for offset, group in groups.items():
    print(group.headings, group.article_size)
```

`Dictionary.article(offset, size)` returns decoded text and
`Dictionary.read_encoded(offset, size)` the raw bytes; a negative size reads
to the end of the archive.

Write a DSL file:

```python
from lsd2dsl.dsl_writer import DslWriter

with DslWriter("out", "MyDictionary") as writer:
    writer.set_name("My Dictionary")
    writer.set_language(1031, 1033)
    writer.write_heading("Haus")
    writer.write_article("house\nhome")
```

## Modules

- `lsd2dsl.bitstream`: `InMemoryStream`, `FileStream`, `BitStreamAdapter`,
  `XoringStreamAdapter`, and `read8`, `read16`, `read32`, `peek32`, `read_line`.
- `lsd2dsl.common`: `open_for_reading`, `open_for_writing`, `lang_from_code`,
  `print_languages`.
- `lsd2dsl.dsl_writer`: `DslWriter`, writing UTF-16LE `.dsl` files with `.ann`
  annotation and `.bmp` icon companions.
- `lsd2dsl.archive`: `Archive` (IDX/BOF block archives), `FsdFile`,
  `decode_bof_block`, `parse_index`.
- `lsd2dsl.encoding`: `duden_to_utf8`, `win1252_to_utf8`.
- `lsd2dsl.hic`: `parse_hic_file`, `parse_hic_node45`, `parse_hic_node6`,
  `group_hic_entries` and the `HicLeaf`, `HicNode`, `HicPage`, `HicFile`,
  `HeadingGroup`, `HicEntryType` types.
- `lsd2dsl.fsi`: `parse_fsi_file`, `parse_fsi_block`, `FsiEntry`.
- `lsd2dsl.adp`: `decode_adp` (ADPCM bytes to 16-bit samples at
  `ADP_SAMPLE_RATE`, mono) and `replace_adp_ext_with_wav`.
- `lsd2dsl.filesystem`: `CaseInsensitiveSet`, `FileSystem`.
- `lsd2dsl.ld_file`: `parse_ld_file`, `duden_lang_to_code`,
  `update_language_codes`.
- `lsd2dsl.inf_file`: `parse_inf_file` and the `InfFile`, `PrimaryArchive`,
  `ResourceArchive` types.
- `lsd2dsl.dictionary`: `Dictionary`.

## What this package does not do

- It has no command-line program; everything is used from Python.
- It does not write WAV files: `decode_adp` returns the samples as a list of
  integers, and storing them is left to the caller.
- It does not pack resources into zip files and does not report progress.
- It does not convert whole Duden dictionaries to DSL: article text is
  decoded, but its markup is not turned into DSL markup.