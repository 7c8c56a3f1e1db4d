import io

import pytest

from lsd2dsl.common import (
    lang_from_code,
    open_for_reading,
    open_for_writing,
    print_languages,
)


@pytest.mark.parametrize(
    "code, name",
    [
        (1049, "Russian"),
        (1031, "German"),
        (1033, "English"),
        (1025, "Arabic"),
        (1067, "Armenian"),
        (2067, "DutchBelgian"),
        (39943, "GermanNewSpellingProperNames"),
    ],
)
def test_lang_from_code(code, name):
    assert lang_from_code(code) == name


def test_unknown_code():
    assert lang_from_code(12345678) == "unknown"


def test_print_languages_sorted_and_complete():
    out = io.StringIO()
    print_languages(out)
    lines = out.getvalue().splitlines()
    codes = [int(line.split(" ", 1)[0]) for line in lines]
    assert codes == sorted(codes)
    assert len(codes) == len(set(codes))
    assert "1049 Russian" in lines
    assert "1036 French" in lines
    for line in lines:
        code, name = line.split(" ", 1)
        assert lang_from_code(int(code)) == name


def test_print_languages_defaults_to_stdout(capsys):
    print_languages()
    captured = capsys.readouterr().out
    assert "1034 Spanish\n" in captured


def test_open_round_trip(tmp_path):
    path = tmp_path / "file.bin"
    with open_for_writing(path) as f:
        f.write(b"\x00\x01payload")
    with open_for_reading(path) as f:
        assert f.read() == b"\x00\x01payload"


def test_open_for_reading_missing(tmp_path):
    with pytest.raises(OSError, match="Can't open file for reading"):
        open_for_reading(tmp_path / "absent")


def test_open_for_writing_bad_directory(tmp_path):
    with pytest.raises(OSError, match="Can't open file for writing"):
        open_for_writing(tmp_path / "no" / "such" / "dir" / "file")