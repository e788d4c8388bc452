"""Test the expression loader for text files and archives."""
from pathlib import Path
import tarfile
import zipfile

import py7zr
import pytest

from arithmetic_evaluator.batch.loader import archive_format, load_expressions, read_texts
from arithmetic_evaluator.common.errors import InputFileError


@pytest.mark.parametrize("name,expected", [
    ("ops.zip", ".zip"),
    ("ops.tar.xz", ".tar.xz"),
    ("ops.v2.7z", ".7z"),
    ("ops.rar", ".rar"),
    ("ops.xz", ".xz"),
])
def test_archive_format(name: str, expected: str) -> None:
    """Formats are recognized from the end of the file name."""
    assert archive_format(Path(name)) == expected


def test_load_txt(tmp_path) -> None:
    """A plain text file gives its non-empty, stripped lines."""
    input_file = tmp_path / "ops.txt"
    input_file.write_text("1+1\n\n  2*2  \n\n")

    assert load_expressions(input_file) == ["1+1", "2*2"]


def test_load_zip_reads_every_text_member(tmp_path) -> None:
    """Every .txt member of a .zip archive is read, in archive order, other members are skipped."""
    zip_path = tmp_path / "ops.zip"
    with zipfile.ZipFile(zip_path, "w") as zf:
        zf.writestr("first.txt", "3+3\n")
        zf.writestr("notes.md", "not an expression\n")
        zf.writestr("nested/second.txt", "\n4^2\n")

    assert load_expressions(zip_path) == ["3+3", "4^2"]


def test_load_tar_xz(tmp_path) -> None:
    """Every .txt member of a .tar.xz archive is read."""
    first = tmp_path / "a.txt"
    first.write_text("4*4\n2^3^2\n")
    second = tmp_path / "b.txt"
    second.write_text("1/0\n")

    tar_path = tmp_path / "ops.tar.xz"
    with tarfile.open(tar_path, "w:xz") as tf:
        tf.add(first, arcname="a.txt")
        tf.add(second, arcname="b.txt")

    assert load_expressions(tar_path) == ["4*4", "2^3^2", "1/0"]


def test_load_7z(tmp_path) -> None:
    """A .7z archive is extracted and read correctly."""
    txt = tmp_path / "ops.txt"
    txt.write_text("5-2\n")

    archive_path = tmp_path / "ops.7z"
    with py7zr.SevenZipFile(archive_path, "w") as archive:
        archive.write(txt, arcname="ops.txt")

    assert read_texts(archive_path) == ["5-2\n"]
    assert load_expressions(archive_path) == ["5-2"]


def test_load_archive_no_txt(tmp_path) -> None:
    """Loading fails if no .txt file exists in the archive."""
    zip_path = tmp_path / "empty.zip"
    with zipfile.ZipFile(zip_path, "w") as zf:
        zf.writestr("data.bin", b"\x00\x01")

    with pytest.raises(InputFileError, match="No .txt file"):
        load_expressions(zip_path)


def test_load_unsupported_format(tmp_path) -> None:
    """Unsupported formats raise an InputFileError."""
    file_path = tmp_path / "ops.rar"
    file_path.write_text("1+1")

    with pytest.raises(InputFileError, match="Unsupported input format"):
        load_expressions(file_path)


def test_load_corrupted_archive(tmp_path) -> None:
    """An unreadable archive raises an InputFileError instead of the archive library's error."""
    zip_path = tmp_path / "broken.zip"
    zip_path.write_bytes(b"this is not a zip archive")

    with pytest.raises(InputFileError, match="Cannot read .zip archive"):
        load_expressions(zip_path)


def test_input_file_error_is_a_value_error() -> None:
    """Callers catching ValueError still see loader errors."""
    assert issubclass(InputFileError, ValueError)
