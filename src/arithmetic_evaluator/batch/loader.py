"""Read arithmetic expressions from a text file or from the text files of an archive."""
from pathlib import Path
import tarfile
import tempfile
from typing import Callable, Dict, List
import zipfile

import py7zr
from py7zr.exceptions import Bad7zFile

from arithmetic_evaluator.common.errors import InputFileError
from arithmetic_evaluator.common.logger import logger

# An archive reader returns the content of every .txt member, in archive order
ArchiveReader = Callable[[Path], List[str]]


def _is_text_member(name: str) -> bool:
    return name.endswith(".txt")


def _read_zip(archive_path: Path) -> List[str]:
    with zipfile.ZipFile(archive_path, "r") as zf:
        return [
            zf.read(info).decode("utf-8")
            for info in zf.infolist()
            if not info.is_dir() and _is_text_member(info.filename)
        ]


def _read_tar_xz(archive_path: Path) -> List[str]:
    with tarfile.open(archive_path, "r:xz") as tf:
        texts: List[str] = []
        for member in tf.getmembers():
            if member.isfile() and _is_text_member(member.name):
                with tf.extractfile(member) as handle:
                    texts.append(handle.read().decode("utf-8"))
        return texts


def _read_7z(archive_path: Path) -> List[str]:
    # py7zr only extracts to disk, so members go through a temporary directory
    with tempfile.TemporaryDirectory() as tmpdir, py7zr.SevenZipFile(archive_path, mode="r") as archive:
        names = [name for name in archive.getnames() if _is_text_member(name)]
        if not names:
            return []
        archive.extract(path=tmpdir, targets=names)
        extracted = [Path(tmpdir) / name for name in names]
        return [path.read_text(encoding="utf-8") for path in extracted if path.is_file()]


ARCHIVE_READERS: Dict[str, ArchiveReader] = {
    ".zip": _read_zip,
    ".tar.xz": _read_tar_xz,
    ".7z": _read_7z,
}

# Archive errors reported as InputFileError
ARCHIVE_ERRORS = (zipfile.BadZipFile, tarfile.TarError, Bad7zFile, UnicodeDecodeError)


def archive_format(input_file: Path) -> str:
    """
    Return the format key of a file, e.g. ".tar.xz" for "ops.tar.xz".

    :param Path input_file: Path to the input file

    :return: Key of ARCHIVE_READERS when the file is a supported archive, otherwise its last suffix
    :rtype: str
    """
    for suffix in ARCHIVE_READERS:
        if input_file.name.endswith(suffix):
            return suffix
    return input_file.suffix


def read_texts(input_file: Path) -> List[str]:
    """
    Read a plain .txt file, or every .txt member of a supported archive.

    :param Path input_file: Path to a .txt, .zip, .tar.xz or .7z file

    :return: Content of each text file
    :rtype: List[str]
    :raises InputFileError: If the format is unsupported, the archive is unreadable or holds no .txt file
    """
    if input_file.suffix == ".txt":
        return [input_file.read_text(encoding="utf-8")]

    file_format = archive_format(input_file)
    reader = ARCHIVE_READERS.get(file_format)
    if reader is None:
        raise InputFileError(f"📄❌ Unsupported input format {file_format!r}, expected .txt or one of {', '.join(ARCHIVE_READERS)}")

    try:
        texts = reader(input_file)
    except ARCHIVE_ERRORS as exc:
        raise InputFileError(f"📄❌ Cannot read {file_format} archive {input_file.name}: {exc}") from exc

    if not texts:
        raise InputFileError(f"📄❌ No .txt file found in {input_file.name}")
    return texts


def load_expressions(input_file: Path) -> List[str]:
    """
    Read the expressions of a text file or archive, one per non-empty line.

    :param Path input_file: Path to the input file or archive

    :return: Stripped expressions, text files in archive order
    :rtype: List[str]
    :raises InputFileError: If the input cannot be read
    """
    texts = read_texts(input_file)
    expressions = [line.strip() for text in texts for line in text.splitlines() if line.strip()]
    logger.info(f"📄 Loaded {len(expressions)} expression(s) from {len(texts)} text file(s) in {input_file}")
    return expressions
