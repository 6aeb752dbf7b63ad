"""Unpack downloaded artifacts and link standalone binaries."""

from __future__ import annotations

import bz2
import gzip
import lzma
import os
import shutil
import tarfile
import zipfile
from pathlib import Path

from .fileutil import ensure_dir

_STREAM_FORMATS = (
    (b"\x1f\x8b", gzip.open, ".gz"),
    (b"BZh", bz2.open, ".bz2"),
    (b"\xfd7zXZ\x00", lzma.open, ".xz"),
)


def _extract_zip(src: Path, dest: Path) -> None:
    with zipfile.ZipFile(src) as archive:
        for info in archive.infolist():
            path = archive.extract(info, dest)
            mode = (info.external_attr >> 16) & 0o777
            if mode and not info.is_dir():
                os.chmod(path, mode)


def _extract_tar(src: Path, dest: Path) -> None:
    with tarfile.open(src, "r:*") as archive:
        if hasattr(tarfile, "data_filter"):
            archive.extractall(dest, filter="data")
        else:
            archive.extractall(dest)


def _extract_stream(src: Path, dest: Path) -> bool:
    with open(src, "rb") as f:
        header = f.read(6)
    for magic, opener, suffix in _STREAM_FORMATS:
        if header.startswith(magic):
            name = src.name.removesuffix(suffix) or src.name
            dest.mkdir(parents=True, exist_ok=True)
            with opener(src, "rb") as stream, open(dest / name, "wb") as out:
                shutil.copyfileobj(stream, out)
            return True
    return False


def extract(src: str | os.PathLike[str], dest: str | os.PathLike[str]) -> None:
    """Unpack the archive ``src`` into ``dest``.

    If the archive holds a single directory, its contents become ``dest``.
    """
    source = Path(src)
    tmp_dest = Path(str(source) + ".contents")
    try:
        if zipfile.is_zipfile(source):
            _extract_zip(source, tmp_dest)
        elif tarfile.is_tarfile(source):
            _extract_tar(source, tmp_dest)
        elif not _extract_stream(source, tmp_dest):
            raise ValueError(f"unsupported archive format: {source.name}")

        content = content_dir(tmp_dest)
        ensure_dir(Path(dest).parent)
        os.rename(content, dest)
    finally:
        shutil.rmtree(tmp_dest, ignore_errors=True)


def content_dir(path: str | os.PathLike[str]) -> Path:
    """Return the only subdirectory of ``path`` if that is all it holds."""
    root = Path(path)
    try:
        entries = list(root.iterdir())
    except OSError:
        return root
    if len(entries) != 1 or not entries[0].is_dir():
        return root
    return entries[0]


def create_symbolic_link(
    src: str | os.PathLike[str], dst: str | os.PathLike[str], repo_name: str
) -> None:
    """Make ``src`` executable and link it into the directory ``dst``.

    The link is named after the repository when the file name contains it.
    An existing link is left as it is.
    """
    os.makedirs(dst, mode=0o700, exist_ok=True)
    os.chmod(src, 0o755)
    binary_name = os.path.basename(src)
    if repo_name in binary_name:
        binary_name = repo_name
    try:
        os.symlink(src, os.path.join(dst, binary_name))
    except FileExistsError:
        pass