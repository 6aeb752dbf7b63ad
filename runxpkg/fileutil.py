"""Filesystem helpers."""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path


def file_info(path: str | os.PathLike[str]) -> os.stat_result | None:
    """Return the stat result of ``path``, or None if it cannot be read."""
    try:
        return os.stat(path)
    except (OSError, ValueError):
        return None


def is_dir(path: str | os.PathLike[str]) -> bool:
    """Return True if ``path`` is a directory."""
    info = file_info(path)
    return info is not None and stat.S_ISDIR(info.st_mode)


def is_file(path: str | os.PathLike[str]) -> bool:
    """Return True if ``path`` is a regular file."""
    info = file_info(path)
    return info is not None and stat.S_ISREG(info.st_mode)


def exists(path: str | os.PathLike[str]) -> bool:
    """Return True if ``path`` exists."""
    return file_info(path) is not None


def ensure_dir(path: str | os.PathLike[str]) -> None:
    """Create ``path`` and its parents if it is not already a directory."""
    if is_dir(path):
        return
    os.makedirs(path, mode=0o700)


def write_file(path: str | os.PathLike[str], data: bytes | str) -> None:
    """Atomically write ``data`` to ``path``, creating its directory first."""
    target = Path(path)
    ensure_dir(target.parent)
    if isinstance(data, str):
        data = data.encode("utf-8")
    fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.")
    try:
        with os.fdopen(fd, "wb") as tmp:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.chmod(tmp_name, 0o600)
        os.replace(tmp_name, target)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise