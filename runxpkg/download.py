"""Download release artifacts, resuming partial downloads."""

from __future__ import annotations

import os
from pathlib import Path

import requests

from .fileutil import ensure_dir, file_info, is_dir

_PARTIAL_SUFFIX = ".crdownload"
_CHUNK_SIZE = 64 * 1024


class DownloadClient:
    """Downloads files, optionally authenticating with a GitHub token."""

    def __init__(self, access_token: str = "") -> None:
        self.access_token = access_token
        self._session = requests.Session()

    def download_once(self, url: str, dest: str | os.PathLike[str]) -> None:
        """Download ``url`` to ``dest`` unless a non-empty file is already there."""
        ensure_dir(Path(dest).parent)
        info = file_info(dest)
        if info is not None and Path(dest).is_file() and info.st_size > 0:
            return
        self.download(url, dest)

    def download(self, url: str, dest: str | os.PathLike[str]) -> None:
        """Download ``url`` to ``dest``.

        Data is first written to ``<dest>.crdownload``, which is kept on failure
        so that a later attempt resumes where this one stopped.
        """
        if is_dir(dest):
            raise IsADirectoryError("destination is a directory")
        target = Path(dest)
        ensure_dir(target.parent)
        partial = Path(str(target) + _PARTIAL_SUFFIX)
        offset = partial.stat().st_size if partial.is_file() else 0

        headers = {"Accept": "application/octet-stream"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        if offset:
            headers["Range"] = f"bytes={offset}-"

        with self._session.get(url, headers=headers, stream=True) as resp:
            if not (offset and resp.status_code == 416):
                resp.raise_for_status()
                mode = "ab" if offset and resp.status_code == 206 else "wb"
                with open(partial, mode) as out:
                    for chunk in resp.iter_content(_CHUNK_SIZE):
                        out.write(chunk)

        os.replace(partial, target)