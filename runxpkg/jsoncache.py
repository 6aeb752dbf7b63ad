"""Cache JSON data in files, refreshing it after a day."""

from __future__ import annotations

import json
import os
import time
from datetime import timedelta
from pathlib import Path
from typing import Any, Callable

from .fileutil import file_info, write_file

TTL = timedelta(hours=24)


def read_json(path: str | os.PathLike[str]) -> Any:
    """Return the JSON value stored in ``path``."""
    return json.loads(Path(path).read_text(encoding="utf-8"))


def write_json(path: str | os.PathLike[str], value: Any) -> None:
    """Atomically write ``value`` to ``path`` as indented JSON."""
    write_file(path, json.dumps(value, indent=2))


def fetch_cached_json(path: str | os.PathLike[str], fetch: Callable[[], Any]) -> Any:
    """Return the cached value at ``path``, fetching it if missing or stale.

    When fetching fails but a stale copy exists, the stale copy is returned.
    Updating the cache is best effort.
    """
    try:
        cached = read_json(path)
        loaded = True
    except (OSError, ValueError):
        cached = None
        loaded = False

    info = file_info(path)
    fresh = info is not None and time.time() - info.st_mtime < TTL.total_seconds()
    if loaded and fresh:
        return cached

    try:
        results = fetch()
    except Exception:
        if loaded:
            return cached
        raise

    try:
        write_json(path, results)
    except (OSError, TypeError, ValueError):
        pass
    return results