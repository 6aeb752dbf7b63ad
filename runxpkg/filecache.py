"""A simple local file-based cache of JSON-serialisable values."""

from __future__ import annotations

import json
import shutil
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable

from platformdirs import user_cache_dir

from . import cachehash


class CacheMiss(Exception):
    """The value is not usable from the cache."""


class NotFound(CacheMiss):
    """No value is stored under the key."""

    def __init__(self, message: str = "not found") -> None:
        super().__init__(message)


class Expired(CacheMiss):
    """A value is stored under the key but it has expired."""

    def __init__(self, value: Any = None, message: str = "expired") -> None:
        super().__init__(message)
        self.value = value


def is_cache_miss(err: BaseException | None) -> bool:
    """Return True if ``err`` means the value was missing or expired."""
    return isinstance(err, CacheMiss)


def _default_cache_dir() -> Path:
    try:
        return Path(user_cache_dir())
    except Exception:
        return Path("~/.cache")


def _as_aware(moment: datetime) -> datetime:
    return moment.astimezone() if moment.tzinfo is None else moment


class Cache:
    """Values stored as JSON files under ``<cache_dir>/<domain>``."""

    def __init__(self, domain: str, cache_dir: str | Path | None = None) -> None:
        self.domain = domain
        self.cache_dir = Path(cache_dir) if cache_dir is not None else _default_cache_dir()

    @property
    def _dir(self) -> Path:
        return self.cache_dir / self.domain

    def _filename(self, key: str) -> Path:
        directory = self._dir
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError:
            pass
        return directory / cachehash.slug(key)

    def set(self, key: str, value: Any, ttl: timedelta | float) -> None:
        """Store ``value`` under ``key`` for ``ttl`` (a timedelta or seconds)."""
        if not isinstance(ttl, timedelta):
            ttl = timedelta(seconds=ttl)
        self.set_with_time(key, value, datetime.now(timezone.utc) + ttl)

    def set_with_time(self, key: str, value: Any, expires: datetime) -> None:
        """Store ``value`` under ``key`` until ``expires``."""
        payload = json.dumps({"Val": value, "Exp": _as_aware(expires).isoformat()})
        self._filename(key).write_text(payload, encoding="utf-8")

    def get(self, key: str) -> Any:
        """Return the value under ``key``.

        Raises NotFound if nothing is stored and Expired (carrying the stale
        value) if the value has expired.
        """
        path = self._filename(key)
        if not path.exists():
            raise NotFound()
        data = json.loads(path.read_text(encoding="utf-8"))
        value = data.get("Val")
        expires = _as_aware(datetime.fromisoformat(data["Exp"]))
        if datetime.now(timezone.utc) > expires:
            raise Expired(value)
        return value

    def get_or_set(self, key: str, func: Callable[[], tuple[Any, timedelta | float]]) -> Any:
        """Return the cached value, or compute it with ``func`` and cache it.

        ``func`` returns the value and its time to live. If it raises, nothing
        is cached.
        """
        try:
            return self.get(key)
        except CacheMiss:
            pass
        value, ttl = func()
        self.set(key, value, ttl)
        return value

    def get_or_set_with_time(
        self, key: str, func: Callable[[], tuple[Any, datetime]]
    ) -> Any:
        """Like get_or_set, but ``func`` returns the expiry time."""
        try:
            return self.get(key)
        except CacheMiss:
            pass
        value, expires = func()
        self.set_with_time(key, value, expires)
        return value

    def clear(self) -> None:
        """Remove every value of this cache's domain."""
        try:
            shutil.rmtree(self._dir)
        except FileNotFoundError:
            pass