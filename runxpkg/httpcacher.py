"""An HTTP client that keeps a private on-disk cache of GET responses.

Responses are cached only for the user who owns the cache directory. Nothing
filters out cookies or other sensitive headers, so the cache must never be
shared between users.
"""

from __future__ import annotations

import base64
import json
import time
from dataclasses import dataclass
from email.utils import parsedate_to_datetime
from pathlib import Path
from typing import Any, Mapping

import requests
from platformdirs import user_cache_dir
from requests.structures import CaseInsensitiveDict

from . import cachehash
from .fileutil import write_file

_XDG_SUBDIR = ("runx", "http")
_FROM_CACHE_HEADER = "X-From-Cache"
_DROPPED_HEADERS = frozenset({"content-encoding", "content-length", "transfer-encoding"})


def default_cache_dir() -> Path:
    """Return the directory the default client caches responses in."""
    try:
        home = Path(user_cache_dir())
    except Exception:
        home = Path("~/.cache")
    return home.joinpath(*_XDG_SUBDIR)


@dataclass
class _Entry:
    status: int
    headers: dict[str, str]
    body: bytes
    stored_at: float

    def to_json(self) -> str:
        return json.dumps(
            {
                "status": self.status,
                "headers": self.headers,
                "body": base64.b64encode(self.body).decode("ascii"),
                "stored_at": self.stored_at,
            }
        )

    @classmethod
    def from_json(cls, text: str) -> _Entry:
        data = json.loads(text)
        return cls(
            status=int(data["status"]),
            headers=dict(data["headers"]),
            body=base64.b64decode(data["body"]),
            stored_at=float(data["stored_at"]),
        )


def _cache_control(headers: Mapping[str, str]) -> dict[str, str]:
    directives: dict[str, str] = {}
    for part in headers.get("Cache-Control", "").split(","):
        name, _, arg = part.strip().partition("=")
        if name:
            directives[name.lower()] = arg.strip().strip('"')
    return directives


def _http_date(value: str | None) -> float | None:
    if not value:
        return None
    try:
        return parsedate_to_datetime(value).timestamp()
    except (TypeError, ValueError):
        return None


def _freshness_lifetime(headers: Mapping[str, str], stored_at: float) -> float:
    directives = _cache_control(headers)
    if "max-age" in directives:
        try:
            return float(int(directives["max-age"]))
        except ValueError:
            return 0.0
    expires = _http_date(headers.get("Expires"))
    if expires is None:
        return 0.0
    date = _http_date(headers.get("Date"))
    return expires - (date if date is not None else stored_at)


def _storable_headers(headers: Mapping[str, str]) -> dict[str, str]:
    return {
        name: value
        for name, value in headers.items()
        if name.lower() not in _DROPPED_HEADERS and name != _FROM_CACHE_HEADER
    }


class CachingSession:
    """Sends GET requests, answering from and revalidating a disk cache."""

    def __init__(
        self, cache_dir: str | Path, session: requests.Session | None = None
    ) -> None:
        self.cache_dir = Path(cache_dir).expanduser()
        self._session = session or requests.Session()

    def _entry_path(self, url: str) -> Path:
        return self.cache_dir / cachehash.digest(url.encode("utf-8"))

    def _load(self, path: Path) -> _Entry | None:
        try:
            return _Entry.from_json(path.read_text(encoding="utf-8"))
        except (OSError, ValueError, KeyError, TypeError):
            return None

    def _store(self, path: Path, entry: _Entry) -> None:
        try:
            write_file(path, entry.to_json())
        except OSError:
            pass

    @staticmethod
    def _is_fresh(entry: _Entry) -> bool:
        if "no-cache" in _cache_control(entry.headers):
            return False
        age = time.time() - entry.stored_at
        return age < _freshness_lifetime(entry.headers, entry.stored_at)

    @staticmethod
    def _to_response(entry: _Entry, url: str) -> requests.Response:
        resp = requests.Response()
        resp.status_code = entry.status
        resp.headers = CaseInsensitiveDict(entry.headers)
        resp.headers[_FROM_CACHE_HEADER] = "1"
        resp._content = entry.body
        resp._content_consumed = True
        resp.url = url
        resp.encoding = requests.utils.get_encoding_from_headers(resp.headers)
        return resp

    def get(self, url: str, headers: Mapping[str, str] | None = None) -> Any:
        """Return the response for ``url``, from the cache when it is fresh."""
        request_headers = dict(headers or {})
        path = self._entry_path(url)
        entry = self._load(path)

        if entry is not None and self._is_fresh(entry):
            return self._to_response(entry, url)

        if entry is not None:
            etag = entry.headers.get("ETag") or entry.headers.get("Etag")
            if etag:
                request_headers["If-None-Match"] = etag
            modified = entry.headers.get("Last-Modified")
            if modified:
                request_headers["If-Modified-Since"] = modified

        resp = self._session.get(url, headers=request_headers)

        if entry is not None and resp.status_code == 304:
            merged = {**entry.headers, **_storable_headers(resp.headers)}
            entry = _Entry(entry.status, merged, entry.body, time.time())
            self._store(path, entry)
            return self._to_response(entry, url)

        if resp.status_code == 200 and "no-store" not in _cache_control(resp.headers):
            fresh = _Entry(
                status=resp.status_code,
                headers=_storable_headers(resp.headers),
                body=resp.content,
                stored_at=time.time(),
            )
            self._store(path, fresh)
        return resp


def new_client(cache_dir: str | Path | None = None) -> CachingSession:
    """Return a caching client storing responses in ``cache_dir``."""
    return CachingSession(cache_dir if cache_dir is not None else default_cache_dir())