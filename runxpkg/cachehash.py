"""Non-cryptographic cache keys.

No guarantee is made about the underlying hashing algorithm; the keys are only
meant for caching, where a changing hash for a given input is acceptable.
"""

from __future__ import annotations

import hashlib
import json
import re
from pathlib import Path
from typing import Any

from slugify import slugify

from . import redact

_HASH_NAME = "sha256"

_SLUG_REPLACEMENTS = [
    ["&", "and"],
    ["@", "at"],
    ['"', ""],
    ["'", ""],
    ["\u2019", ""],
]

_JSON_PIECES = re.compile(r'"(?:[^"\\]|\\.)*"|[ \t\n\r]+', re.DOTALL)


def digest(data: bytes) -> str:
    """Return a hex-encoded hash of ``data``."""
    return hashlib.new(_HASH_NAME, data).hexdigest()


def digest6(data: bytes) -> str:
    """Return the first 6 characters of the hash of ``data``."""
    return digest(data)[:6]


def file_digest(path: str | Path) -> str:
    """Return a hex-encoded hash of a file's contents, or "" if it is missing."""
    try:
        with open(path, "rb") as f:
            return hashlib.file_digest(f, _HASH_NAME).hexdigest()
    except FileNotFoundError:
        return ""


def json_digest(value: Any) -> str:
    """Serialise ``value`` to JSON and return its hex-encoded hash."""
    try:
        text = json.dumps(
            value, sort_keys=True, separators=(",", ":"), ensure_ascii=False
        )
    except (TypeError, ValueError) as err:
        raise redact.errorf("marshal to json for hashing: {}", err) from err
    return digest(text.encode("utf-8"))


def _compact_json(raw: bytes) -> bytes:
    text = raw.decode("utf-8")
    json.loads(text)
    compact = _JSON_PIECES.sub(
        lambda m: m.group(0) if m.group(0).startswith('"') else "", text
    )
    return compact.encode("utf-8")


def json_file_digest(path: str | Path) -> str:
    """Compact the JSON in a file and return its hash, or "" if it is missing."""
    try:
        raw = Path(path).read_bytes()
    except FileNotFoundError:
        return ""
    try:
        compact = _compact_json(raw)
    except ValueError as err:
        raise redact.errorf("compact json for hashing: {}", err) from err
    return digest(compact)


def slug(s: str) -> str:
    """Return a deterministic URL slug of ``s``.

    A 6 character hash is appended to avoid collisions, the result is trimmed
    to its last 50 characters, and a leading dash left by trimming is removed.
    """
    full = f"{slugify(s, replacements=_SLUG_REPLACEMENTS)}-{digest6(s.encode('utf-8'))}"
    return full[-50:].removeprefix("-")