"""Helpers for reading environment variables."""

from __future__ import annotations

import os

_TRUE_VALUES = frozenset({"1", "t", "T", "TRUE", "true", "True"})


def get(key: str, default: str) -> str:
    """Return the variable's value, or ``default`` if it is unset or empty."""
    return os.environ.get(key) or default


def get_bool(key: str) -> bool:
    """Return True only if the variable holds a recognised true value."""
    return os.environ.get(key, "") in _TRUE_VALUES