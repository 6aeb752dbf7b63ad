"""Helpers for TypeID-style identifiers."""

from __future__ import annotations


def short_str(tid: str) -> str:
    """Return the last 6 characters of an identifier's string form."""
    return tid[-6:]