"""Annotate errors with the source file and line that created them.

:func:`errorf` works like ``str.format`` but also records where it was called.
Formatting the error with a ``+`` spec (``"+s"``, ``"+v"`` or ``"+q"``) appends
the source location of the error and of every located error it wraps:

    wrapped = errorf("wrong password")
    err = errorf('login "{}": {}', user, wrapped)
    f"{err:+v}"
    # login "gcurtis": wrong password
    # login.py:15 login "gcurtis": wrong password
    # login.py:14 wrong password

The output is not a stack trace: it shows where each error in the chain was
built, not where it travelled up the stack.
"""

from __future__ import annotations

import json
import os
import traceback
from typing import Any

# When set, file names in formatted chains are shown relative to this path.
base_path = ""


class SourceError(Exception):
    """An error that remembers the file and line where it was created."""

    def __init__(
        self,
        message: str,
        frame: traceback.FrameSummary | None,
        wrapped: list[BaseException] | tuple[BaseException, ...] = (),
    ) -> None:
        super().__init__(message)
        self.message = message
        self._frame = frame
        wrapped = list(wrapped)
        self.errors: list[BaseException] = wrapped if len(wrapped) > 1 else []
        if len(wrapped) == 1:
            self.__cause__ = wrapped[0]

    def __str__(self) -> str:
        return self.message

    def frame(self) -> traceback.FrameSummary | None:
        """Return the frame of the call that created this error."""
        return self._frame

    def __format__(self, spec: str) -> str:
        plus = spec.startswith("+")
        verb = spec[1:] if plus else spec
        if verb in ("", "s", "v"):
            text = self.message
        elif verb == "q":
            text = _quote(self.message, ascii_only=plus)
        else:
            return format(self.message, spec)
        if plus:
            return text + "\n" + format_chain(self)
        return text


def errorf(format: str, *args: Any) -> SourceError:
    """Format a message with ``str.format`` and record the caller's location.

    Every exception among the arguments is wrapped: one becomes the cause,
    several are kept in ``errors``.
    """
    frame = traceback.extract_stack(limit=2)[0]
    message = format.format(*args)
    wrapped = [arg for arg in args if isinstance(arg, BaseException)]
    return SourceError(message, frame, wrapped)


def _quote(text: str, ascii_only: bool = False) -> str:
    return json.dumps(text, ensure_ascii=ascii_only)


def _can_backquote(text: str) -> bool:
    for ch in text:
        if ch == "\ufeff" or ch == "`" or ch == "\x7f":
            return False
        if ch < " " and ch != "\t":
            return False
    return True


def _children(err: BaseException) -> list[BaseException] | None:
    if isinstance(err, SourceError) and err.errors:
        return list(err.errors)
    if isinstance(err, BaseExceptionGroup):
        return list(err.exceptions)
    return None


def _write_file_line(out: list[str], err: BaseException, prefix: str) -> None:
    get_frame = getattr(err, "frame", None)
    if not callable(get_frame):
        return
    frame = get_frame()
    if frame is None or not frame.lineno:
        return
    filename = frame.filename
    if base_path:
        try:
            filename = os.path.relpath(filename, base_path)
        except ValueError:
            pass
    message = str(err)
    if not _can_backquote(message.replace("`", '"')):
        message = _quote(message)
    out.append(f"{prefix}{filename}:{frame.lineno} {message}")


def _write_chain(out: list[str], err: BaseException, indent: str) -> None:
    _write_file_line(out, err, "")
    while True:
        children = _children(err)
        if children is not None:
            width = len(str(len(children)))
            child_indent = "\t" + " " * (width + 3)
            for index, child in enumerate(children):
                if child is None:
                    continue
                out.append(f"\n\t[{index:>{width}}] ")
                _write_chain(out, child, child_indent)
            return
        cause = err.__cause__
        if cause is None:
            return
        err = cause
        _write_file_line(out, err, "\n" + indent)


def format_chain(err: BaseException) -> str:
    """Return the source locations of ``err`` and the errors it wraps."""
    out: list[str] = []
    _write_chain(out, err, "")
    return "".join(out)