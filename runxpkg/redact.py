"""Redact sensitive information from error messages.

Redacting an error replaces its message with a placeholder describing the
error's type while still keeping the original error reachable through
``__cause__``.

An object with a ``redact()`` method is *redactable*: its redacted form is
whatever that method returns. :func:`errorf` builds redactable errors whose
redacted message keeps the literal text of the format string and hides every
argument not marked with :func:`safe`.
"""

from __future__ import annotations

import json
import traceback
from dataclasses import dataclass
from typing import Any


class RedactedError(Exception):
    """An error holding a redacted message; its cause is the original error."""

    def __init__(self, message: str, wrapped: BaseException) -> None:
        super().__init__(message)
        self.message = message
        self.wrapped = wrapped
        self.__cause__ = wrapped

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class Safe:
    """A value that may appear unchanged in a redacted message."""

    value: Any


def safe(value: Any) -> Safe:
    """Mark ``value`` as safe to include in a redacted error message."""
    return Safe(value)


class SafeError(Exception):
    """An error that knows both its full message and its redacted message."""

    def __init__(
        self,
        message: str,
        redacted: str,
        cause: BaseException | None = None,
        stack: list[traceback.FrameSummary] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.redacted = redacted
        self.__cause__ = cause
        self._stack = list(stack or [])

    def __str__(self) -> str:
        return self.message

    def redact(self) -> str:
        """Return the message with all unsafe arguments redacted."""
        return self.redacted

    def stack_trace(self) -> list[traceback.FrameSummary]:
        """Return the frames recorded at creation, innermost caller first."""
        return list(self._stack)

    def __format__(self, spec: str) -> str:
        text = str(self)
        if spec in ("", "s", "v"):
            return text
        if spec in ("+", "+s", "+v"):
            frames = "".join(
                f"\n{frame.name}\n\t{frame.filename}:{frame.lineno}"
                for frame in self._stack
            )
            return text + frames
        if spec in ("q", "+q"):
            return json.dumps(text, ensure_ascii=False)
        return format(text, spec)


class _Verbatim:
    """Text that renders as itself under any format spec or conversion."""

    def __init__(self, text: str) -> None:
        self._text = text

    def __format__(self, spec: str) -> str:
        return self._text

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return self._text


def _is_redactor(obj: Any) -> bool:
    return callable(getattr(obj, "redact", None))


def _placeholder(obj: Any) -> str:
    return f"<redacted {type(obj).__name__}>"


def error(err: BaseException | None) -> RedactedError | None:
    """Return a redacted error wrapping ``err``.

    A redactable error supplies its own redacted message. Otherwise each error
    in the ``__cause__`` chain is replaced by a placeholder, joined with
    ``": "``, stopping at the first redactable error, whose redacted message is
    appended.
    """
    if err is None:
        return None
    if isinstance(err, RedactedError):
        return err
    if _is_redactor(err):
        return RedactedError(err.redact(), err)

    parts = [_placeholder(err)]
    wrapped = err.__cause__
    while wrapped is not None:
        if _is_redactor(wrapped):
            parts.append(wrapped.redact())
            break
        parts.append(_placeholder(wrapped))
        wrapped = wrapped.__cause__
    return RedactedError(": ".join(parts), err)


def _redact_arg(arg: Any) -> Any:
    if isinstance(arg, Safe):
        return arg.value
    if isinstance(arg, BaseException):
        return error(arg)
    if _is_redactor(arg):
        return _Verbatim(arg.redact())
    return _Verbatim(_placeholder(arg))


def errorf(format: str, *args: Any) -> SafeError:
    """Create a redactable error from a ``str.format`` template.

    The first exception among the arguments becomes the error's cause.
    """
    stack = list(traceback.extract_stack())[:-1]
    stack.reverse()

    plain = [arg.value if isinstance(arg, Safe) else arg for arg in args]
    message = format.format(*plain)
    redacted = format.format(*(_redact_arg(arg) for arg in args))
    cause = next((arg for arg in plain if isinstance(arg, BaseException)), None)
    return SafeError(message, redacted, cause=cause, stack=stack)