"""Error helpers: annotate errors with messages and stacks, and join them."""

from __future__ import annotations

import traceback


class WrappedError(Exception):
    """An error with a message, an optional cause and an optional stack."""

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        *,
        stack: list[traceback.FrameSummary] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.__cause__ = cause
        self.stack = list(stack or [])

    def __str__(self) -> str:
        if self.__cause__ is None:
            return self.message
        return f"{self.message}: {self.__cause__}"


class _JoinedError(ExceptionGroup):
    """Several errors reported together, one message per line."""

    def __str__(self) -> str:
        return self.message


def _caller_stack() -> list[traceback.FrameSummary]:
    # Drop this helper and the public function that called it.
    return list(traceback.extract_stack())[:-2]


def new(message: str) -> WrappedError:
    """Return a new error with ``message`` and the caller's stack."""
    return WrappedError(message, stack=_caller_stack())


def wrap(err: BaseException | None, message: str) -> WrappedError | None:
    """Annotate ``err`` with ``message`` and a stack; None stays None."""
    if err is None:
        return None
    return WrappedError(message, err, stack=_caller_stack())


def with_message(err: BaseException | None, message: str) -> WrappedError | None:
    """Annotate ``err`` with ``message`` only; None stays None."""
    if err is None:
        return None
    return WrappedError(message, err)


def cause(err: BaseException | None) -> BaseException | None:
    """Return the innermost error reached through annotations."""
    while isinstance(err, WrappedError) and err.__cause__ is not None:
        err = err.__cause__
    return err


def unwrap(err: BaseException | None) -> BaseException | None:
    """Return the error directly wrapped by ``err``, if any."""
    if err is None:
        return None
    return err.__cause__


def join(*args: BaseException | None) -> ExceptionGroup | None:
    """Combine the non-None errors into one, or return None if there are none."""
    errs = [err for err in args if err is not None]
    if not errs:
        return None
    message = "\n".join(str(err) for err in errs)
    return _JoinedError(message, errs)