"""The ``runx`` command: install packages and run their programs."""

from __future__ import annotations

import sys
from typing import Sequence

from . import envvar
from .runner import RunX

_TOKEN_VAR = "RUNX_GITHUB_API_TOKEN"
_INSTALL_FLAGS = frozenset({"-install", "--install"})


def help_text() -> str:
    """Return the usage text of the command."""
    return (
        "runx\n"
        "\n"
        "Usage: runx [+<org>/<repo>]... [<cmd>] [<args>]... "
        "Usage: runx --install [<org>/<repo>]..."
    )


def execute(args: Sequence[str]) -> int:
    """Run the command with ``args`` and return its exit status."""
    args = list(args)
    if not args:
        print(help_text())
        return 0

    runx = RunX(github_api_token=envvar.get(_TOKEN_VAR, ""))
    try:
        if args[0] in _INSTALL_FLAGS:
            paths = runx.install(*args[1:])
            print("Installed paths:")
            for path in paths:
                print(f"  {path}")
        else:
            runx.run(*args)
    except Exception as err:
        print(f"[ERROR] {err}", file=sys.stderr)
        return 1
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point of the ``runx`` command."""
    sys.exit(execute(sys.argv[1:] if argv is None else argv))