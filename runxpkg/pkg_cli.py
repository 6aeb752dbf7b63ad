"""The ``pkg`` command: inspect package releases."""

from __future__ import annotations

import argparse
import sys
from pprint import pprint
from typing import Sequence

from . import envvar
from .github import GitHubClient
from .models import parse_pkg_ref
from .registry import Registry

_TOKEN_VAR = "RUNX_GITHUB_API_TOKEN"


class _UsageError(Exception):
    """The command line could not be parsed."""


class _Parser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise _UsageError(message)


def _releases(args: argparse.Namespace) -> None:
    ref = parse_pkg_ref(args.ref)
    client = GitHubClient(envvar.get(_TOKEN_VAR, ""))
    pprint(client.list_releases(ref.owner, ref.repo))


def _resolve(args: argparse.Namespace) -> None:
    ref = parse_pkg_ref(args.ref)
    registry = Registry(envvar.get(_TOKEN_VAR, ""))
    pprint(registry.resolve_version(ref))


def build_parser() -> argparse.ArgumentParser:
    """Return the parser for the ``pkg`` command and its subcommands."""
    parser = _Parser(prog="pkg", description="Package manager")
    commands = parser.add_subparsers(dest="command")

    releases = commands.add_parser("releases", help="list the releases of a package")
    releases.add_argument("ref", metavar="<owner>/<repo>")
    releases.set_defaults(handler=_releases)

    resolve = commands.add_parser("resolve", help="resolve a package version")
    resolve.add_argument("ref", metavar="<owner>/<repo>@<version>")
    resolve.set_defaults(handler=_resolve)
    return parser


def execute(args: Sequence[str]) -> int:
    """Run the command with ``args`` and return its exit status."""
    parser = build_parser()
    try:
        namespace = parser.parse_args(list(args))
    except _UsageError as err:
        print(f"[ERROR] {err}", file=sys.stderr)
        return 1
    except SystemExit as exit_:
        return exit_.code if isinstance(exit_.code, int) else 0

    handler = getattr(namespace, "handler", None)
    if handler is None:
        parser.print_help()
        return 0
    try:
        handler(namespace)
    except Exception as err:
        print(f"[ERROR] {err}", file=sys.stderr)
        return 1
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point of the ``pkg`` command."""
    sys.exit(execute(sys.argv[1:] if argv is None else argv))