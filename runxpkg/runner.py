"""Install packages and run programs from them."""

from __future__ import annotations

import os
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from .models import PkgRef, RunCmd, current_platform, parse_pkg_ref
from .registry import Registry


def parse_args(args: Iterable[str]) -> RunCmd:
    """Split arguments into ``+owner/repo`` packages, the app and its arguments.

    Packages are read until the first argument without a ``+``, which names
    the app; a leading ``+`` is stripped from every later argument too.
    """
    result = RunCmd()
    scanning_packages = True
    for arg in args:
        found = arg.startswith("+")
        after = arg.removeprefix("+")
        if found and scanning_packages:
            result.packages.append(parse_pkg_ref(after))
        elif scanning_packages:
            scanning_packages = False
            result.app = arg
        else:
            result.args.append(after)
    return result


def lookup_bin(paths: Iterable[str], name: str) -> str:
    """Find the executable ``name`` in the directories ``paths`` only."""
    found = shutil.which(name, path=os.pathsep.join(paths))
    if found is None:
        raise FileNotFoundError(f'exec: "{name}": executable file not found in $PATH')
    return found


def environ(paths: Iterable[str]) -> dict[str, str]:
    """Return the current environment with ``paths`` put in front of PATH."""
    search = [*paths, os.environ.get("PATH", "")]
    return {**os.environ, "PATH": os.pathsep.join(search)}


@dataclass
class RunX:
    """Installs packages from GitHub releases and runs their programs."""

    github_api_token: str = ""
    root_path: str | Path | None = None

    def install(self, *args: str) -> list[str]:
        """Install the packages named by ``owner/repo[@version]`` strings."""
        refs = [parse_pkg_ref(pkg) for pkg in args]
        return self._install(refs)

    def _install(self, refs: Iterable[PkgRef]) -> list[str]:
        return [self._install_one(ref) for ref in refs]

    def _install_one(self, ref: PkgRef) -> str:
        registry = Registry(self.github_api_token, self.root_path)
        return registry.get_package(ref, current_platform())

    def run(self, *args: str) -> None:
        """Install the ``+`` packages in ``args`` and run the app they provide.

        A non-zero exit status of the app ends this process with that status.
        """
        cmd = parse_args(args)
        paths = self._install(cmd.packages)
        binary = lookup_bin(paths, cmd.app)
        result = subprocess.run([binary, *cmd.args], env=environ(paths))
        if result.returncode != 0:
            raise SystemExit(result.returncode)