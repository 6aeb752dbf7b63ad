"""A local registry that resolves, downloads and installs GitHub releases."""

from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_cache_dir

from .artifact import find_artifact_for_platform, is_known_archive
from .download import DownloadClient
from .extract import create_symbolic_link, extract
from .fileutil import ensure_dir, is_dir
from .github import GitHubClient
from .jsoncache import fetch_cached_json
from .models import (
    ArtifactMetadata,
    PkgRef,
    Platform,
    ReleaseMetadata,
    ReleaseNotFoundError,
)

_INSTALL_SUBDIR = ("runx", "pkgs")

_EXECUTABLE_PREFIXES = (
    b"#!",  # Shebang
    b"\x7fE",  # ELF
)

_EXECUTABLE_MAGICS = frozenset(
    {
        b"\xfe\xed\xfa\xce",  # Mach-O 32-bit, big-endian
        b"\xfe\xed\xfa\xcf",  # Mach-O 64-bit, big-endian
        b"\xca\xfe\xba\xbe",  # Java class
        b"\xcf\xfa\xed\xfe",  # Mach-O 64-bit, little-endian
        b"\xce\xfa\xed\xfe",  # Mach-O 32-bit, little-endian
    }
)


def is_executable_binary(path: str | os.PathLike[str]) -> bool:
    """Guess from its first bytes whether the file at ``path`` is executable."""
    try:
        with open(path, "rb") as f:
            data = f.read(4)
    except OSError:
        return False
    if not data:
        return False
    header = data.ljust(4, b"\0")
    return header.startswith(_EXECUTABLE_PREFIXES) or header in _EXECUTABLE_MAGICS


class Registry:
    """Installs packages from GitHub releases under a local root directory."""

    def __init__(
        self,
        github_api_token: str = "",
        root_path: str | os.PathLike[str] | None = None,
    ) -> None:
        if root_path is None:
            self.root_path = Path(user_cache_dir()).joinpath(*_INSTALL_SUBDIR)
        else:
            self.root_path = Path(root_path)
        ensure_dir(self.root_path)
        self.github = GitHubClient(github_api_token)
        self.downloader = DownloadClient(github_api_token)

    def list_releases(self, owner: str, repo: str) -> list[ReleaseMetadata]:
        """Return the releases of ``owner/repo``, cached for a day."""
        path = self.root_path / owner / repo / "releases.json"
        data = fetch_cached_json(
            path,
            lambda: [release.to_dict() for release in self.github.list_releases(owner, repo)],
        )
        return [ReleaseMetadata.from_dict(item) for item in data or []]

    def get_release_metadata(self, ref: PkgRef) -> ReleaseMetadata:
        """Return the metadata of the release ``ref`` names, cached for a day."""
        resolved = self.resolve_version(ref)
        path = self.root_path / resolved.owner / resolved.repo / resolved.version / "release.json"
        data = fetch_cached_json(path, lambda: self.github.get_release(ref).to_dict())
        return ReleaseMetadata.from_dict(data)

    def get_artifact_metadata(self, ref: PkgRef, platform: Platform) -> ArtifactMetadata:
        """Return the artifact of the release ``ref`` that suits ``platform``."""
        resolved = self.resolve_version(ref)
        release = self.get_release_metadata(resolved)
        return find_artifact_for_platform(release.artifacts, platform)

    def get_artifact(self, ref: PkgRef, platform: Platform) -> str:
        """Download the artifact for ``platform`` once and return its path."""
        resolved = self.resolve_version(ref)
        metadata = self.get_artifact_metadata(ref, platform)
        path = (
            self.root_path / resolved.owner / resolved.repo / resolved.version / metadata.name
        )
        self.downloader.download_once(metadata.url, path)
        return str(path)

    def get_package(self, ref: PkgRef, platform: Platform) -> str:
        """Install the package for ``platform`` and return its directory.

        An existing installation directory is assumed to be complete.
        """
        resolved = self.resolve_version(ref)
        install_path = (
            self.root_path
            / resolved.owner
            / resolved.repo
            / resolved.version
            / platform.os
            / platform.arch
        )
        if is_dir(install_path):
            return str(install_path)

        artifact_path = self.get_artifact(ref, platform)
        if is_known_archive(os.path.basename(artifact_path)):
            extract(artifact_path, install_path)
        elif is_executable_binary(artifact_path):
            create_symbolic_link(artifact_path, install_path, resolved.repo)
        return str(install_path)

    def resolve_version(self, ref: PkgRef) -> PkgRef:
        """Replace an empty or "latest" version with the newest release's tag.

        Stable releases are preferred; if there is none, the first release is
        used. Raises ReleaseNotFoundError when the package has no releases.
        """
        if ref.version not in ("", "latest"):
            return ref
        releases = self.list_releases(ref.owner, ref.repo)
        if not releases:
            raise ReleaseNotFoundError()
        stable = next(
            (r for r in releases if not r.draft and not r.prerelease), releases[0]
        )
        return PkgRef(owner=ref.owner, repo=ref.repo, version=stable.tag_name)