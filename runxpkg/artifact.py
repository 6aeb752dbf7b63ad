"""Pick the release artifact that matches a platform."""

from __future__ import annotations

from typing import Iterable

from .models import ArtifactMetadata, Platform, PlatformNotSupportedError

_ALTERNATE_OS_NAMES = {
    "darwin": ("macos", "mac"),
}

_ALTERNATE_ARCH_NAMES = {
    "386": ("i386",),
    "arm64": ("universal",),
    "amd64": ("x86_64", "universal"),
}

_KNOWN_EXTS = frozenset(
    {
        ".bz2", ".gz", ".lz", ".lzma", ".lzo", ".tar", ".taz", ".taZ", ".tbz",
        ".tbz2", ".tgz", ".tlz", ".tz2", ".tzst", ".xz", ".Z", ".zip", ".zst",
    }
)


def find_artifact_for_platform(
    artifacts: Iterable[ArtifactMetadata], platform: Platform
) -> ArtifactMetadata:
    """Return the artifact for ``platform``.

    Known archives are preferred; otherwise the last matching artifact is
    returned. Raises PlatformNotSupportedError when nothing matches.
    """
    match: ArtifactMetadata | None = None
    for artifact in artifacts:
        if is_artifact_for_platform(artifact.name, platform):
            match = artifact
            if is_known_archive(artifact.name):
                return artifact
    if match is not None and match.name:
        return match
    raise PlatformNotSupportedError()


def is_artifact_for_platform(name: str, platform: Platform) -> bool:
    """Return True if ``name`` mentions both the OS and arch of ``platform``."""
    if not platform.arch or not platform.os:
        return False
    lowered = name.lower()
    return matches_os(platform, lowered) and matches_arch(platform, lowered)


def matches_os(platform: Platform, name: str) -> bool:
    """Return True if ``name`` contains the platform's OS or an alias of it."""
    alternates = _ALTERNATE_OS_NAMES.get(platform.os, ())
    return any(alt in name for alt in alternates) or platform.os in name


def matches_arch(platform: Platform, name: str) -> bool:
    """Return True if ``name`` contains the platform's arch or an alias of it."""
    alternates = _ALTERNATE_ARCH_NAMES.get(platform.arch, ())
    return any(alt in name for alt in alternates) or platform.arch in name


def _extension(name: str) -> str:
    base = name.rsplit("/", 1)[-1]
    dot = base.rfind(".")
    return base[dot:] if dot >= 0 else ""


def is_known_archive(name: str) -> bool:
    """Return True if the file extension of ``name`` is a known archive type."""
    return _extension(name) in _KNOWN_EXTS