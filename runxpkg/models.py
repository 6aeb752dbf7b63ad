"""Package references, platforms, release metadata and lookup errors."""

from __future__ import annotations

import platform as _platform
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


class PackageNotFoundError(LookupError):
    """The requested package does not exist."""

    def __init__(self, message: str = "package not found") -> None:
        super().__init__(message)


class ReleaseNotFoundError(LookupError):
    """The package has no releases."""

    def __init__(self, message: str = "release not found") -> None:
        super().__init__(message)


class PlatformNotSupportedError(LookupError):
    """No artifact of the package matches the platform."""

    def __init__(self, message: str = "package doesn't support platform") -> None:
        super().__init__(message)


@dataclass(frozen=True)
class PkgRef:
    """A reference to a package: ``owner/repo@version``."""

    owner: str
    repo: str
    version: str = "latest"

    def __str__(self) -> str:
        return f"{self.owner}/{self.repo}@{self.version}"


def parse_pkg_ref(pkg: str) -> PkgRef:
    """Parse ``owner/repo`` or ``owner/repo@version``; version defaults to latest."""
    owner_repo, sep, version = pkg.partition("@")
    if not sep:
        version = "latest"
    owner, sep, repo = owner_repo.partition("/")
    if not sep:
        raise ValueError(f"invalid package reference: {pkg}")
    return PkgRef(owner=owner, repo=repo, version=version)


_ARCH_NAMES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
    "armv6l": "arm",
    "armv7l": "arm",
}


def _current_os() -> str:
    return _platform.system().lower()


def _current_arch() -> str:
    machine = _platform.machine().lower()
    return _ARCH_NAMES.get(machine, machine)


@dataclass(frozen=True)
class Platform:
    """An operating system and architecture pair, e.g. ``linux/amd64``."""

    os: str
    arch: str

    def __str__(self) -> str:
        return f"{self.os}/{self.arch}"


def current_platform() -> Platform:
    """Return the platform this process runs on."""
    return Platform(_current_os(), _current_arch())


def new_platform(os_name: str = "", arch: str = "") -> Platform:
    """Return a platform; empty parts default to the current platform's."""
    return Platform(os_name or _current_os(), arch or _current_arch())


def parse_platform(s: str) -> Platform:
    """Parse ``os/arch``."""
    os_name, sep, arch = s.partition("/")
    if not sep:
        raise ValueError(f"invalid platform string: {s}")
    return new_platform(os_name, arch)


@dataclass
class RunCmd:
    """Packages to install, the app to start and its arguments."""

    packages: list[PkgRef] = field(default_factory=list)
    app: str = ""
    args: list[str] = field(default_factory=list)


ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


def _format_time(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = value.isoformat()
    if text.endswith("+00:00"):
        text = text[:-6] + "Z"
    return text


def _parse_time(value: Any) -> datetime:
    if value is None or value == "":
        return ZERO_TIME
    if isinstance(value, datetime):
        moment = value
    else:
        moment = datetime.fromisoformat(str(value))
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


@dataclass
class ArtifactMetadata:
    """A downloadable file attached to a release."""

    url: str = ""
    browser_download_url: str = ""
    name: str = ""
    download_count: int = 0
    created_at: datetime = ZERO_TIME
    updated_at: datetime = ZERO_TIME
    content_type: str = ""
    size: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "browser_download_url": self.browser_download_url,
            "name": self.name,
            "download_count": self.download_count,
            "created_at": _format_time(self.created_at),
            "updated_at": _format_time(self.updated_at),
            "content_type": self.content_type,
            "size": self.size,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ArtifactMetadata:
        return cls(
            url=data.get("url") or "",
            browser_download_url=data.get("browser_download_url") or "",
            name=data.get("name") or "",
            download_count=int(data.get("download_count") or 0),
            created_at=_parse_time(data.get("created_at")),
            updated_at=_parse_time(data.get("updated_at")),
            content_type=data.get("content_type") or "",
            size=int(data.get("size") or 0),
        )


@dataclass
class ReleaseMetadata:
    """A release of a package and its artifacts."""

    tag_name: str = ""
    created_at: datetime = ZERO_TIME
    published_at: datetime = ZERO_TIME
    draft: bool = False
    prerelease: bool = False
    artifacts: list[ArtifactMetadata] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "tag_name": self.tag_name,
            "created_at": _format_time(self.created_at),
            "published_at": _format_time(self.published_at),
            "draft": self.draft,
            "prerelease": self.prerelease,
            "artifacts": [artifact.to_dict() for artifact in self.artifacts],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ReleaseMetadata:
        return cls(
            tag_name=data.get("tag_name") or "",
            created_at=_parse_time(data.get("created_at")),
            published_at=_parse_time(data.get("published_at")),
            draft=bool(data.get("draft", False)),
            prerelease=bool(data.get("prerelease", False)),
            artifacts=[
                ArtifactMetadata.from_dict(item) for item in data.get("artifacts") or []
            ],
        )