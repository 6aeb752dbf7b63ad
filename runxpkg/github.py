"""A GitHub releases client that returns release metadata models.

Without an access token, responses are cached on disk by default.
"""

from __future__ import annotations

from typing import Any, Iterable
from urllib.parse import quote

import requests

from .httpcacher import default_cache_dir, new_client
from .models import ArtifactMetadata, PackageNotFoundError, PkgRef, ReleaseMetadata

API_URL = "https://api.github.com"
_PER_PAGE = 100  # Max allowed by the GitHub API


def convert_asset(data: dict[str, Any]) -> ArtifactMetadata:
    """Convert a GitHub release asset object to artifact metadata."""
    return ArtifactMetadata.from_dict(data)


def convert_release(data: dict[str, Any]) -> ReleaseMetadata:
    """Convert a GitHub release object to release metadata."""
    return ReleaseMetadata(
        tag_name=data.get("tag_name") or "",
        created_at=ArtifactMetadata.from_dict({"created_at": data.get("created_at")}).created_at,
        published_at=ArtifactMetadata.from_dict({"created_at": data.get("published_at")}).created_at,
        draft=bool(data.get("draft", False)),
        prerelease=bool(data.get("prerelease", False)),
        artifacts=[convert_asset(a) for a in data.get("assets") or [] if a is not None],
    )


def convert_releases(data: Iterable[dict[str, Any] | None]) -> list[ReleaseMetadata]:
    """Convert a list of GitHub release objects, skipping nulls."""
    return [convert_release(item) for item in data if item is not None]


class GitHubClient:
    """Lists and fetches releases of GitHub repositories."""

    def __init__(self, access_token: str = "", session: Any = None) -> None:
        self.access_token = access_token
        if session is None:
            session = requests.Session() if access_token else new_client(default_cache_dir())
        self._session = session

    def _get_json(self, url: str) -> Any:
        headers = {"Accept": "application/vnd.github.v3+json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        resp = self._session.get(url, headers=headers)
        if resp.status_code == 404:
            raise PackageNotFoundError()
        resp.raise_for_status()
        return resp.json()

    def list_releases(self, owner: str, repo: str) -> list[ReleaseMetadata]:
        """Return the releases of ``owner/repo``, newest first."""
        url = f"{API_URL}/repos/{owner}/{repo}/releases?per_page={_PER_PAGE}"
        return convert_releases(self._get_json(url) or [])

    def get_release(self, ref: PkgRef) -> ReleaseMetadata:
        """Return the release named by ``ref``; "" or "latest" means the latest."""
        base = f"{API_URL}/repos/{ref.owner}/{ref.repo}/releases"
        if ref.version in ("", "latest"):
            url = f"{base}/latest"
        else:
            url = f"{base}/tags/{quote(ref.version, safe='')}"
        data = self._get_json(url)
        if not data:
            raise PackageNotFoundError()
        return convert_release(data)