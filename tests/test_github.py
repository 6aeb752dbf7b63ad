from datetime import datetime, timezone

import pytest
import requests
import responses
from responses import matchers

from runxpkg.github import (
    API_URL,
    GitHubClient,
    convert_asset,
    convert_release,
    convert_releases,
)
from runxpkg.models import PackageNotFoundError, PkgRef

ASSET = {
    "url": "https://example.com/assets/1",
    "browser_download_url": "https://example.com/download/tool-linux-amd64.tar.gz",
    "name": "tool-linux-amd64.tar.gz",
    "download_count": 7,
    "created_at": "2023-01-02T03:04:05Z",
    "updated_at": "2023-01-03T03:04:05Z",
    "content_type": "application/gzip",
    "size": 1234,
}

RELEASE = {
    "tag_name": "v1.2.3",
    "created_at": "2023-01-02T03:04:05Z",
    "published_at": "2023-01-02T04:04:05Z",
    "draft": False,
    "prerelease": True,
    "assets": [ASSET, None],
}


@pytest.fixture
def mocked():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


def test_convert_asset():
    artifact = convert_asset(ASSET)
    assert artifact.name == ASSET["name"]
    assert artifact.url == ASSET["url"]
    assert artifact.browser_download_url == ASSET["browser_download_url"]
    assert artifact.download_count == 7
    assert artifact.size == 1234
    assert artifact.content_type == ASSET["content_type"]
    assert artifact.created_at == datetime(2023, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def test_convert_release_skips_null_assets():
    release = convert_release(RELEASE)
    assert release.tag_name == "v1.2.3"
    assert release.prerelease is True
    assert release.draft is False
    assert [a.name for a in release.artifacts] == [ASSET["name"]]
    assert release.published_at == datetime(2023, 1, 2, 4, 4, 5, tzinfo=timezone.utc)


def test_convert_releases_skips_null():
    releases = convert_releases([None, RELEASE, None])
    assert [r.tag_name for r in releases] == ["v1.2.3"]


def test_list_releases(mocked):
    mocked.add(
        responses.GET,
        f"{API_URL}/repos/owner/repo/releases",
        json=[RELEASE, {**RELEASE, "tag_name": "v1.0.0"}],
        match=[matchers.query_param_matcher({"per_page": "100"})],
    )
    client = GitHubClient("", session=requests.Session())
    releases = client.list_releases("owner", "repo")
    assert [r.tag_name for r in releases] == ["v1.2.3", "v1.0.0"]


def test_list_releases_not_found(mocked):
    mocked.add(responses.GET, f"{API_URL}/repos/owner/missing/releases", status=404)
    client = GitHubClient("", session=requests.Session())
    with pytest.raises(PackageNotFoundError):
        client.list_releases("owner", "missing")


def test_get_latest_release(mocked):
    mocked.add(responses.GET, f"{API_URL}/repos/owner/repo/releases/latest", json=RELEASE)
    client = GitHubClient("", session=requests.Session())
    assert client.get_release(PkgRef("owner", "repo", "latest")).tag_name == "v1.2.3"
    assert client.get_release(PkgRef("owner", "repo", "")).tag_name == "v1.2.3"


def test_get_release_by_tag_sends_token(mocked):
    mocked.add(
        responses.GET, f"{API_URL}/repos/owner/repo/releases/tags/v1.2.3", json=RELEASE
    )
    client = GitHubClient("token", session=requests.Session())
    release = client.get_release(PkgRef("owner", "repo", "v1.2.3"))
    assert release.tag_name == "v1.2.3"
    assert mocked.calls[0].request.headers["Authorization"] == "Bearer token"


def test_get_release_not_found(mocked):
    mocked.add(responses.GET, f"{API_URL}/repos/owner/repo/releases/tags/v9", status=404)
    client = GitHubClient("", session=requests.Session())
    with pytest.raises(PackageNotFoundError):
        client.get_release(PkgRef("owner", "repo", "v9"))


def test_server_error_raises_http_error(mocked):
    mocked.add(responses.GET, f"{API_URL}/repos/owner/repo/releases/latest", status=500)
    client = GitHubClient("", session=requests.Session())
    with pytest.raises(requests.HTTPError):
        client.get_release(PkgRef("owner", "repo"))