import pytest
import requests
import responses

from runxpkg.download import DownloadClient

URL = "https://example.com/releases/tool.tar.gz"


@pytest.fixture
def mocked():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


def test_download_writes_file_and_sends_headers(tmp_path, mocked):
    mocked.add(responses.GET, URL, body=b"archive bytes")
    dest = tmp_path / "nested" / "tool.tar.gz"
    DownloadClient("token").download_once(URL, dest)
    assert dest.read_bytes() == b"archive bytes"
    assert not (tmp_path / "nested" / "tool.tar.gz.crdownload").exists()
    request = mocked.calls[0].request
    assert request.headers["Accept"] == "application/octet-stream"
    assert request.headers["Authorization"] == "Bearer token"


def test_no_authorization_without_token(tmp_path, mocked):
    mocked.add(responses.GET, URL, body=b"data")
    DownloadClient().download(URL, tmp_path / "f")
    assert "Authorization" not in mocked.calls[0].request.headers


def test_download_once_skips_existing_file(tmp_path, mocked):
    dest = tmp_path / "tool.tar.gz"
    dest.write_bytes(b"already here")
    DownloadClient().download_once(URL, dest)
    assert dest.read_bytes() == b"already here"
    assert len(mocked.calls) == 0


def test_download_once_replaces_empty_file(tmp_path, mocked):
    mocked.add(responses.GET, URL, body=b"fresh")
    dest = tmp_path / "tool.tar.gz"
    dest.write_bytes(b"")
    DownloadClient().download_once(URL, dest)
    assert dest.read_bytes() == b"fresh"


def test_destination_directory_rejected(tmp_path):
    with pytest.raises(IsADirectoryError):
        DownloadClient().download(URL, tmp_path)


def test_partial_download_is_resumed(tmp_path, mocked):
    mocked.add(responses.GET, URL, body=b"def", status=206)
    dest = tmp_path / "tool.tar.gz"
    (tmp_path / "tool.tar.gz.crdownload").write_bytes(b"abc")
    DownloadClient().download(URL, dest)
    assert mocked.calls[0].request.headers["Range"] == "bytes=3-"
    assert dest.read_bytes() == b"abcdef"


def test_full_response_overwrites_partial(tmp_path, mocked):
    mocked.add(responses.GET, URL, body=b"whole", status=200)
    dest = tmp_path / "tool.tar.gz"
    (tmp_path / "tool.tar.gz.crdownload").write_bytes(b"abc")
    DownloadClient().download(URL, dest)
    assert dest.read_bytes() == b"whole"


def test_http_error_raises(tmp_path, mocked):
    mocked.add(responses.GET, URL, status=404)
    dest = tmp_path / "tool.tar.gz"
    with pytest.raises(requests.HTTPError):
        DownloadClient().download(URL, dest)
    assert not dest.exists()