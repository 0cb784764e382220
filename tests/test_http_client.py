import pytest
import requests

from desksetup import __version__
from desksetup.common.errors import InstallError
from desksetup.http_client import HttpClient


class FakeResponse:
    def __init__(self, status=200, json_data=None, chunks=(), fail_after=None, text=""):
        self.status_code = status
        self._json = json_data
        self._chunks = list(chunks)
        self._fail_after = fail_after
        self.text = text
        self.closed = False

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error")

    def json(self):
        if self._json is None:
            raise ValueError("No JSON object could be decoded")
        return self._json

    def iter_content(self, chunk_size=1):
        for index, chunk in enumerate(self._chunks):
            if self._fail_after is not None and index >= self._fail_after:
                raise requests.exceptions.ConnectionError("connection reset")
            yield chunk

    def close(self):
        self.closed = True


class FakeSession:
    def __init__(self, response=None, error=None):
        self.headers = {}
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, params=None, timeout=None, stream=False):
        self.calls.append({'url': url, 'params': params, 'timeout': timeout, 'stream': stream})
        if self.error:
            raise self.error
        return self.response


def test_user_agent_and_timeout():
    session = FakeSession(FakeResponse(json_data={'ok': True}))
    client = HttpClient(timeout=7, session=session)

    assert client.get_json("https://api.example/x", params={'a': 1}) == {'ok': True}
    assert session.headers['User-Agent'].startswith("desksetup/")
    assert session.calls[0]['timeout'] == 7
    assert session.calls[0]['params'] == {'a': 1}


def test_transport_error_becomes_install_error():
    client = HttpClient(session=FakeSession(error=requests.exceptions.ConnectionError("down")))

    with pytest.raises(InstallError):
        client.get_json("https://api.example/x")


def test_http_error_becomes_install_error():
    client = HttpClient(session=FakeSession(FakeResponse(status=404)))

    with pytest.raises(InstallError):
        client.get_text("https://api.example/x")


def test_invalid_json():
    client = HttpClient(session=FakeSession(FakeResponse(json_data=None)))

    with pytest.raises(InstallError, match="Invalid JSON"):
        client.get_json("https://api.example/x")


def test_download_writes_file(tmp_path):
    response = FakeResponse(chunks=[b"abc", b"", b"def"])
    client = HttpClient(session=FakeSession(response))

    dest = client.download("https://dl.example/file.bin", tmp_path / "nested/file.bin")

    assert dest.read_bytes() == b"abcdef"
    assert response.closed


def test_download_removes_partial_file(tmp_path):
    client = HttpClient(session=FakeSession(FakeResponse(chunks=[b"abc", b"def"], fail_after=1)))
    dest = tmp_path / "file.bin"

    with pytest.raises(InstallError):
        client.download("https://dl.example/file.bin", dest)

    assert not dest.exists()


def test_try_download_reports_failure(tmp_path):
    client = HttpClient(session=FakeSession(FakeResponse(status=500)))

    assert client.try_download("https://dl.example/icon.svg", tmp_path / "icon.svg") is False


def test_user_agent_replaces_requests_default():
    session = requests.Session()

    HttpClient(session=session)

    assert session.headers['User-Agent'] == f"desksetup/{__version__}"
    assert HttpClient().session.headers['User-Agent'] == f"desksetup/{__version__}"
