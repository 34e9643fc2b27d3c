import pytest
import requests

from core.logos import MAX_LOGO_BYTES, fetch_logo_bytes, is_remote_logo

PNG = b"\x89PNG\r\n\x1a\n fake image"


class FakeResponse:
    def __init__(self, status_code=200, content=b""):
        self.status_code = status_code
        self.content = content

    @property
    def ok(self):
        return self.status_code < 400


class FakeSession:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        if self.exc is not None:
            raise self.exc
        return self.response


def test_logo_bytes_are_returned():
    session = FakeSession(FakeResponse(200, PNG))
    assert fetch_logo_bytes(" https://cdn.example.com/arte.png ", session=session, timeout=2) == PNG
    assert session.calls == [("https://cdn.example.com/arte.png", 2)]


@pytest.mark.parametrize(
    "session",
    [
        FakeSession(FakeResponse(404, b"missing")),
        FakeSession(FakeResponse(200, b"")),
        FakeSession(FakeResponse(200, b"x" * (MAX_LOGO_BYTES + 1))),
        FakeSession(exc=requests.Timeout("slow")),
    ],
)
def test_logo_failures_give_none(session):
    assert fetch_logo_bytes("http://cdn.example.com/x.png", session=session) is None


@pytest.mark.parametrize("url", [None, "", "logo.png", "/img/logo.png", "file:///tmp/logo.png"])
def test_non_http_logo_is_not_fetched(url):
    session = FakeSession(FakeResponse(200, PNG))
    assert not is_remote_logo(url)
    assert fetch_logo_bytes(url, session=session) is None
    assert session.calls == []
