import pytest
import requests

from core.loader import DEFAULT_REMOTE_NAME, FetchError, fetch_playlist_from_url, playlist_name_from_url


class FakeResponse:
    def __init__(self, status_code=200, text=""):
        self.status_code = status_code
        self.text = text
        self.headers = {}

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


M3U = '#EXTM3U\n#EXTINF:-1 group-title="News",Info\nhttp://example.com/info.m3u8\n'


def test_fetch_success_attaches_url_and_name():
    session = FakeSession(FakeResponse(200, M3U))
    url = "http://example.com/lists/news.m3u"

    pl = fetch_playlist_from_url(url, session=session, timeout=5)

    assert session.calls == [(url, 5)]
    assert pl.url == url
    assert pl.name == "news.m3u"
    assert [c.name for c in pl.channels] == ["Info"]


def _utf8_response(content_type):
    r = requests.Response()
    r.status_code = 200
    r._content = (
        '#EXTM3U\n#EXTINF:-1 group-title="Général",Télé Québec\nhttp://example.com/tq\n'
        '#EXTINF:-1 group-title="News",الجزيرة\nhttp://example.com/aj\n'
    ).encode("utf-8")
    r.headers["Content-Type"] = content_type
    return r


def test_fetch_decodes_utf8_when_no_charset_is_declared():
    session = FakeSession(_utf8_response("text/plain"))
    pl = fetch_playlist_from_url("http://example.com/fr.m3u", session=session)
    assert [c.name for c in pl.channels] == ["Télé Québec", "الجزيرة"]
    assert pl.channels[0].group == "Général"


def test_fetch_keeps_declared_charset():
    r = _utf8_response("audio/x-mpegurl; charset=utf-8")
    pl = fetch_playlist_from_url("http://example.com/fr.m3u", session=FakeSession(r))
    assert pl.channels[0].name == "Télé Québec"


def test_fetch_http_error_raises():
    session = FakeSession(FakeResponse(404, "not found"))
    with pytest.raises(FetchError) as ei:
        fetch_playlist_from_url("http://example.com/missing.m3u", session=session)
    assert ei.value.status == 404
    assert ei.value.url == "http://example.com/missing.m3u"
    assert len(session.calls) == 1  # pas de retry


def test_fetch_transport_error_is_wrapped():
    session = FakeSession(exc=requests.ConnectionError("boom"))
    with pytest.raises(FetchError) as ei:
        fetch_playlist_from_url("http://unreachable.invalid/x.m3u", session=session)
    assert ei.value.status is None
    assert isinstance(ei.value.__cause__, requests.ConnectionError)


@pytest.mark.parametrize(
    "url, expected",
    [
        ("http://example.com/tv/playlist.m3u8", "playlist.m3u8"),
        ("http://example.com/tv/", DEFAULT_REMOTE_NAME),
        ("http://example.com/get.php?type=m3u", "get.php?type=m3u"),
    ],
)
def test_playlist_name_from_url(url, expected):
    assert playlist_name_from_url(url) == expected
