import json

import pytest

from core import state as st
from core.m3u import parse_m3u
from core.models import AppState, Playlist
from storage import FAVORITES_KEY, PLAYLISTS_KEY, StateStore, Storage


@pytest.fixture
def storage(tmp_path):
    return Storage(tmp_path / "sub" / "iptv.db")


def sample_playlist() -> Playlist:
    content = (
        '#EXTINF:-1 tvg-id="ch1" tvg-logo="logo.png" group-title="Sports",Channel One\n'
        "http://example.com/ch1.m3u8\n"
        "#EXTINF:-1,Plain\n"
        "http://example.com/plain\n"
    )
    return parse_m3u(content, "Sports")


def test_playlists_survive_reopen(storage):
    pl = sample_playlist()
    storage.save_playlists([pl])

    again = Storage(storage.db_path)
    assert again.load_playlists() == [pl]


def test_record_uses_local_storage_keys(storage):
    storage.save_playlists([sample_playlist()])
    data = json.loads(storage.get_record(PLAYLISTS_KEY))
    first = data[0]["channels"][0]
    assert first["tvgId"] == "ch1"
    assert first["logo"] == "logo.png"
    assert "addedAt" in data[0]
    assert "tvgId" not in data[0]["channels"][1]


def test_favorites_round_trip(storage):
    storage.save_favorites(("http://a", "http://b"))
    assert storage.load_favorites() == ["http://a", "http://b"]


def test_missing_and_corrupt_records_are_empty(storage):
    assert storage.load_playlists() == []
    assert storage.load_favorites() == []

    storage.set_record(PLAYLISTS_KEY, "{not json")
    storage.set_record(FAVORITES_KEY, '{"not": "a list"}')
    assert storage.load_playlists() == []
    assert storage.load_favorites() == []


class CountingStorage(Storage):
    def __init__(self, db_path):
        super().__init__(db_path)
        self.writes = []

    def set_record(self, key, value):
        self.writes.append(key)
        super().set_record(key, value)


def test_state_store_commits_only_changed_records(tmp_path):
    storage = CountingStorage(tmp_path / "iptv.db")
    store = StateStore(storage)
    s = store.restore()
    assert s == AppState()

    s = store.commit(st.add_playlist(s, sample_playlist()))
    assert storage.writes == [PLAYLISTS_KEY]

    s = store.commit(st.toggle_favorite(s, "http://example.com/plain"))
    assert storage.writes == [PLAYLISTS_KEY, FAVORITES_KEY]

    store.commit(st.set_search(s, "one"))
    assert storage.writes == [PLAYLISTS_KEY, FAVORITES_KEY]


def test_deleted_playlist_is_removed_from_persisted_collection(tmp_path):
    store = StateStore(Storage(tmp_path / "iptv.db"))
    s = store.restore()
    pl = sample_playlist()
    s = store.commit(st.add_playlist(s, pl))
    s = store.commit(st.delete_playlist(s, pl.id))
    assert s.active_playlist_id is None

    restored = StateStore(Storage(tmp_path / "iptv.db")).restore()
    assert restored.playlists == ()
    assert restored.active_playlist_id is None


def test_restore_activates_first_playlist(tmp_path):
    storage = Storage(tmp_path / "iptv.db")
    a, b = sample_playlist(), parse_m3u("", "Second")
    storage.save_playlists([a, b])
    storage.save_favorites(["http://example.com/ch1.m3u8"])

    s = StateStore(storage).restore()
    assert s.active_playlist_id == a.id
    assert [c.name for c in st.favorite_channels(s)] == ["Channel One"]
