from core import state as st
from core.models import AppState, Channel, Playlist, ViewMode


def ch(name, url, group="Uncategorized"):
    return Channel(id=f"id-{name}", name=name, url=url, group=group)


def make_playlist(pid="p1", name="List", channels=()):
    return Playlist(id=pid, name=name, channels=tuple(channels), added_at=1)


NEWS = ch("News 24", "http://x/news", "News")
SPORT = ch("Sport One", "http://x/sport", "Sports")
KIDS = ch("Kids TV", "http://x/kids", "Kids")


def test_add_playlist_with_override_name():
    s = st.add_playlist(AppState(), make_playlist(), "Renamed")
    assert [p.name for p in s.playlists] == ["Renamed"]
    assert s.active_playlist_id == "p1"
    assert s.view == ViewMode.PLAYLISTS


def test_add_playlist_keeps_parsed_name_without_override():
    s = st.add_playlist(AppState(), make_playlist(name="parsed.m3u"), "")
    assert s.playlists[0].name == "parsed.m3u"


def test_toggle_favorite_round_trip():
    s0 = AppState(favorites=("http://x/other",))
    s1 = st.toggle_favorite(s0, NEWS.url)
    assert st.is_favorite(s1, NEWS.url)
    s2 = st.toggle_favorite(s1, NEWS.url)
    assert not st.is_favorite(s2, NEWS.url)
    assert s2.favorites == s0.favorites


def test_delete_active_playlist_clears_selection():
    s = st.add_playlist(AppState(), make_playlist("p1"))
    s = st.add_playlist(s, make_playlist("p2"))
    s = st.select_playlist(s, "p2")
    assert s.view == ViewMode.CHANNELS

    s = st.delete_playlist(s, "p2")
    assert [p.id for p in s.playlists] == ["p1"]
    assert s.active_playlist_id is None
    assert s.view == ViewMode.PLAYLISTS


def test_delete_inactive_playlist_keeps_selection():
    s = st.add_playlist(AppState(), make_playlist("p1"))
    s = st.add_playlist(s, make_playlist("p2"))
    s = st.delete_playlist(s, "p1")
    assert s.active_playlist_id == "p2"


def test_delete_unknown_playlist_is_noop():
    s = st.add_playlist(AppState(), make_playlist("p1"))
    assert st.delete_playlist(s, "nope") is s


def test_delete_keeps_favorites():
    s = st.add_playlist(AppState(), make_playlist("p1", channels=[NEWS]))
    s = st.toggle_favorite(s, NEWS.url)
    s = st.delete_playlist(s, "p1")
    assert s.favorites == (NEWS.url,)


def test_groups_sorted_unique():
    pl = make_playlist(channels=[SPORT, NEWS, KIDS, ch("More News", "http://x/n2", "News")])
    assert st.groups(pl) == ["Kids", "News", "Sports"]
    assert st.groups(None) == []


def test_filtered_channels_by_group_and_search():
    pl = make_playlist(channels=[NEWS, SPORT, KIDS, ch("Sport Two", "http://x/s2", "Sports")])
    s = st.add_playlist(AppState(), pl)

    s = st.set_group(s, "Sports")
    assert [c.name for c in st.filtered_channels(s)] == ["Sport One", "Sport Two"]

    s = st.set_search(s, "TWO")
    assert [c.name for c in st.filtered_channels(s)] == ["Sport Two"]

    s = st.set_group(st.set_search(s, ""), None)
    assert len(st.filtered_channels(s)) == 4


def test_filtered_channels_without_active_playlist():
    assert st.filtered_channels(AppState()) == []


def test_favorite_channels_across_playlists_dedup_by_url():
    dup = ch("News copy", NEWS.url, "News")
    s = st.add_playlist(AppState(), make_playlist("p1", channels=[NEWS, SPORT]))
    s = st.add_playlist(s, make_playlist("p2", channels=[dup, KIDS]))
    s = st.toggle_favorite(s, NEWS.url)
    s = st.toggle_favorite(s, KIDS.url)

    assert [c.name for c in st.favorite_channels(s)] == ["News 24", "Kids TV"]


def test_play_channel_and_view_guards():
    s = AppState()
    assert st.show_player(s) is s
    assert st.show_channels(s) is s

    s = st.play_channel(s, NEWS)
    assert s.active_channel == NEWS
    assert s.view == ViewMode.PLAYER

    s = st.set_view(s, ViewMode.FAVORITES)
    assert s.view == ViewMode.FAVORITES
    assert st.set_view(s, ViewMode.PLAYER).view == ViewMode.PLAYER


def test_select_unknown_playlist_is_noop():
    s = AppState()
    assert st.select_playlist(s, "missing") is s


def test_restored_state_activates_first_playlist():
    s = st.restored_state([make_playlist("a"), make_playlist("b")], ["u1", "u1", "", "u2"])
    assert s.active_playlist_id == "a"
    assert s.favorites == ("u1", "u2")
    assert st.restored_state([], []).active_playlist_id is None


def test_adjacent_channel_wraps():
    chans = [NEWS, SPORT, KIDS]
    assert st.adjacent_channel(chans, SPORT, 1) == KIDS
    assert st.adjacent_channel(chans, KIDS, 1) == NEWS
    assert st.adjacent_channel(chans, NEWS, -1) == KIDS
    assert st.adjacent_channel(chans, None, 1) == NEWS
    assert st.adjacent_channel([], NEWS, 1) is None
