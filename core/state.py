from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Optional

from .models import DEFAULT_GROUP, AppState, Channel, Playlist, ViewMode

# Transitions d'état pures : chaque fonction prend un AppState et en retourne un nouveau.
# Aucune I/O ici ; la persistance est faite par storage.StateStore après chaque transition.


def restored_state(playlists: Iterable[Playlist], favorites: Iterable[str]) -> AppState:
    """État initial après relecture du stockage : la première playlist devient active."""
    pls = tuple(playlists)
    favs: list[str] = []
    for url in favorites:
        if url and url not in favs:
            favs.append(url)
    return AppState(
        playlists=pls,
        active_playlist_id=pls[0].id if pls else None,
        favorites=tuple(favs),
    )


# -------------------------
# Lecture
# -------------------------
def find_playlist(state: AppState, playlist_id: Optional[str]) -> Optional[Playlist]:
    if playlist_id is None:
        return None
    for p in state.playlists:
        if p.id == playlist_id:
            return p
    return None


def active_playlist(state: AppState) -> Optional[Playlist]:
    return find_playlist(state, state.active_playlist_id)


def is_favorite(state: AppState, url: str) -> bool:
    return url in state.favorites


def groups(playlist: Optional[Playlist]) -> list[str]:
    """Groupes distincts de la playlist, triés."""
    if playlist is None:
        return []
    return sorted({c.group or DEFAULT_GROUP for c in playlist.channels})


def _matches(channel: Channel, query: str) -> bool:
    return query.lower() in channel.name.lower()


def filtered_channels(state: AppState) -> list[Channel]:
    """Chaînes de la playlist active, filtrées par groupe actif puis par recherche (nom)."""
    playlist = active_playlist(state)
    if playlist is None:
        return []
    channels: Iterable[Channel] = playlist.channels
    if state.active_group:
        channels = [c for c in channels if (c.group or DEFAULT_GROUP) == state.active_group]
    return [c for c in channels if _matches(c, state.search_query)]


def favorite_channels(state: AppState) -> list[Channel]:
    """Chaînes favorites toutes playlists confondues (première occurrence par URL)."""
    seen: set[str] = set()
    out: list[Channel] = []
    for p in state.playlists:
        for c in p.channels:
            if c.url in seen or c.url not in state.favorites:
                continue
            seen.add(c.url)
            if _matches(c, state.search_query):
                out.append(c)
    return out


def adjacent_channel(channels: list[Channel], current: Optional[Channel], delta: int) -> Optional[Channel]:
    """Chaîne précédente/suivante (zap) dans `channels`, avec bouclage. Repère la chaîne par URL."""
    if not channels:
        return None
    idx = next((i for i, c in enumerate(channels) if current is not None and c.url == current.url), None)
    if idx is None:
        return channels[0] if delta >= 0 else channels[-1]
    return channels[(idx + delta) % len(channels)]


# -------------------------
# Playlists
# -------------------------
def add_playlist(state: AppState, playlist: Playlist, name: Optional[str] = None) -> AppState:
    if name:
        playlist = replace(playlist, name=name)
    return replace(
        state,
        playlists=state.playlists + (playlist,),
        active_playlist_id=playlist.id,
        active_group=None,
        view=ViewMode.PLAYLISTS,
    )


def delete_playlist(state: AppState, playlist_id: str) -> AppState:
    if find_playlist(state, playlist_id) is None:
        return state
    remaining = tuple(p for p in state.playlists if p.id != playlist_id)
    if state.active_playlist_id != playlist_id:
        return replace(state, playlists=remaining)
    view = ViewMode.PLAYLISTS if state.view == ViewMode.CHANNELS else state.view
    return replace(
        state,
        playlists=remaining,
        active_playlist_id=None,
        active_group=None,
        view=view,
    )


def select_playlist(state: AppState, playlist_id: str) -> AppState:
    if find_playlist(state, playlist_id) is None:
        return state
    return replace(state, active_playlist_id=playlist_id, active_group=None, view=ViewMode.CHANNELS)


# -------------------------
# Favoris / chaîne active / filtres
# -------------------------
def toggle_favorite(state: AppState, url: str) -> AppState:
    if not url:
        return state
    if url in state.favorites:
        favs = tuple(u for u in state.favorites if u != url)
    else:
        favs = state.favorites + (url,)
    return replace(state, favorites=favs)


def play_channel(state: AppState, channel: Channel) -> AppState:
    return replace(state, active_channel=channel, view=ViewMode.PLAYER)


def set_search(state: AppState, text: str) -> AppState:
    return replace(state, search_query=text or "")


def set_group(state: AppState, group: Optional[str]) -> AppState:
    return replace(state, active_group=group or None)


# -------------------------
# Vues
# -------------------------
def show_playlists(state: AppState) -> AppState:
    return replace(state, view=ViewMode.PLAYLISTS)


def show_channels(state: AppState) -> AppState:
    if active_playlist(state) is None:
        return state
    return replace(state, view=ViewMode.CHANNELS)


def show_player(state: AppState) -> AppState:
    if state.active_channel is None:
        return state
    return replace(state, view=ViewMode.PLAYER)


def show_favorites(state: AppState) -> AppState:
    return replace(state, view=ViewMode.FAVORITES)


def set_view(state: AppState, view: ViewMode) -> AppState:
    return {
        ViewMode.PLAYLISTS: show_playlists,
        ViewMode.CHANNELS: show_channels,
        ViewMode.PLAYER: show_player,
        ViewMode.FAVORITES: show_favorites,
    }[ViewMode(view)](state)
