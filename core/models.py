from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

# Structures de données partagées entre parseur, état, stockage et UI.

DEFAULT_GROUP = "Uncategorized"


def new_id() -> str:
    """
    Identifiant aléatoire (uuid4, 122 bits utiles).
    Probabilité de collision pour n ids ~ n² / 2^123 : négligeable à l'échelle d'une playlist.
    """
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Channel:
    """Une entrée EXTINF + URL. L'identité "favori" est l'URL, pas l'id."""
    id: str
    name: str
    url: str
    logo: Optional[str] = None
    group: str = DEFAULT_GROUP
    tvg_id: Optional[str] = None

    def to_dict(self) -> dict:
        d = {"id": self.id, "name": self.name, "url": self.url, "group": self.group}
        if self.logo is not None:
            d["logo"] = self.logo
        if self.tvg_id is not None:
            d["tvgId"] = self.tvg_id
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "Channel":
        return cls(
            id=str(d.get("id") or new_id()),
            name=str(d.get("name") or ""),
            url=str(d.get("url") or ""),
            logo=d.get("logo"),
            group=d.get("group") or DEFAULT_GROUP,
            tvg_id=d.get("tvgId"),
        )


@dataclass(frozen=True)
class Playlist:
    id: str
    name: str
    channels: tuple[Channel, ...] = ()
    added_at: int = 0  # epoch ms
    url: Optional[str] = None

    def to_dict(self) -> dict:
        d = {
            "id": self.id,
            "name": self.name,
            "channels": [c.to_dict() for c in self.channels],
            "addedAt": self.added_at,
        }
        if self.url is not None:
            d["url"] = self.url
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "Playlist":
        return cls(
            id=str(d.get("id") or new_id()),
            name=str(d.get("name") or ""),
            channels=tuple(Channel.from_dict(c) for c in (d.get("channels") or []) if isinstance(c, dict)),
            added_at=int(d.get("addedAt") or 0),
            url=d.get("url"),
        )


class ViewMode(str, Enum):
    PLAYLISTS = "playlists"
    CHANNELS = "channels"
    PLAYER = "player"
    FAVORITES = "favorites"


@dataclass(frozen=True)
class AppState:
    """
    État complet de l'application. Immuable : chaque action produit un nouvel
    AppState via core.state, puis StateStore.commit() persiste ce qui a changé.
    """
    playlists: tuple[Playlist, ...] = ()
    active_playlist_id: Optional[str] = None
    active_channel: Optional[Channel] = None
    favorites: tuple[str, ...] = ()  # URLs de flux, ordre d'ajout
    search_query: str = ""
    active_group: Optional[str] = None
    view: ViewMode = field(default=ViewMode.PLAYLISTS)
