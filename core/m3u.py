from __future__ import annotations

import re
import time
from pathlib import Path

from .models import DEFAULT_GROUP, Channel, Playlist, new_id

# Parsing best-effort des playlists M3U étendues (EXTINF + URL) : aucune erreur levée,
# les lignes non reconnues sont ignorées.

EXTINF_PREFIX = "#EXTINF:"
EXTINF_NAME_RE = re.compile(r",([^,]*)$")
TVG_LOGO_RE = re.compile(r'tvg-logo="([^"]*)"')
GROUP_TITLE_RE = re.compile(r'group-title="([^"]*)"')
TVG_ID_RE = re.compile(r'tvg-id="([^"]*)"')

DEFAULT_CHANNEL_NAME = "Unknown Channel"
DEFAULT_PLAYLIST_NAME = "Untitled Playlist"


def parse_extinf(extinf: str) -> dict:
    """
    Extrait nom + attributs connus (tvg-logo, group-title, tvg-id) depuis une ligne #EXTINF.
    Le nom est le texte après la DERNIÈRE virgule : un nom contenant lui-même une virgule
    est tronqué (limitation acceptée).
    """
    m = EXTINF_NAME_RE.search(extinf)
    logo = TVG_LOGO_RE.search(extinf)
    group = GROUP_TITLE_RE.search(extinf)
    tvg_id = TVG_ID_RE.search(extinf)
    return {
        "name": m.group(1).strip() if m else DEFAULT_CHANNEL_NAME,
        "logo": logo.group(1) if logo else None,
        "group": group.group(1) if group else DEFAULT_GROUP,
        "tvg_id": tvg_id.group(1) if tvg_id else None,
    }


def _is_stream_line(line: str) -> bool:
    return line.startswith("http") or "://" in line


def parse_m3u(content: str, name: str) -> Playlist:
    """
    Convertit le texte M3U en Playlist.

    Un seul descripteur en attente : un #EXTINF sans URL qui suit est écrasé par le
    suivant, une URL sans #EXTINF (ou dont le nom est vide) est ignorée.
    """
    channels: list[Channel] = []
    pending: dict | None = None

    for raw in content.split("\n"):
        line = raw.strip()

        if line.startswith(EXTINF_PREFIX):
            pending = parse_extinf(line)
            pending["id"] = new_id()
        elif _is_stream_line(line):
            if pending and pending["name"]:
                channels.append(Channel(url=line, **pending))
                pending = None

    return Playlist(
        id=new_id(),
        name=name or DEFAULT_PLAYLIST_NAME,
        channels=tuple(channels),
        added_at=int(time.time() * 1000),
    )


def read_m3u_file(path: str | Path, name: str = "") -> Playlist:
    """Lit une playlist locale (.m3u/.m3u8). Le nom par défaut est le nom du fichier."""
    path = Path(path)
    text = path.read_text(encoding="utf-8", errors="ignore")
    return parse_m3u(text, name or path.name)
