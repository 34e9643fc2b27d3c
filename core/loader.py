from __future__ import annotations

import dataclasses
import logging
from typing import Optional

import requests

from .m3u import parse_m3u
from .models import Playlist

# Téléchargement d'une playlist distante (un seul GET, pas de retry) puis parsing.

log = logging.getLogger(__name__)

DEFAULT_REMOTE_NAME = "Remote Playlist"
DEFAULT_TIMEOUT = 20.0


class FetchError(Exception):
    """Échec de récupération d'une playlist (statut HTTP non-2xx ou erreur transport)."""

    def __init__(self, url: str, status: Optional[int] = None, reason: str = ""):
        self.url = url
        self.status = status
        self.reason = reason
        detail = f"HTTP {status}" if status is not None else (reason or "transport error")
        super().__init__(f"Failed to fetch playlist {url}: {detail}")


def playlist_name_from_url(url: str) -> str:
    """Dernier segment de l'URL (après le dernier '/'), sinon un nom générique."""
    return url.split("/")[-1] or DEFAULT_REMOTE_NAME


def fetch_playlist_from_url(
    url: str,
    *,
    session: Optional[requests.Session] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> Playlist:
    http = session or requests
    log.info("Téléchargement playlist: %s", url)
    try:
        r = http.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise FetchError(url, reason=f"{type(e).__name__}: {e}") from e

    if not r.ok:
        raise FetchError(url, status=r.status_code)

    # Sans charset explicite, requests retombe sur ISO-8859-1 pour text/* : les playlists sont en UTF-8.
    if "charset=" not in (r.headers.get("Content-Type") or "").lower():
        r.encoding = "utf-8"

    playlist = parse_m3u(r.text, playlist_name_from_url(url))
    log.info("Playlist %r: %d chaînes", playlist.name, len(playlist.channels))
    return dataclasses.replace(playlist, url=url)
