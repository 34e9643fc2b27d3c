from __future__ import annotations

import logging
from typing import Optional

import requests

# Téléchargement des logos de chaînes (tvg-logo). Best-effort : jamais d'exception.

log = logging.getLogger(__name__)

LOGO_TIMEOUT = 5.0
MAX_LOGO_BYTES = 2 * 1024 * 1024


def is_remote_logo(url: Optional[str]) -> bool:
    u = (url or "").strip().lower()
    return u.startswith("http://") or u.startswith("https://")


def fetch_logo_bytes(
    url: Optional[str],
    *,
    session: Optional[requests.Session] = None,
    timeout: float = LOGO_TIMEOUT,
) -> Optional[bytes]:
    """Octets de l'image, ou None (URL relative/vide, HTTP non-2xx, erreur réseau, image trop lourde)."""
    if not is_remote_logo(url):
        return None
    http = session or requests
    try:
        r = http.get(url.strip(), timeout=timeout)
    except requests.RequestException as e:
        log.debug("Logo %s: %s", url, e)
        return None
    if not r.ok:
        log.debug("Logo %s: HTTP %s", url, r.status_code)
        return None
    data = r.content or b""
    if not data or len(data) > MAX_LOGO_BYTES:
        return None
    return data
