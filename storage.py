from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Optional

from core.models import AppState, Playlist
from core.state import restored_state

# Persistance SQLite : deux enregistrements clé/valeur indépendants (playlists, favoris)
# sérialisés en JSON, à la manière du localStorage d'un navigateur.

log = logging.getLogger(__name__)

PLAYLISTS_KEY = "iptv_playlists"
FAVORITES_KEY = "iptv_favorites"


class Storage:
    """Wrapper léger autour de sqlite3 : une table `records(key, value)`."""
    def __init__(self, db_path: str | Path = "data/iptv.db"):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        # WAL pour réduire le locking entre lectures/écritures.
        con = sqlite3.connect(self.db_path)
        con.execute("PRAGMA journal_mode=WAL;")
        return con

    def _init_db(self) -> None:
        con = self._connect()
        try:
            con.executescript(
                """
                CREATE TABLE IF NOT EXISTS records (
                    key   TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT DEFAULT (datetime('now'))
                );
                """
            )
            con.commit()
        finally:
            con.close()

    # -------------------------
    # Records bruts
    # -------------------------
    def get_record(self, key: str) -> Optional[str]:
        con = self._connect()
        try:
            row = con.execute("SELECT value FROM records WHERE key=?", (key,)).fetchone()
            return row[0] if row else None
        finally:
            con.close()

    def set_record(self, key: str, value: str) -> None:
        con = self._connect()
        try:
            con.execute(
                """
                INSERT INTO records(key, value, updated_at) VALUES (?, ?, datetime('now'))
                ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at
                """,
                (key, value),
            )
            con.commit()
        finally:
            con.close()

    def _load_json(self, key: str):
        raw = self.get_record(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            log.warning("Record %s illisible (JSON invalide), ignoré.", key)
            return None

    # -------------------------
    # Playlists + Favoris
    # -------------------------
    def load_playlists(self) -> list[Playlist]:
        data = self._load_json(PLAYLISTS_KEY)
        if not isinstance(data, list):
            return []
        return [Playlist.from_dict(d) for d in data if isinstance(d, dict)]

    def save_playlists(self, playlists) -> None:
        self.set_record(PLAYLISTS_KEY, json.dumps([p.to_dict() for p in playlists], ensure_ascii=False))

    def load_favorites(self) -> list[str]:
        data = self._load_json(FAVORITES_KEY)
        if not isinstance(data, list):
            return []
        return [u for u in data if isinstance(u, str) and u]

    def save_favorites(self, favorites) -> None:
        self.set_record(FAVORITES_KEY, json.dumps(list(favorites), ensure_ascii=False))


class StateStore:
    """
    Adaptateur de persistance pour AppState.
    commit() n'écrit que les enregistrements dont la partie d'état a changé depuis le dernier commit.
    """
    def __init__(self, storage: Storage):
        self.storage = storage
        self._playlists: Optional[tuple] = None
        self._favorites: Optional[tuple] = None

    def restore(self) -> AppState:
        state = restored_state(self.storage.load_playlists(), self.storage.load_favorites())
        self._playlists = state.playlists
        self._favorites = state.favorites
        log.info("Restauré: %d playlists, %d favoris.", len(state.playlists), len(state.favorites))
        return state

    def commit(self, state: AppState) -> AppState:
        if state.playlists != self._playlists:
            self.storage.save_playlists(state.playlists)
            self._playlists = state.playlists
            log.debug("Playlists persistées (%d).", len(state.playlists))
        if state.favorites != self._favorites:
            self.storage.save_favorites(state.favorites)
            self._favorites = state.favorites
            log.debug("Favoris persistés (%d).", len(state.favorites))
        return state
