# ui/main_window.py
from __future__ import annotations

from collections import deque
import logging
import threading
import time

from PySide6 import QtCore, QtGui, QtWidgets

from config import AppConfig
from core import state as st
from core.assistant import ChannelAssistant
from core.loader import fetch_playlist_from_url
from core.m3u import read_m3u_file
from core.models import AppState, Channel, ViewMode
from storage import StateStore, Storage
from ui.add_playlist_dialog import AddPlaylistDialog
from ui.channels_tab import ChannelsTab
from ui.logo_loader import LogoLoader
from ui.playlists_tab import PlaylistsTab

log = logging.getLogger(__name__)

LEVELS = {"ALL": 0, "DEBUG": 10, "INFO": 20, "WARN": 30, "ERROR": 40}
NAV_ITEMS = [
    (ViewMode.PLAYLISTS, "Playlists"),
    (ViewMode.CHANNELS, "Chaînes"),
    (ViewMode.PLAYER, "Lecteur"),
    (ViewMode.FAVORITES, "Favoris"),
]


class _SignalLogHandler(logging.Handler):
    """Relaye les records `logging` vers le panneau de log (via signal Qt, thread-safe)."""

    def __init__(self, emit_line):
        super().__init__()
        self._emit_line = emit_line
        self.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)-5s %(message)s", "%H:%M:%S"))

    def emit(self, record: logging.LogRecord):
        try:
            for line in self.format(record).splitlines() or [""]:
                self._emit_line(record.levelno, line.rstrip())
        except Exception:
            self.handleError(record)


class MainWindow(QtWidgets.QMainWindow):
    """
    Main UI container: navigation (playlists / chaînes / lecteur / favoris), recherche,
    lecteur VLC et log global. Toute action passe par une transition de core.state puis
    StateStore.commit() ; l'UI est ensuite re-rendue depuis l'état.
    """
    log_sig = QtCore.Signal(int, str)

    def __init__(self, cfg: AppConfig | None = None):
        super().__init__()
        self.cfg = cfg or AppConfig()
        self.setWindowTitle("IPTV Browser (PySide6)")
        self.resize(1200, 760)

        # Etat + persistance
        self.store = StateStore(Storage(self.cfg.db_path))
        self.state: AppState = self.store.restore()
        self.assistant = ChannelAssistant(
            api_key=self.cfg.gemini_api_key,
            model=self.cfg.gemini_model,
        )
        self.logos = LogoLoader(self)
        self.player_widget = None
        self._zap_from_favorites = False
        self._player_error: str | None = None

        central = QtWidgets.QWidget()
        self.setCentralWidget(central)
        layout = QtWidgets.QVBoxLayout(central)

        # ---- Barre du haut: navigation + recherche
        top = QtWidgets.QHBoxLayout()
        layout.addLayout(top)

        self._nav_group = QtWidgets.QButtonGroup(self)
        self._nav_group.setExclusive(True)
        self._nav_buttons: dict[ViewMode, QtWidgets.QToolButton] = {}
        for mode, label in NAV_ITEMS:
            btn = QtWidgets.QToolButton(text=label, checkable=True)
            btn.clicked.connect(lambda _=False, m=mode: self._dispatch(st.set_view, m))
            self._nav_group.addButton(btn)
            self._nav_buttons[mode] = btn
            top.addWidget(btn)

        self.btn_add = QtWidgets.QToolButton(text="+ Ajouter")
        top.addWidget(self.btn_add)
        top.addSpacing(12)

        self.search = QtWidgets.QLineEdit()
        self.search.setPlaceholderText("Rechercher une chaîne…")
        self.search.setClearButtonEnabled(True)
        top.addWidget(self.search, 1)

        self.progress = QtWidgets.QProgressBar()
        self.progress.setMaximumWidth(160)
        self.progress.setRange(0, 0)
        self.progress.hide()
        top.addWidget(self.progress)

        # Splitter vertical: pages en haut, log global en bas
        self.vsplit = QtWidgets.QSplitter(QtCore.Qt.Vertical)
        layout.addWidget(self.vsplit, 1)

        self.pages = QtWidgets.QStackedWidget()
        self.vsplit.addWidget(self.pages)

        self.playlists_tab = PlaylistsTab()
        self.channels_tab = ChannelsTab(empty_text="Aucune chaîne ne correspond.", logos=self.logos)
        self.favorites_tab = ChannelsTab(
            show_groups=False,
            empty_text="Pas encore de favoris : clique sur ♡ à côté d'une chaîne.",
            logos=self.logos,
        )
        self.player_page = QtWidgets.QWidget()
        self._player_layout = QtWidgets.QVBoxLayout(self.player_page)
        self._player_layout.setContentsMargins(0, 0, 0, 0)
        self.lbl_player_placeholder = QtWidgets.QLabel("Choisis une chaîne pour lancer la lecture.")
        self.lbl_player_placeholder.setAlignment(QtCore.Qt.AlignCenter)
        self._player_layout.addWidget(self.lbl_player_placeholder)

        self._page_index = {
            ViewMode.PLAYLISTS: self.pages.addWidget(self.playlists_tab),
            ViewMode.CHANNELS: self.pages.addWidget(self.channels_tab),
            ViewMode.PLAYER: self.pages.addWidget(self.player_page),
            ViewMode.FAVORITES: self.pages.addWidget(self.favorites_tab),
        }

        # ---- Log
        log_box = QtWidgets.QWidget()
        lb = QtWidgets.QVBoxLayout(log_box)
        lb.setContentsMargins(0, 0, 0, 0)
        log_bar = QtWidgets.QHBoxLayout()
        log_bar.addWidget(QtWidgets.QLabel("Log"))
        self.cmb_log_level = QtWidgets.QComboBox()
        self.cmb_log_level.addItems(list(LEVELS))
        self.cmb_log_level.setCurrentText("INFO")
        self.btn_clear_log = QtWidgets.QToolButton(text="Effacer")
        log_bar.addWidget(self.cmb_log_level)
        log_bar.addStretch(1)
        log_bar.addWidget(self.btn_clear_log)
        lb.addLayout(log_bar)
        self.log = QtWidgets.QPlainTextEdit()
        self.log.setReadOnly(True)
        self.log.setMaximumBlockCount(3000)
        lb.addWidget(self.log, 1)
        self.vsplit.addWidget(log_box)
        self.vsplit.setSizes([600, 140])

        self._log_buffer: deque[tuple[int, str]] = deque(maxlen=3000)  # (level_num, rendered_line)
        self._log_level_min = LEVELS["INFO"]
        self.log_sig.connect(self._append_log_line)
        self._log_handler = _SignalLogHandler(self.log_sig.emit)
        logging.getLogger().addHandler(self._log_handler)

        # ---- Signaux
        self.btn_add.clicked.connect(self.on_add_playlist)
        self.search.textChanged.connect(lambda text: self._dispatch(st.set_search, text))
        self.playlists_tab.add_requested.connect(self.on_add_playlist)
        self.playlists_tab.open_requested.connect(lambda pid: self._dispatch(st.select_playlist, pid))
        self.playlists_tab.delete_requested.connect(self.on_delete_playlist)
        self.channels_tab.group_selected.connect(lambda g: self._dispatch(st.set_group, g))
        self.channels_tab.play_requested.connect(lambda ch: self.on_play_channel(ch, from_favorites=False))
        self.channels_tab.favorite_toggled.connect(lambda url: self._dispatch(st.toggle_favorite, url))
        self.favorites_tab.play_requested.connect(lambda ch: self.on_play_channel(ch, from_favorites=True))
        self.favorites_tab.favorite_toggled.connect(lambda url: self._dispatch(st.toggle_favorite, url))
        self.cmb_log_level.currentTextChanged.connect(self._on_log_level_changed)
        self.btn_clear_log.clicked.connect(self._clear_logs)

        find = QtGui.QShortcut(QtGui.QKeySequence(QtGui.QKeySequence.StandardKey.Find), self)
        find.activated.connect(self.search.setFocus)

        self._render()
        log.info("Prêt: %d playlists, %d favoris.", len(self.state.playlists), len(self.state.favorites))

    # -------------------------
    # Etat
    # -------------------------
    def _dispatch(self, transition, *args):
        new_state = transition(self.state, *args)
        if new_state is not self.state:
            self.state = self.store.commit(new_state)
        # rendu même sans changement : resynchronise la navigation après un clic refusé
        self._render()

    def _render(self):
        s = self.state
        self._nav_buttons[s.view].setChecked(True)
        self._nav_buttons[ViewMode.CHANNELS].setEnabled(st.active_playlist(s) is not None)
        self._nav_buttons[ViewMode.PLAYER].setEnabled(s.active_channel is not None)

        self.playlists_tab.set_playlists(s.playlists, s.active_playlist_id)
        self.channels_tab.set_groups(st.groups(st.active_playlist(s)), s.active_group)
        self.channels_tab.set_channels(st.filtered_channels(s), s.favorites)
        self.favorites_tab.set_channels(st.favorite_channels(s), s.favorites)

        if s.active_channel is not None:
            panel = self._ensure_player_widget()
            if panel is not None:
                panel.play_channel(s.active_channel, favorite=st.is_favorite(s, s.active_channel.url))

        self.pages.setCurrentIndex(self._page_index[s.view])

        active = st.active_playlist(s)
        self.setWindowTitle(f"IPTV Browser — {active.name}" if active else "IPTV Browser")

    # -------------------------
    # Log
    # -------------------------
    @QtCore.Slot(int, str)
    def _append_log_line(self, level_num: int, line: str):
        self._log_buffer.append((int(level_num), line))
        if int(level_num) < int(self._log_level_min):
            return
        self.log.appendPlainText(line)
        self.log.moveCursor(QtGui.QTextCursor.MoveOperation.End)

    def _on_log_level_changed(self, level: str):
        self._log_level_min = LEVELS.get((level or "INFO").strip().upper(), 20)
        self.log.setUpdatesEnabled(False)
        try:
            self.log.clear()
            for level_num, line in self._log_buffer:
                if level_num >= self._log_level_min:
                    self.log.appendPlainText(line)
        finally:
            self.log.setUpdatesEnabled(True)

    def _clear_logs(self):
        self._log_buffer.clear()
        self.log.clear()

    # -------------------------
    # Tâches de fond
    # -------------------------
    def _run_in_background(self, func, *, on_success=None, on_error=None, on_finally=None, desc: str = ""):
        """
        Exécute une fonction potentiellement bloquante (réseau) dans un thread, et rapatrie les callbacks sur le thread Qt.
        """
        def target():
            try:
                res = func()
                if on_success:
                    QtCore.QTimer.singleShot(0, self, lambda r=res: on_success(r))
            except Exception as e:
                if on_error:
                    QtCore.QTimer.singleShot(0, self, lambda err=e: on_error(err))
                else:
                    log.error("%s: %s: %s", desc or "Tâche réseau", type(e).__name__, e)
            finally:
                if on_finally:
                    QtCore.QTimer.singleShot(0, self, on_finally)

        threading.Thread(target=target, daemon=True).start()

    # -------------------------
    # Playlists
    # -------------------------
    def on_add_playlist(self):
        dlg = AddPlaylistDialog(self)
        if dlg.exec() != QtWidgets.QDialog.Accepted:
            return
        name, source = dlg.name(), dlg.source()

        if dlg.is_local_file():
            try:
                playlist = read_m3u_file(source)
            except OSError as e:
                log.error("Lecture %s impossible: %s", source, e)
                QtWidgets.QMessageBox.warning(self, "Erreur", "Impossible de lire ce fichier.")
                return
            self._on_playlist_loaded(playlist, name)
            return

        self.btn_add.setEnabled(False)
        self.progress.show()
        started = time.monotonic()
        timeout = self.cfg.fetch_timeout

        def done():
            self.btn_add.setEnabled(True)
            self.progress.hide()
            log.debug("Chargement terminé en %.1fs", time.monotonic() - started)

        self._run_in_background(
            lambda: fetch_playlist_from_url(source, timeout=timeout),
            on_success=lambda pl: self._on_playlist_loaded(pl, name),
            on_error=self._on_playlist_error,
            on_finally=done,
            desc="Import URL",
        )

    def _on_playlist_loaded(self, playlist, name: str):
        self._dispatch(st.add_playlist, playlist, name or None)
        log.info("Ajoutée: %s (%d chaînes)", name or playlist.name, len(playlist.channels))

    def _on_playlist_error(self, err: Exception):
        log.error("Erreur chargement playlist: %s", err)
        QtWidgets.QMessageBox.warning(
            self,
            "Erreur",
            "Erreur lors du chargement de la playlist, vérifie l'URL.",
        )

    def on_delete_playlist(self, playlist_id: str):
        pl = st.find_playlist(self.state, playlist_id)
        self._dispatch(st.delete_playlist, playlist_id)
        if pl is not None:
            log.info("Supprimée: %s", pl.name)

    # -------------------------
    # Lecteur
    # -------------------------
    def _ensure_player_widget(self):
        if self.player_widget is not None:
            return self.player_widget
        if self._player_error is not None:
            return None
        try:
            from imbed_vlc import VlcPlayerPanel

            panel = VlcPlayerPanel(vlc_args=self.cfg.vlc_args, logos=self.logos)
        except Exception as e:
            # libvlc absent ou non chargeable
            self._player_error = f"{type(e).__name__}: {e}"
            log.error("Lecteur VLC indisponible: %s", self._player_error)
            self.lbl_player_placeholder.setText(f"Lecteur VLC indisponible ({self._player_error}).")
            return None

        self._player_layout.removeWidget(self.lbl_player_placeholder)
        self.lbl_player_placeholder.hide()
        self._player_layout.addWidget(panel, 1)
        panel.favorite_toggled.connect(lambda url: self._dispatch(st.toggle_favorite, url))
        panel.assistant_requested.connect(self.on_assistant_requested)
        panel.player.prev_requested.connect(lambda: self._zap(-1))
        panel.player.next_requested.connect(lambda: self._zap(1))
        self.player_widget = panel
        return panel

    def on_play_channel(self, channel: Channel, *, from_favorites: bool):
        self._zap_from_favorites = from_favorites
        log.info("Lecture: %s (%s)", channel.name, channel.url)
        self._dispatch(st.play_channel, channel)

    def _zap(self, delta: int):
        channels = st.favorite_channels(self.state) if self._zap_from_favorites else st.filtered_channels(self.state)
        nxt = st.adjacent_channel(channels, self.state.active_channel, delta)
        if nxt is not None:
            self.on_play_channel(nxt, from_favorites=self._zap_from_favorites)

    def on_assistant_requested(self, channel: Channel):
        panel = self.player_widget
        if panel is None:
            return
        panel.set_blurb("Réflexion en cours…", busy=True)

        def show(text: str):
            current = panel.current_channel()
            # réponse tardive pour une autre chaîne : ignorée
            if current is not None and current.url == channel.url:
                panel.set_blurb(text)

        self._run_in_background(
            lambda: self.assistant.describe(channel),
            on_success=show,
            desc="Assistant",
        )

    # -------- close --------

    def closeEvent(self, event):
        if self.player_widget is not None:
            try:
                self.player_widget.shutdown()
            except Exception as e:
                log.warning("Arrêt lecteur: %s", e)
        self.logos.shutdown()
        logging.getLogger().removeHandler(self._log_handler)
        super().closeEvent(event)
