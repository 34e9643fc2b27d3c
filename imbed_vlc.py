from __future__ import annotations

import sys
from typing import Optional

import vlc
from PySide6 import QtCore, QtWidgets

from core.models import Channel

# Widgets Qt pour embarquer VLC : surface vidéo + contrôles, et panneau "lecteur"
# (titre de la chaîne, favori, assistant).


# =========================
# VLC core widget
# =========================
class VlcPlayerWidget(QtWidgets.QWidget):
    """Widget VLC réutilisable (PySide6 + python-vlc)"""

    prev_requested = QtCore.Signal()
    next_requested = QtCore.Signal()

    def __init__(self, parent=None, vlc_args=None):
        super().__init__(parent)

        # Surface vidéo
        self.video = QtWidgets.QFrame()
        self.video.setMinimumHeight(240)
        self.video.setAttribute(QtCore.Qt.WA_NativeWindow, True)
        self.video.setStyleSheet("background: black;")

        self.btn_prev = QtWidgets.QToolButton()
        self.btn_prev.setIcon(self.style().standardIcon(QtWidgets.QStyle.SP_MediaSkipBackward))
        self.btn_prev.setToolTip("Chaine precedente")

        self.play_button = QtWidgets.QToolButton()
        self.play_button.setIcon(self.style().standardIcon(QtWidgets.QStyle.SP_MediaPlay))

        self.stop_button = QtWidgets.QToolButton()
        self.stop_button.setIcon(self.style().standardIcon(QtWidgets.QStyle.SP_MediaStop))

        self.btn_next = QtWidgets.QToolButton()
        self.btn_next.setIcon(self.style().standardIcon(QtWidgets.QStyle.SP_MediaSkipForward))
        self.btn_next.setToolTip("Chaine suivante")

        self.lbl_state = QtWidgets.QLabel("Arrêté")

        self.mute_button = QtWidgets.QToolButton()
        self.mute_button.setCheckable(True)
        self.mute_button.setIcon(self.style().standardIcon(QtWidgets.QStyle.SP_MediaVolume))

        self.volume_slider = QtWidgets.QSlider(QtCore.Qt.Horizontal)
        self.volume_slider.setRange(0, 100)
        self.volume_slider.setValue(80)
        self.volume_slider.setToolTip("Volume VLC (0-100)")
        self.volume_slider.setMinimumWidth(120)

        controls = QtWidgets.QHBoxLayout()
        controls.setContentsMargins(0, 0, 0, 0)
        controls.setSpacing(6)
        controls.addWidget(self.btn_prev)
        controls.addWidget(self.play_button)
        controls.addWidget(self.stop_button)
        controls.addWidget(self.btn_next)
        controls.addWidget(self.lbl_state, 1)
        controls.addWidget(self.mute_button)
        controls.addWidget(self.volume_slider)

        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.video, 1)
        layout.addLayout(controls)

        # VLC
        args = vlc_args or ["--quiet"]
        self.instance = vlc.Instance(*args)
        self.player = self.instance.media_player_new()

        # Rafraîchit l'état affiché (lecture / buffering / erreur)
        self.timer = QtCore.QTimer(self)
        self.timer.setInterval(500)
        self.timer.timeout.connect(self._refresh_ui)

        self.btn_prev.clicked.connect(self.prev_requested.emit)
        self.play_button.clicked.connect(self._toggle_play_pause)
        self.stop_button.clicked.connect(self.stop)
        self.btn_next.clicked.connect(self.next_requested.emit)
        self.mute_button.toggled.connect(self._toggle_mute)
        self.volume_slider.valueChanged.connect(self._on_volume)

        # Embedding après création native
        QtCore.QTimer.singleShot(0, self._init_embedding)
        self._on_volume(self.volume_slider.value())

    def _init_embedding(self):
        wid = int(self.video.winId())
        if sys.platform.startswith("win"):
            self.player.set_hwnd(wid)
        elif sys.platform == "darwin":
            self.player.set_nsobject(wid)
        else:
            self.player.set_xwindow(wid)

    # --- API publique ---
    def play_url(self, url: str):
        self.player.set_media(self.instance.media_new(url))
        self.play()

    def play(self):
        self.player.play()
        self.timer.start()
        self._set_play_icon(True)

    def pause(self):
        self.player.pause()
        self._set_play_icon(False)

    def stop(self):
        try:
            self.player.stop()
        finally:
            self.timer.stop()
            self.lbl_state.setText("Arrêté")
            self._set_play_icon(False)

    def shutdown(self):
        """À appeler à la fermeture de l'app."""
        self.stop()
        self.player.release()
        self.instance.release()

    # --- internes ---
    def _toggle_play_pause(self):
        if self.player.is_playing():
            self.pause()
        else:
            self.play()

    def _on_volume(self, v: int):
        self.player.audio_set_volume(v)

    def _toggle_mute(self, muted: bool):
        self.player.audio_set_mute(bool(muted))
        icon = QtWidgets.QStyle.SP_MediaVolumeMuted if muted else QtWidgets.QStyle.SP_MediaVolume
        self.mute_button.setIcon(self.style().standardIcon(icon))

    def _set_play_icon(self, playing: bool):
        icon = QtWidgets.QStyle.SP_MediaPause if playing else QtWidgets.QStyle.SP_MediaPlay
        self.play_button.setIcon(self.style().standardIcon(icon))

    def _refresh_ui(self):
        labels = {
            vlc.State.Opening: "Ouverture…",
            vlc.State.Buffering: "Mise en mémoire tampon…",
            vlc.State.Playing: "Lecture",
            vlc.State.Paused: "Pause",
            vlc.State.Stopped: "Arrêté",
            vlc.State.Ended: "Terminé",
            vlc.State.Error: "Erreur de lecture",
        }
        self.lbl_state.setText(labels.get(self.player.get_state(), ""))


# =========================
# Panneau lecteur
# =========================
class VlcPlayerPanel(QtWidgets.QWidget):
    """
    Panneau lecteur:
      - logo, titre + groupe de la chaîne en cours
      - bouton favori (clé = URL du flux)
      - bouton assistant + zone de texte pour la réponse
      - vidéo VLC
    """

    favorite_toggled = QtCore.Signal(str)        # url
    assistant_requested = QtCore.Signal(object)  # Channel

    def __init__(self, parent=None, vlc_args=None, logos=None):
        super().__init__(parent)

        self._channel: Optional[Channel] = None
        self._logos = logos  # LogoLoader optionnel

        self.lbl_logo = QtWidgets.QLabel()
        self.lbl_logo.setFixedSize(64, 64)
        self.lbl_logo.setAlignment(QtCore.Qt.AlignCenter)

        self.lbl_title = QtWidgets.QLabel("Aucune chaîne")
        font = self.lbl_title.font()
        font.setPointSize(font.pointSize() + 4)
        font.setBold(True)
        self.lbl_title.setFont(font)
        self.lbl_group = QtWidgets.QLabel("")

        self.btn_favorite = QtWidgets.QPushButton("♡ Favori")
        self.btn_favorite.setCheckable(True)
        self.btn_assistant = QtWidgets.QPushButton("À propos de cette chaîne")

        top = QtWidgets.QHBoxLayout()
        top.addWidget(self.lbl_logo)
        titles = QtWidgets.QVBoxLayout()
        titles.addWidget(self.lbl_title)
        titles.addWidget(self.lbl_group)
        top.addLayout(titles, 1)
        top.addWidget(self.btn_favorite)
        top.addWidget(self.btn_assistant)

        self.player = VlcPlayerWidget(vlc_args=vlc_args)

        self.txt_blurb = QtWidgets.QPlainTextEdit()
        self.txt_blurb.setReadOnly(True)
        self.txt_blurb.setMaximumHeight(110)
        self.txt_blurb.setPlaceholderText("Description de la chaîne (assistant)…")

        root = QtWidgets.QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)
        root.addLayout(top)
        root.addWidget(self.player, 1)
        root.addWidget(self.txt_blurb)

        self.btn_favorite.clicked.connect(self._on_favorite_clicked)
        self.btn_assistant.clicked.connect(self._on_assistant_clicked)
        if self._logos is not None:
            self._logos.logo_ready.connect(self._on_logo_ready)
        self._sync_buttons()

    def current_channel(self) -> Optional[Channel]:
        return self._channel

    def play_channel(self, channel: Channel, *, favorite: bool = False):
        if self._channel is not None and self._channel.url == channel.url:
            self._channel = channel
            self.set_favorite(favorite)
            return
        self._channel = channel
        self.lbl_title.setText(channel.name)
        self.lbl_group.setText(channel.group)
        self._show_logo()
        self.txt_blurb.clear()
        self.set_favorite(favorite)
        self._sync_buttons()
        self.player.play_url(channel.url)

    def set_favorite(self, favorite: bool):
        self.btn_favorite.setChecked(bool(favorite))
        self.btn_favorite.setText("♥ Favori" if favorite else "♡ Favori")

    def set_blurb(self, text: str, *, busy: bool = False):
        self.txt_blurb.setPlainText(text or "")
        self.btn_assistant.setEnabled(not busy and self._channel is not None)

    def shutdown(self):
        self.player.shutdown()

    def _show_logo(self):
        pm = None
        if self._logos is not None and self._channel is not None:
            pm = self._logos.pixmap(self._channel.logo)
        if pm is None:
            self.lbl_logo.clear()
        else:
            self.lbl_logo.setPixmap(pm)

    def _on_logo_ready(self, url: str):
        if self._channel is not None and self._channel.logo == url:
            self._show_logo()

    def _sync_buttons(self):
        has = self._channel is not None
        self.btn_favorite.setEnabled(has)
        self.btn_assistant.setEnabled(has)

    def _on_favorite_clicked(self):
        if self._channel is not None:
            self.favorite_toggled.emit(self._channel.url)

    def _on_assistant_clicked(self):
        if self._channel is not None:
            self.assistant_requested.emit(self._channel)
