from __future__ import annotations

from pathlib import Path

from PySide6 import QtWidgets


class AddPlaylistDialog(QtWidgets.QDialog):
    """Saisie d'une playlist : nom optionnel + URL M3U (ou fichier local)."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Ajouter une playlist")
        self.setMinimumWidth(520)

        self.txt_name = QtWidgets.QLineEdit()
        self.txt_name.setPlaceholderText("ex: Bouquet divertissement (optionnel)")
        self.txt_url = QtWidgets.QLineEdit()
        self.txt_url.setPlaceholderText("https://example.com/playlist.m3u")
        self.btn_browse = QtWidgets.QToolButton(text="Fichier…")

        url_row = QtWidgets.QHBoxLayout()
        url_row.addWidget(self.txt_url, 1)
        url_row.addWidget(self.btn_browse)

        form = QtWidgets.QFormLayout()
        form.addRow("Nom", self.txt_name)
        form.addRow("URL / fichier", url_row)

        self.buttons = QtWidgets.QDialogButtonBox(
            QtWidgets.QDialogButtonBox.Ok | QtWidgets.QDialogButtonBox.Cancel
        )
        self.buttons.button(QtWidgets.QDialogButtonBox.Ok).setText("Ajouter")
        self.buttons.button(QtWidgets.QDialogButtonBox.Ok).setEnabled(False)

        layout = QtWidgets.QVBoxLayout(self)
        layout.addLayout(form)
        layout.addWidget(self.buttons)

        self.txt_url.textChanged.connect(self._on_url_changed)
        self.btn_browse.clicked.connect(self._browse)
        self.buttons.accepted.connect(self.accept)
        self.buttons.rejected.connect(self.reject)

    def name(self) -> str:
        return self.txt_name.text().strip()

    def source(self) -> str:
        return self.txt_url.text().strip()

    def is_local_file(self) -> bool:
        src = self.source()
        return bool(src) and "://" not in src and Path(src).is_file()

    def _on_url_changed(self, text: str):
        self.buttons.button(QtWidgets.QDialogButtonBox.Ok).setEnabled(bool(text.strip()))

    def _browse(self):
        path, _ = QtWidgets.QFileDialog.getOpenFileName(
            self, "Choisir une playlist", "", "M3U (*.m3u *.m3u8);;Tous (*.*)"
        )
        if path:
            self.txt_url.setText(path)
