from __future__ import annotations

from datetime import datetime

from PySide6 import QtCore, QtWidgets

from core.models import Playlist

# Onglet "Playlists": liste des playlists enregistrées, ouverture et suppression.


class PlaylistsTab(QtWidgets.QWidget):
    """
    Playlists enregistrées (persistées via StateStore).

    - Ouvrir (vue Chaînes)
    - Supprimer (avec confirmation)
    - Ajouter (délégué à la fenêtre principale)
    """

    open_requested = QtCore.Signal(str)    # playlist_id -> vue chaînes
    delete_requested = QtCore.Signal(str)  # playlist_id
    add_requested = QtCore.Signal()

    def __init__(self, parent=None):
        super().__init__(parent)

        layout = QtWidgets.QVBoxLayout(self)

        # ======================
        # Top bar
        # ======================
        hb = QtWidgets.QHBoxLayout()
        layout.addLayout(hb)

        self.btn_add = QtWidgets.QPushButton("Ajouter une playlist…")
        self.btn_open = QtWidgets.QPushButton("Ouvrir")
        self.btn_delete = QtWidgets.QPushButton("Supprimer")
        self.btn_open.setEnabled(False)
        self.btn_delete.setEnabled(False)
        self.lbl_summary = QtWidgets.QLabel("")

        hb.addWidget(self.btn_add)
        hb.addWidget(self.btn_open)
        hb.addWidget(self.btn_delete)
        hb.addStretch(1)
        hb.addWidget(self.lbl_summary)

        # ======================
        # Table playlists
        # ======================
        self.tbl = QtWidgets.QTableWidget(0, 4)
        self.tbl.setHorizontalHeaderLabels(["Nom", "Chaînes", "Source", "Ajoutée le"])
        self.tbl.setSelectionBehavior(QtWidgets.QAbstractItemView.SelectionBehavior.SelectRows)
        self.tbl.setSelectionMode(QtWidgets.QAbstractItemView.SelectionMode.SingleSelection)
        self.tbl.setEditTriggers(QtWidgets.QAbstractItemView.EditTrigger.NoEditTriggers)
        self.tbl.horizontalHeader().setStretchLastSection(True)
        self.tbl.verticalHeader().setVisible(False)
        layout.addWidget(self.tbl, 1)

        self.lbl_empty = QtWidgets.QLabel("Aucune playlist. Ajoute une URL M3U pour commencer.")
        self.lbl_empty.setAlignment(QtCore.Qt.AlignCenter)
        layout.addWidget(self.lbl_empty)

        # ======================
        # Events
        # ======================
        self.btn_add.clicked.connect(self.add_requested.emit)
        self.btn_open.clicked.connect(self._open_selected)
        self.btn_delete.clicked.connect(self._delete_selected)
        self.tbl.itemSelectionChanged.connect(self._sel_changed)
        self.tbl.itemDoubleClicked.connect(lambda *_: self._open_selected())

        # menu clic droit
        self.tbl.setContextMenuPolicy(QtCore.Qt.CustomContextMenu)
        self.tbl.customContextMenuRequested.connect(self._context_menu)

    # ======================
    # Data
    # ======================
    def set_playlists(self, playlists: tuple[Playlist, ...] | list[Playlist], active_id: str | None = None):
        self.tbl.setRowCount(len(playlists))
        active_row = -1
        for r, pl in enumerate(playlists):
            name_item = QtWidgets.QTableWidgetItem(pl.name)
            name_item.setData(QtCore.Qt.ItemDataRole.UserRole, pl.id)
            if pl.id == active_id:
                f = name_item.font()
                f.setBold(True)
                name_item.setFont(f)
                active_row = r
            added = datetime.fromtimestamp(pl.added_at / 1000).strftime("%Y-%m-%d %H:%M") if pl.added_at else ""
            self.tbl.setItem(r, 0, name_item)
            self.tbl.setItem(r, 1, QtWidgets.QTableWidgetItem(str(len(pl.channels))))
            self.tbl.setItem(r, 2, QtWidgets.QTableWidgetItem(pl.url or "(fichier local)"))
            self.tbl.setItem(r, 3, QtWidgets.QTableWidgetItem(added))

        self.tbl.resizeColumnsToContents()
        if active_row >= 0 and not self.tbl.selectionModel().selectedRows():
            self.tbl.selectRow(active_row)

        total = sum(len(p.channels) for p in playlists)
        self.lbl_summary.setText(f"{len(playlists)} playlists, {total} chaînes")
        self.lbl_empty.setVisible(not playlists)
        self._sel_changed()

    # ======================
    # Selection helpers
    # ======================
    def _sel_changed(self):
        has_sel = len(self.tbl.selectionModel().selectedRows()) > 0
        self.btn_open.setEnabled(has_sel)
        self.btn_delete.setEnabled(has_sel)

    def _selected_pid(self) -> str | None:
        sel = self.tbl.selectionModel().selectedRows()
        if not sel:
            return None
        item = self.tbl.item(sel[0].row(), 0)
        if not item:
            return None
        return item.data(QtCore.Qt.ItemDataRole.UserRole)

    # ======================
    # Actions
    # ======================
    def _open_selected(self):
        pid = self._selected_pid()
        if pid is None:
            return
        self.open_requested.emit(pid)

    def _delete_selected(self):
        pid = self._selected_pid()
        if pid is None:
            return

        row = self.tbl.selectionModel().selectedRows()[0].row()
        name = self.tbl.item(row, 0).text()

        msg = f"Supprimer la playlist « {name} » ?\n\nLes favoris sont conservés."
        if QtWidgets.QMessageBox.question(self, "Supprimer", msg) != QtWidgets.QMessageBox.Yes:
            return
        self.delete_requested.emit(pid)

    # ======================
    # Context menu
    # ======================
    def _context_menu(self, pos):
        pid = self._selected_pid()
        menu = QtWidgets.QMenu(self)

        act_open = menu.addAction("Ouvrir")
        act_del = menu.addAction("Supprimer")
        act_open.setEnabled(pid is not None)
        act_del.setEnabled(pid is not None)

        act = menu.exec(self.tbl.viewport().mapToGlobal(pos))
        if act == act_open:
            self._open_selected()
        elif act == act_del:
            self._delete_selected()
