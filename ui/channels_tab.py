from __future__ import annotations

from PySide6 import QtCore, QtWidgets

from core.models import Channel

# Liste de chaînes (groupes à gauche, table à droite). Sert aussi pour la vue Favoris (sans groupes).

ALL_GROUPS = "Toutes"
COL_FAV, COL_NAME, COL_GROUP, COL_TVG = range(4)


class ChannelsTab(QtWidgets.QWidget):
    play_requested = QtCore.Signal(object)   # Channel
    favorite_toggled = QtCore.Signal(str)    # url
    group_selected = QtCore.Signal(object)   # str | None

    def __init__(self, parent=None, *, show_groups: bool = True, empty_text: str = "", logos=None):
        super().__init__(parent)

        self._channels: list[Channel] = []
        self._updating = False
        self._logos = logos  # LogoLoader optionnel

        self.list_groups = QtWidgets.QListWidget()
        self.list_groups.setMaximumWidth(240)
        self.list_groups.setVisible(show_groups)

        self.lbl_count = QtWidgets.QLabel("")

        self.table = QtWidgets.QTableWidget(0, 4)
        self.table.setHorizontalHeaderLabels(["♥", "Nom", "Groupe", "tvg-id"])
        self.table.horizontalHeader().setStretchLastSection(True)
        self.table.setSelectionBehavior(QtWidgets.QAbstractItemView.SelectionBehavior.SelectRows)
        self.table.setSelectionMode(QtWidgets.QAbstractItemView.SelectionMode.SingleSelection)
        self.table.setEditTriggers(QtWidgets.QAbstractItemView.EditTrigger.NoEditTriggers)
        self.table.verticalHeader().setVisible(False)
        self.table.setIconSize(QtCore.QSize(32, 32))

        self.lbl_empty = QtWidgets.QLabel(empty_text)
        self.lbl_empty.setAlignment(QtCore.Qt.AlignCenter)

        right = QtWidgets.QVBoxLayout()
        right.addWidget(self.lbl_count)
        right.addWidget(self.table, 1)
        right.addWidget(self.lbl_empty)

        root = QtWidgets.QHBoxLayout(self)
        root.addWidget(self.list_groups)
        root.addLayout(right, 1)

        self.list_groups.currentRowChanged.connect(self._on_group_row)
        self.table.cellClicked.connect(self._on_cell_clicked)
        self.table.cellDoubleClicked.connect(self._on_cell_double_clicked)
        if self._logos is not None:
            self._logos.logo_ready.connect(self._on_logo_ready)

    def set_groups(self, groups: list[str], active: str | None):
        self._updating = True
        try:
            self.list_groups.clear()
            self.list_groups.addItem(ALL_GROUPS)
            self.list_groups.addItems(groups)
            row = groups.index(active) + 1 if active in groups else 0
            self.list_groups.setCurrentRow(row)
        finally:
            self._updating = False

    def set_channels(self, channels: list[Channel], favorites: tuple[str, ...] | set[str]):
        self._channels = list(channels)
        self.table.setUpdatesEnabled(False)
        try:
            self.table.setRowCount(len(self._channels))
            for row, ch in enumerate(self._channels):
                fav_item = QtWidgets.QTableWidgetItem("♥" if ch.url in favorites else "♡")
                fav_item.setToolTip("Ajouter/retirer des favoris")
                fav_item.setTextAlignment(QtCore.Qt.AlignCenter)
                name_item = QtWidgets.QTableWidgetItem(ch.name)
                name_item.setToolTip(ch.url)
                if self._logos is not None:
                    icon = self._logos.icon(ch.logo)
                    if icon is not None:
                        name_item.setIcon(icon)
                self.table.setItem(row, COL_FAV, fav_item)
                self.table.setItem(row, COL_NAME, name_item)
                self.table.setItem(row, COL_GROUP, QtWidgets.QTableWidgetItem(ch.group))
                self.table.setItem(row, COL_TVG, QtWidgets.QTableWidgetItem(ch.tvg_id or ""))
        finally:
            self.table.setUpdatesEnabled(True)

        self.table.resizeColumnsToContents()
        self.lbl_count.setText(f"Résultats: {len(self._channels)}")
        self.lbl_empty.setVisible(not self._channels and bool(self.lbl_empty.text()))

    def _on_logo_ready(self, url: str):
        icon = self._logos.icon(url)
        if icon is None:
            return
        for row, ch in enumerate(self._channels):
            item = self.table.item(row, COL_NAME)
            if ch.logo == url and item is not None:
                item.setIcon(icon)

    def _on_group_row(self, row: int):
        if self._updating or row < 0:
            return
        item = self.list_groups.item(row)
        group = None if row == 0 or item is None else item.text()
        self.group_selected.emit(group)

    def _on_cell_clicked(self, row: int, col: int):
        if col != COL_FAV or not (0 <= row < len(self._channels)):
            return
        self.favorite_toggled.emit(self._channels[row].url)

    def _on_cell_double_clicked(self, row: int, col: int):
        if col == COL_FAV or not (0 <= row < len(self._channels)):
            return
        self.play_requested.emit(self._channels[row])
