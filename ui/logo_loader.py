from __future__ import annotations

import logging

from PySide6 import QtCore, QtGui

from core.logos import fetch_logo_bytes, is_remote_logo

log = logging.getLogger(__name__)

LOGO_SIZE = 64


class _LogoSignals(QtCore.QObject):
    result = QtCore.Signal(str, bytes)  # url, data (vide si échec)


class _LogoWorker(QtCore.QRunnable):
    def __init__(self, url: str, timeout: float):
        super().__init__()
        self.url = url
        self.timeout = timeout
        self.signals = _LogoSignals()

    def run(self):
        data = fetch_logo_bytes(self.url, timeout=self.timeout)
        self.signals.result.emit(self.url, data or b"")


class LogoLoader(QtCore.QObject):
    """
    Cache url -> QPixmap alimenté en arrière-plan (QThreadPool).
    `pixmap(url)` répond immédiatement depuis le cache, sinon lance un téléchargement
    (une seule fois par URL) et émet `logo_ready(url)` quand l'image est disponible.
    """
    logo_ready = QtCore.Signal(str)

    def __init__(self, parent=None, *, timeout: float = 5.0, max_threads: int = 4):
        super().__init__(parent)
        self.timeout = timeout
        self.cache: dict[str, QtGui.QPixmap] = {}
        self.pending: set[str] = set()
        self.failed: set[str] = set()
        self.pool = QtCore.QThreadPool(self)
        self.pool.setMaxThreadCount(max_threads)

    def pixmap(self, url: str | None) -> QtGui.QPixmap | None:
        if not is_remote_logo(url):
            return None
        if url in self.cache:
            return self.cache[url]
        if url not in self.pending and url not in self.failed:
            self.pending.add(url)
            worker = _LogoWorker(url, self.timeout)
            worker.signals.result.connect(self._on_loaded)
            self.pool.start(worker)
        return None

    def icon(self, url: str | None) -> QtGui.QIcon | None:
        pm = self.pixmap(url)
        return QtGui.QIcon(pm) if pm is not None else None

    @QtCore.Slot(str, bytes)
    def _on_loaded(self, url: str, data: bytes):
        self.pending.discard(url)
        pm = QtGui.QPixmap()
        if not data or not pm.loadFromData(data):
            self.failed.add(url)
            log.debug("Logo illisible: %s", url)
            return
        self.cache[url] = pm.scaled(
            LOGO_SIZE, LOGO_SIZE,
            QtCore.Qt.AspectRatioMode.KeepAspectRatio,
            QtCore.Qt.TransformationMode.SmoothTransformation,
        )
        self.logo_ready.emit(url)

    def shutdown(self):
        self.pool.clear()
        self.pool.waitForDone(1000)
