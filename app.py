from __future__ import annotations

import logging
import sys

from PySide6 import QtWidgets

from config import DEFAULT_CONFIG_PATH, load_config, save_config
from ui.main_window import MainWindow

# Point d’entrée graphique : charge la configuration, configure le logging,
# instancie l’application Qt et affiche la fenêtre principale.


def main():
    cfg = load_config()
    logging.basicConfig(
        level=getattr(logging, cfg.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    if not DEFAULT_CONFIG_PATH.exists():
        save_config(cfg)
        logging.getLogger(__name__).info("Configuration par défaut écrite: %s", DEFAULT_CONFIG_PATH)

    app = QtWidgets.QApplication(sys.argv)
    app.setApplicationName("IPTV Browser")
    w = MainWindow(cfg)
    w.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
