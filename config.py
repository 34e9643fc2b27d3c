from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from core.assistant import DEFAULT_MODEL
from core.loader import DEFAULT_TIMEOUT

# Configuration : valeurs par défaut < data/config.json < variables d'environnement (.env).

log = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("data/config.json")


@dataclass
class AppConfig:
    data_dir: Path = field(default_factory=lambda: Path("data"))
    log_level: str = "INFO"
    fetch_timeout: float = DEFAULT_TIMEOUT
    gemini_model: str = DEFAULT_MODEL
    gemini_api_key: str = ""  # jamais écrit dans config.json
    vlc_args: list[str] = field(default_factory=lambda: ["--quiet"])

    @property
    def db_path(self) -> Path:
        return self.data_dir / "iptv.db"


def _read_json(path: Path) -> dict:
    try:
        if path.exists():
            data = json.loads(path.read_text(encoding="utf-8"))
            return data if isinstance(data, dict) else {}
    except (OSError, ValueError) as e:
        log.warning("Config %s illisible: %s", path, e)
    return {}


def load_config(path: str | Path | None = None) -> AppConfig:
    load_dotenv(find_dotenv(usecwd=True))
    cfg = AppConfig()

    data = _read_json(Path(path) if path else DEFAULT_CONFIG_PATH)
    if data.get("data_dir"):
        cfg.data_dir = Path(data["data_dir"])
    if data.get("log_level"):
        cfg.log_level = str(data["log_level"]).upper()
    if data.get("fetch_timeout"):
        try:
            cfg.fetch_timeout = float(data["fetch_timeout"])
        except (TypeError, ValueError):
            log.warning("fetch_timeout invalide dans la config: %r", data["fetch_timeout"])
    if data.get("gemini_model"):
        cfg.gemini_model = str(data["gemini_model"])
    if isinstance(data.get("vlc_args"), list):
        cfg.vlc_args = [str(a) for a in data["vlc_args"]]

    env = os.environ
    if env.get("IPTV_DATA_DIR"):
        cfg.data_dir = Path(env["IPTV_DATA_DIR"])
    if env.get("IPTV_LOG_LEVEL"):
        cfg.log_level = env["IPTV_LOG_LEVEL"].upper()
    if env.get("IPTV_FETCH_TIMEOUT"):
        try:
            cfg.fetch_timeout = float(env["IPTV_FETCH_TIMEOUT"])
        except ValueError:
            log.warning("IPTV_FETCH_TIMEOUT invalide: %r", env["IPTV_FETCH_TIMEOUT"])
    if env.get("GEMINI_MODEL"):
        cfg.gemini_model = env["GEMINI_MODEL"]
    cfg.gemini_api_key = env.get("GEMINI_API_KEY", "")

    return cfg


def save_config(cfg: AppConfig, path: str | Path | None = None) -> None:
    path = Path(path) if path else DEFAULT_CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    data = {
        "data_dir": str(cfg.data_dir),
        "log_level": cfg.log_level,
        "fetch_timeout": cfg.fetch_timeout,
        "gemini_model": cfg.gemini_model,
        "vlc_args": list(cfg.vlc_args),
    }
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
