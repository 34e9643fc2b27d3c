import json
from pathlib import Path

import pytest

from config import AppConfig, load_config, save_config

ENV_VARS = ["IPTV_DATA_DIR", "IPTV_LOG_LEVEL", "IPTV_FETCH_TIMEOUT", "GEMINI_API_KEY", "GEMINI_MODEL"]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # pas de .env parasite du dépôt
    monkeypatch.chdir(tmp_path)


def test_defaults_when_no_file(tmp_path):
    cfg = load_config(tmp_path / "missing.json")
    assert cfg == AppConfig()
    assert cfg.db_path == Path("data") / "iptv.db"


def test_json_file_then_env_override(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps({"data_dir": "store", "log_level": "debug", "fetch_timeout": 7, "gemini_model": "file-model"}),
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert cfg.data_dir == Path("store")
    assert cfg.log_level == "DEBUG"
    assert cfg.fetch_timeout == 7.0
    assert cfg.gemini_model == "file-model"

    monkeypatch.setenv("GEMINI_MODEL", "env-model")
    monkeypatch.setenv("GEMINI_API_KEY", "secret")
    monkeypatch.setenv("IPTV_FETCH_TIMEOUT", "nope")
    cfg = load_config(path)
    assert cfg.gemini_model == "env-model"
    assert cfg.gemini_api_key == "secret"
    assert cfg.fetch_timeout == 7.0


def test_corrupt_file_uses_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{oops", encoding="utf-8")
    assert load_config(path) == AppConfig()


def test_dotenv_is_loaded(tmp_path):
    (tmp_path / ".env").write_text("GEMINI_API_KEY=from-dotenv\n", encoding="utf-8")
    assert load_config(tmp_path / "missing.json").gemini_api_key == "from-dotenv"


def test_save_config_never_writes_api_key(tmp_path):
    cfg = AppConfig(gemini_api_key="secret", log_level="WARN")
    path = tmp_path / "out" / "config.json"
    save_config(cfg, path)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert "gemini_api_key" not in data
    assert load_config(path).log_level == "WARN"


@pytest.mark.parametrize("value", ["20s", [5], {"s": 5}])
def test_invalid_fetch_timeout_in_file_keeps_default(tmp_path, value):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"fetch_timeout": value, "log_level": "debug"}), encoding="utf-8")
    cfg = load_config(path)
    assert cfg.fetch_timeout == AppConfig().fetch_timeout
    assert cfg.log_level == "DEBUG"
