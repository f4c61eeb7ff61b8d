import pytest
import yaml

from transaction_analytics import config as config_module
from transaction_analytics.config import DEFAULT_CONFIG, load_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("API_URL", "DATABASE_PATH", "HOST", "PORT", "CORS_ORIGINS", "LOG_LEVEL", config_module.CONFIG_ENV_VAR):
        monkeypatch.delenv(name, raising=False)


def test_missing_file_uses_defaults(tmp_path):
    assert load_config(tmp_path / "missing.yaml") == DEFAULT_CONFIG


def test_file_values_merge_with_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"db_path": "/data/sales.db", "port": 8080}))

    cfg = load_config(path)

    assert cfg["db_path"] == "/data/sales.db"
    assert cfg["port"] == 8080
    assert cfg["host"] == DEFAULT_CONFIG["host"]


def test_config_path_from_environment(tmp_path, monkeypatch):
    path = tmp_path / "env-config.yaml"
    path.write_text(yaml.safe_dump({"api_url": "https://feed.example/"}))
    monkeypatch.setenv(config_module.CONFIG_ENV_VAR, str(path))

    assert load_config()["api_url"] == "https://feed.example/"


def test_environment_overrides(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"port": 8080}))
    monkeypatch.setenv("PORT", "9000")
    monkeypatch.setenv("DATABASE_PATH", "/tmp/override.db")
    monkeypatch.setenv("CORS_ORIGINS", "http://a.example, http://b.example")

    cfg = load_config(path)

    assert cfg["port"] == 9000
    assert cfg["db_path"] == "/tmp/override.db"
    assert cfg["cors_origins"] == ["http://a.example", "http://b.example"]


def test_invalid_environment_value(monkeypatch, tmp_path):
    monkeypatch.setenv("PORT", "not-a-port")
    with pytest.raises(ValueError, match="PORT"):
        load_config(tmp_path / "missing.yaml")


def test_non_mapping_config_is_rejected(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n")
    with pytest.raises(ValueError):
        load_config(path)
