# transaction_analytics/config.py
from __future__ import annotations

import os
from pathlib import Path
from typing import Dict

import yaml

DEFAULT_CONFIG: Dict[str, object] = {
    "api_url": "",
    "db_path": "transactions.db",
    "host": "127.0.0.1",
    "port": 3000,
    "cors_origins": ["*"],
    "feed_timeout": 30.0,
    "log_level": "INFO",
}

CONFIG_ENV_VAR = "TXN_ANALYTICS_CONFIG"

# environment variable -> (config key, converter)
_ENV_OVERRIDES = {
    "API_URL": ("api_url", str),
    "DATABASE_PATH": ("db_path", str),
    "HOST": ("host", str),
    "PORT": ("port", int),
    "CORS_ORIGINS": ("cors_origins", lambda raw: [o.strip() for o in raw.split(",") if o.strip()]),
    "LOG_LEVEL": ("log_level", str),
}


def _merge_defaults(current: Dict[str, object], defaults: Dict[str, object]) -> Dict[str, object]:
    """Merge missing default keys into the current config recursively."""
    merged = dict(current)
    for key, value in defaults.items():
        if key not in merged:
            merged[key] = value
        elif isinstance(value, dict) and isinstance(merged[key], dict):
            merged[key] = _merge_defaults(merged[key], value)
    return merged


def _apply_env_overrides(config: Dict[str, object]) -> Dict[str, object]:
    for env_name, (key, convert) in _ENV_OVERRIDES.items():
        raw = os.environ.get(env_name)
        if raw is None or raw.strip() == "":
            continue
        try:
            config[key] = convert(raw.strip())
        except ValueError as exc:
            raise ValueError(f"Invalid value for {env_name}: {raw!r}") from exc
    return config


def load_config(path: str | Path | None = None) -> Dict[str, object]:
    """Load the YAML config, fill in defaults and apply environment overrides.

    A missing file is not an error; the defaults are used instead.
    """
    target = path or os.environ.get(CONFIG_ENV_VAR)
    data: Dict[str, object] = {}
    if target and Path(target).exists():
        with Path(target).open("r", encoding="utf-8") as fp:
            data = yaml.safe_load(fp) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {target} must contain a mapping")
    config = _merge_defaults(data, DEFAULT_CONFIG)
    return _apply_env_overrides(config)
