"""Config loader — reads YAML, applies SCALP_* env var overrides."""

from __future__ import annotations

import os
from pathlib import Path

import yaml

from scalp_core.config.schema import AppConfig

# env var -> (section, key)
_ENV_OVERRIDES = {
    "SCALP_DATABASE_URL": ("database", "url"),
    "SCALP_LOG_LEVEL": ("logging", "level"),
    "SCALP_LOG_FORMAT": ("logging", "format"),
    "SCALP_GATEIO_API_KEY": ("exchange", "api_key"),
    "SCALP_GATEIO_API_SECRET": ("exchange", "api_secret"),
}


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from a YAML file, then apply env var overrides.

    If *path* is None or the file doesn't exist, returns defaults.

    Environment variable overrides:
        SCALP_DATABASE_URL       -> database.url
        SCALP_LOG_LEVEL          -> logging.level
        SCALP_LOG_FORMAT         -> logging.format
        SCALP_GATEIO_API_KEY     -> exchange.api_key
        SCALP_GATEIO_API_SECRET  -> exchange.api_secret
    """
    data: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            with open(p) as f:
                data = yaml.safe_load(f) or {}

    for env_var, (section, key) in _ENV_OVERRIDES.items():
        value = os.environ.get(env_var)
        if value:
            data.setdefault(section, {})[key] = value

    return AppConfig.model_validate(data)
