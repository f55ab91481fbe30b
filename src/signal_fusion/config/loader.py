"""Config loader — reads YAML, applies SIGNAL_FUSION_* env var overrides."""

from __future__ import annotations

import os
from pathlib import Path

import yaml

from signal_fusion.config.schema import AppConfig

# env var -> (section, key)
_ENV_OVERRIDES = {
    "SIGNAL_FUSION_LOG_LEVEL": ("logging", "level"),
    "SIGNAL_FUSION_LOG_FORMAT": ("logging", "format"),
    "SIGNAL_FUSION_LEDGER_BACKEND": ("ledger", "backend"),
    "SIGNAL_FUSION_DATABASE_URL": ("ledger", "database_url"),
}


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from a YAML file, then apply env var overrides.

    If *path* is None or the file doesn't exist, returns defaults.

    Environment variable overrides:
        SIGNAL_FUSION_LOG_LEVEL       -> logging.level
        SIGNAL_FUSION_LOG_FORMAT      -> logging.format
        SIGNAL_FUSION_LEDGER_BACKEND  -> ledger.backend
        SIGNAL_FUSION_DATABASE_URL    -> ledger.database_url
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
