"""
Config loader: YAML file -> frozen dataclass tree.

API secrets resolved from environment variables (ALPHAVANTAGE_API_KEY,
APCA_API_KEY_ID, APCA_API_SECRET_KEY). Config file holds only non-secret values.
"""

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from stocko_core.errors import DATA_FILE_NAME

DEFAULT_CONFIG_NAME = "config.yaml"
_SOURCES = ("alphavantage", "alpaca")


def default_store_path() -> Path:
    """stocko_data.json next to the running executable."""
    return Path(sys.argv[0]).resolve().parent / DATA_FILE_NAME


@dataclass(frozen=True)
class DataConfig:
    source: str = "alphavantage"
    store_path: Path = field(default_factory=default_store_path)
    alphavantage_api_key: str = ""
    alpaca_api_key: str = ""
    alpaca_api_secret: str = ""


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "WARNING"

    @property
    def level_no(self) -> int:
        return logging.getLevelName(self.level.upper())


@dataclass(frozen=True)
class AppConfig:
    data: DataConfig = field(default_factory=DataConfig)
    logging: LoggingConfig = LoggingConfig()
    path: Path | None = None


def _secrets() -> dict[str, str]:
    return {
        "alphavantage_api_key": os.environ.get("ALPHAVANTAGE_API_KEY", ""),
        "alpaca_api_key": os.environ.get("APCA_API_KEY_ID", ""),
        "alpaca_api_secret": os.environ.get("APCA_API_SECRET_KEY", ""),
    }


def load_config(path: str | Path | None = None) -> AppConfig:
    """
    Load configuration from a YAML file.

    With no *path*, ``config.yaml`` in the working directory is used when it
    exists; otherwise built-in defaults apply. An explicit *path* must exist.

    API keys are resolved from environment variables:
      - ALPHAVANTAGE_API_KEY
      - APCA_API_KEY_ID
      - APCA_API_SECRET_KEY
    """
    if path is None:
        candidate = Path(DEFAULT_CONFIG_NAME)
        if not candidate.exists():
            return AppConfig(data=DataConfig(**_secrets()))
        config_path = candidate
    else:
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"Config file must be a YAML mapping, got {type(raw).__name__}")

    data_raw = raw.get("data") or {}
    source = str(data_raw.get("source", "alphavantage")).lower()
    if source not in _SOURCES:
        raise ValueError(f"Unsupported data source '{source}'. Supported: {list(_SOURCES)}")

    store_raw = data_raw.get("store_path")
    if store_raw:
        store_path = Path(store_raw).expanduser()
        if not store_path.is_absolute():
            store_path = config_path.resolve().parent / store_path
    else:
        store_path = default_store_path()

    data_cfg = DataConfig(source=source, store_path=store_path, **_secrets())

    log_raw = raw.get("logging") or {}
    log_cfg = LoggingConfig(level=str(log_raw.get("level", "WARNING")).upper())
    if not isinstance(log_cfg.level_no, int):
        raise ValueError(f"Unknown logging level '{log_cfg.level}'")

    return AppConfig(data=data_cfg, logging=log_cfg, path=config_path)
