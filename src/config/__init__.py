"""
Configuration loader.

App config: reads config.yaml (optional), resolves env vars for secrets.
"""

from config.loader import (
    AppConfig,
    DataConfig,
    LoggingConfig,
    default_store_path,
    load_config,
)

__all__ = [
    "AppConfig",
    "DataConfig",
    "LoggingConfig",
    "default_store_path",
    "load_config",
]
