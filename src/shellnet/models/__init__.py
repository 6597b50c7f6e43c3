"""Configuration models for shellnet."""

from .config import (
    Config,
    HttpSettingsConfig,
    MigrationConfig,
    feature_enabled,
    load_config,
    parse_config,
)

__all__ = [
    "Config",
    "HttpSettingsConfig",
    "MigrationConfig",
    "feature_enabled",
    "load_config",
    "parse_config",
]
