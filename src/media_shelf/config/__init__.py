"""Configuration management module."""

from .config_manager import ConfigManager
from .models import CatalogConfig, Config, LoggingConfig, PlaybackConfig, TMDbConfig

__all__ = [
    "ConfigManager",
    "Config",
    "CatalogConfig",
    "TMDbConfig",
    "PlaybackConfig",
    "LoggingConfig",
]
