"""Configuration management module."""

from chartcache.core.config.settings import (
    ChartCacheConfig,
    ConfigManager,
    LoggingConfig,
    ProviderConfig,
    StorageConfig,
    get_default_config,
    load_config_from_env,
)

__all__ = [
    "ChartCacheConfig",
    "ConfigManager",
    "LoggingConfig",
    "ProviderConfig",
    "StorageConfig",
    "get_default_config",
    "load_config_from_env",
]
