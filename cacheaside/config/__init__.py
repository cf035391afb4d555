from cacheaside.config.config_loader import (
    CacheSettings,
    Config,
    ConfigLoader,
    LoggingSettings,
    StoreSettings,
    get_config,
)

__all__ = [
    "CacheSettings",
    "Config",
    "ConfigLoader",
    "LoggingSettings",
    "StoreSettings",
    "get_config",
]
