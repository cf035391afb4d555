"""
Configuration Loader for cacheaside
Loads and manages configuration from YAML files
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field, field_validator
from loguru import logger


class StoreSettings(BaseModel):
    """Store connection configuration."""
    type: str = "redis"
    host: str = "localhost"
    port: int = 6379
    db: int = 0
    password: str = ""
    url: Optional[str] = None
    key_prefix: str = ""
    max_connections: int = 50
    socket_timeout: float = 5.0
    socket_connect_timeout: float = 5.0
    retry_on_timeout: bool = True
    
    def to_store_dict(self) -> Dict[str, Any]:
        """Keyword form accepted by StoreConfig.from_dict."""
        data = self.model_dump(exclude={"type", "url"})
        data["store_type"] = self.type.lower()
        data["connection_string"] = self.url
        return data


class CacheSettings(BaseModel):
    """Cache behaviour configuration."""
    pattern_batch_size: int = 100
    
    @field_validator("pattern_batch_size")
    @classmethod
    def _positive_batch(cls, value: int) -> int:
        if value < 1:
            raise ValueError("pattern_batch_size must be >= 1")
        return value


class LoggingSettings(BaseModel):
    """Logging configuration."""
    level: str = "INFO"
    sink: Optional[str] = None  # file path; stderr when unset
    format: str = (
        "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
    )
    rotation: Optional[str] = None


class Config(BaseModel):
    """Main configuration model."""
    store: StoreSettings = Field(default_factory=StoreSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


class ConfigLoader:
    """Configuration loader and manager."""
    
    _instance: Optional['ConfigLoader'] = None
    _config: Optional[Config] = None
    
    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance
    
    def __init__(self, config_path: Optional[str] = None):
        if self._config is None:
            self._config_path = config_path or self._find_config_path()
            self._load_config()
    
    def _find_config_path(self) -> Optional[str]:
        """Find configuration file path."""
        possible_paths = [
            os.environ.get("CACHEASIDE_CONFIG_PATH", ""),
            "./config/cacheaside.yaml",
            "./cacheaside.yaml",
            str(Path(__file__).parent / "config.yaml"),
        ]
        
        for path in possible_paths:
            if path and os.path.exists(path):
                return path
        
        return None
    
    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        if self._config_path is None:
            logger.info("No configuration file found, using defaults")
            self._config = Config()
            return
        
        try:
            with open(self._config_path, 'r', encoding='utf-8') as f:
                raw_config = yaml.safe_load(f) or {}
            
            self._config = Config(**raw_config)
            logger.info(f"Configuration loaded from {self._config_path}")
            
        except Exception as e:
            logger.warning(f"Failed to load config: {e}, using defaults")
            self._config = Config()
    
    @property
    def config(self) -> Config:
        """Get configuration."""
        return self._config
    
    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by dot-separated key."""
        keys = key.split('.')
        value = self._config
        
        try:
            for k in keys:
                if hasattr(value, k):
                    value = getattr(value, k)
                elif isinstance(value, dict):
                    value = value[k]
                else:
                    return default
            return value
        except (KeyError, AttributeError):
            return default
    
    def reload(self) -> None:
        """Reload configuration."""
        self._load_config()
    
    @classmethod
    def reset(cls) -> None:
        """Reset singleton instance."""
        cls._instance = None
        cls._config = None


def get_config() -> Config:
    """Get global configuration instance."""
    return ConfigLoader().config
