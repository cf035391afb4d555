"""
Store Adapter Factory
Creates store adapters based on configuration

Version: 1.0.0
"""

from typing import Any, Dict, List, Optional, Type

from loguru import logger

from cacheaside.adapters.base import (
    IStoreAdapter,
    StoreConfig,
    StoreType,
)
from cacheaside.adapters.memory_adapter import InMemoryStoreAdapter
from cacheaside.adapters.redis_adapter import RedisStoreAdapter


class AdapterFactory:
    """
    Factory for creating store adapters.
    
    Supports:
    - Redis
    - In-Memory (for testing)
    - Custom adapters (via registration)
    
    Example:
        config = StoreConfig(store_type=StoreType.REDIS, key_prefix="app:")
        store = AdapterFactory.create(config)
        
        # Or use shorthand
        store = AdapterFactory.create_redis(host="localhost", key_prefix="app:")
    """
    
    # Registry of store types to classes
    _adapters: Dict[StoreType, Type[IStoreAdapter]] = {
        StoreType.REDIS: RedisStoreAdapter,
        StoreType.MEMORY: InMemoryStoreAdapter,
    }
    
    @classmethod
    def register(
        cls,
        store_type: StoreType,
        adapter_class: Type[IStoreAdapter],
    ) -> None:
        """
        Register a custom adapter class.
        
        Args:
            store_type: Type identifier
            adapter_class: Adapter class implementing IStoreAdapter
        """
        cls._adapters[store_type] = adapter_class
        logger.info(f"Registered store adapter: {store_type} -> {adapter_class.__name__}")
    
    @classmethod
    def create(cls, config: StoreConfig) -> IStoreAdapter:
        """
        Create an adapter instance from configuration.
        
        The adapter is not connected yet.
        """
        adapter_class = cls._adapters.get(config.store_type)
        
        if adapter_class is None:
            raise ValueError(f"Unknown store type: {config.store_type}")
        
        adapter = adapter_class(config)
        logger.debug(f"Created store adapter: {config.store_type}")
        return adapter
    
    @classmethod
    def create_from_dict(cls, config_dict: Dict[str, Any]) -> IStoreAdapter:
        """Create an adapter from a dictionary configuration."""
        config_dict = dict(config_dict)
        store_type = config_dict.pop("type", None) or config_dict.get("store_type", "redis")
        
        try:
            config_dict["store_type"] = StoreType(str(store_type).lower())
        except ValueError:
            raise ValueError(f"Unknown store type: {store_type}")
        
        return cls.create(StoreConfig.from_dict(config_dict))
    
    # Convenience methods for common adapters
    
    @classmethod
    def create_redis(
        cls,
        host: str = "localhost",
        port: int = 6379,
        password: str = "",
        db: int = 0,
        key_prefix: str = "",
        **kwargs,
    ) -> RedisStoreAdapter:
        """Create Redis adapter."""
        config = StoreConfig(
            store_type=StoreType.REDIS,
            host=host,
            port=port,
            password=password,
            db=db,
            key_prefix=key_prefix,
            **kwargs,
        )
        return cls.create(config)
    
    @classmethod
    def create_memory(cls, key_prefix: str = "", clock: Optional[Any] = None) -> InMemoryStoreAdapter:
        """Create in-memory adapter for testing."""
        config = StoreConfig(store_type=StoreType.MEMORY, key_prefix=key_prefix)
        if clock is not None:
            return InMemoryStoreAdapter(config, clock=clock)
        return cls.create(config)
    
    @classmethod
    def get_supported_types(cls) -> List[StoreType]:
        """Get list of supported store types."""
        return list(cls._adapters.keys())
