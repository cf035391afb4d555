"""
Base Store Adapter Interface and Configuration
Defines the key-value store capability the cache layer is built on

Any backend (Redis, in-memory, ...) must implement IStoreAdapter to be
usable by cacheaside.cache.Cache.

Version: 1.0.0
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional, Sequence, Union


Key = Union[str, int]


class StoreType(str, Enum):
    """Supported store types."""
    REDIS = "redis"
    MEMORY = "memory"
    CUSTOM = "custom"


@dataclass
class StoreConfig:
    """
    Configuration for a store adapter.
    
    Either a connection string or individual connection params may be given.
    """
    store_type: StoreType = StoreType.REDIS
    
    # Connection
    host: str = "localhost"
    port: int = 6379
    db: int = 0
    password: str = ""
    connection_string: Optional[str] = None
    
    # Prepended to every key the adapter touches
    key_prefix: str = ""
    
    # Connection pool
    max_connections: int = 50
    socket_timeout: float = 5.0
    socket_connect_timeout: float = 5.0
    retry_on_timeout: bool = True
    
    # Additional client options
    options: Dict[str, Any] = field(default_factory=dict)
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StoreConfig":
        """Create config from dictionary"""
        data = dict(data)
        if "store_type" in data:
            data["store_type"] = StoreType(data["store_type"])
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})
    
    def get_connection_string(self) -> str:
        """Build connection string from config."""
        if self.connection_string:
            return self.connection_string
        
        if self.store_type == StoreType.REDIS:
            if self.password:
                return f"redis://:{self.password}@{self.host}:{self.port}/{self.db}"
            return f"redis://{self.host}:{self.port}/{self.db}"
        return ""


class IStorePipeline(ABC):
    """
    A group of commands sent to the store back-to-back.
    
    Commands are queued until execute() is awaited. Keys are unprefixed,
    the owning adapter applies its key prefix.
    """
    
    @abstractmethod
    def mset(self, mapping: Mapping[str, str]) -> "IStorePipeline":
        pass
    
    @abstractmethod
    def expire(self, key: Key, seconds: int) -> "IStorePipeline":
        pass
    
    @abstractmethod
    def delete(self, *keys: Key) -> "IStorePipeline":
        pass
    
    @abstractmethod
    def __len__(self) -> int:
        """Number of queued commands."""
    
    @abstractmethod
    async def execute(self) -> List[Any]:
        """Send queued commands and return their replies in order."""


class IStoreAdapter(ABC):
    """
    Key-Value Store Adapter Interface.
    
    Exposes plain string values, hash maps, atomic counters, pattern scanning
    and expiry. Every key argument is logical (unprefixed); the adapter
    prepends config.key_prefix. scan_keys() is the exception: it matches and
    returns raw store keys, prefix included.
    
    Example Implementation:
        class MyStoreAdapter(IStoreAdapter):
            async def get(self, key):
                return await self._client.get(self.make_key(key))
            ...
    """
    
    def __init__(self, config: Optional[StoreConfig] = None):
        """
        Initialize adapter with configuration.
        
        Args:
            config: Store configuration
        """
        self.config = config or StoreConfig()
        self._connected = False
    
    @property
    def is_connected(self) -> bool:
        """Check if adapter is connected."""
        return self._connected
    
    @property
    def key_prefix(self) -> str:
        return self.config.key_prefix or ""
    
    def make_key(self, key: Key) -> str:
        """Create full store key with prefix"""
        return f"{self.key_prefix}{key}"
    
    # Lifecycle
    
    @abstractmethod
    async def connect(self) -> None:
        """
        Establish connection to the store.
        
        Should be called before any data operations.
        """
    
    @abstractmethod
    async def disconnect(self) -> None:
        """Close connection to the store."""
    
    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check if the store is reachable.
        
        Returns:
            True if healthy, False otherwise
        """
    
    @abstractmethod
    async def flush(self) -> None:
        """Remove every key in the current database."""
    
    # Plain values
    
    @abstractmethod
    async def get(self, key: Key) -> Optional[str]:
        pass
    
    @abstractmethod
    async def set(self, key: Key, value: str) -> Any:
        """Set value, clearing any expiry the key had."""
    
    @abstractmethod
    async def setex(self, key: Key, seconds: int, value: str) -> Any:
        pass
    
    @abstractmethod
    async def mget(self, keys: Sequence[Key]) -> List[Optional[str]]:
        pass
    
    @abstractmethod
    async def mset(self, mapping: Mapping[str, str]) -> Any:
        pass
    
    @abstractmethod
    async def delete(self, *keys: Key) -> int:
        """
        Delete keys.
        
        Returns:
            Number of keys that existed and were removed
        """
    
    @abstractmethod
    async def expire(self, key: Key, seconds: int) -> bool:
        pass
    
    @abstractmethod
    def scan_keys(self, match: str, count: int = 100) -> AsyncIterator[List[str]]:
        """
        Iterate raw store keys matching a glob, one page per iteration.
        
        Args:
            match: Glob pattern applied to raw store keys
            count: Page size hint
        """
    
    # Hash maps
    
    @abstractmethod
    async def hget(self, key: Key, field: Key) -> Optional[str]:
        pass
    
    @abstractmethod
    async def hset(self, key: Key, field: Key, value: str) -> int:
        """
        Returns:
            Number of fields newly created
        """
    
    @abstractmethod
    async def hmget(self, key: Key, fields: Sequence[Key]) -> List[Optional[str]]:
        pass
    
    @abstractmethod
    async def hmset(self, key: Key, mapping: Mapping[str, str]) -> Any:
        pass
    
    @abstractmethod
    async def hdel(self, key: Key, *fields: Key) -> int:
        pass
    
    # Counters
    
    @abstractmethod
    async def incrby(self, key: Key, amount: int) -> int:
        pass
    
    @abstractmethod
    async def incrbyfloat(self, key: Key, amount: float) -> float:
        pass
    
    @abstractmethod
    async def hincrby(self, key: Key, field: Key, amount: int) -> int:
        pass
    
    @abstractmethod
    async def hincrbyfloat(self, key: Key, field: Key, amount: float) -> float:
        pass
    
    # Grouped commands
    
    @abstractmethod
    def pipeline(self) -> IStorePipeline:
        pass
    
    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(prefix={self.key_prefix!r}, connected={self._connected})"
    
    async def __aenter__(self):
        """Async context manager entry."""
        await self.connect()
        return self
    
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.disconnect()
