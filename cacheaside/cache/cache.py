"""
Cache
Cache-aside layer over a key-value store

Combines the point, batch, hash, hash-batch, reservation and pattern-erase
components over one store adapter and one codec.

Usage:
```python
cache = Cache(StoreConfig(host="localhost", key_prefix="app:"))
await cache.connect()

user = await cache.cache(f"user:{uid}", lambda: load_user(uid), ttl=300)
users = await cache.many_cache(uids, load_users, prefix="user:", ttl=300)

await cache.close()
```

Methods are plain bound methods, so `get = cache.get_cache` can be passed
around on its own.

Version: 1.0.0
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from loguru import logger
import redis.asyncio as aioredis

from cacheaside.adapters.base import IStoreAdapter, StoreConfig
from cacheaside.adapters.factory import AdapterFactory
from cacheaside.adapters.redis_adapter import RedisStoreAdapter
from cacheaside.cache.batch import BatchCacheMixin
from cacheaside.cache.codec import IValueCodec
from cacheaside.cache.eraser import PatternEraserMixin
from cacheaside.cache.hash_batch import HashBatchCacheMixin
from cacheaside.cache.hash_field import HashFieldCacheMixin
from cacheaside.cache.point import PointCacheMixin
from cacheaside.cache.reservation import ReservationMixin
from cacheaside.config.config_loader import Config, get_config


StoreSource = Union[IStoreAdapter, aioredis.Redis, StoreConfig, Dict[str, Any]]


@dataclass
class CacheOptions:
    """Store plus codec, the long form of Cache's first argument."""
    store: StoreSource
    codec: Optional[IValueCodec] = None


def build_store(source: StoreSource) -> IStoreAdapter:
    """
    Resolve a store source to an adapter.
    
    - IStoreAdapter: used as is
    - redis.asyncio.Redis: wrapped, the caller keeps ownership of the client
    - StoreConfig / dict: a new adapter is created (not connected yet)
    """
    if isinstance(source, IStoreAdapter):
        return source
    if isinstance(source, aioredis.Redis):
        return RedisStoreAdapter(client=source)
    if isinstance(source, StoreConfig):
        return AdapterFactory.create(source)
    if isinstance(source, dict):
        return AdapterFactory.create_from_dict(source)
    raise TypeError(
        f"Cannot build a store from {type(source).__name__}; expected an IStoreAdapter, "
        f"a redis.asyncio.Redis client, a StoreConfig or a dict"
    )


class Cache(
    PointCacheMixin,
    BatchCacheMixin,
    HashFieldCacheMixin,
    HashBatchCacheMixin,
    ReservationMixin,
    PatternEraserMixin,
):
    """
    Cache-aside facade.
    
    Misses read as NOT_FOUND. Resolvers and reservation bodies may be plain
    callables or coroutine functions. All store, codec and resolver errors
    propagate to the caller; the layer never retries.
    
    Args:
        source: Store adapter, redis.asyncio client, StoreConfig, dict, or CacheOptions
        codec: Value codec (overrides CacheOptions.codec; JsonCodec when omitted)
    """
    
    def __init__(
        self,
        source: Union[StoreSource, CacheOptions],
        codec: Optional[IValueCodec] = None,
    ):
        if isinstance(source, CacheOptions):
            codec = codec or source.codec
            source = source.store
        super().__init__(build_store(source), codec)
    
    @classmethod
    def from_config(
        cls,
        config: Optional[Config] = None,
        codec: Optional[IValueCodec] = None,
    ) -> "Cache":
        """Build a cache from the YAML configuration model (global config by default)."""
        config = config or get_config()
        cache = cls(config.store.to_store_dict(), codec)
        cache.pattern_batch_size = config.cache.pattern_batch_size
        return cache
    
    @property
    def redis(self) -> aioredis.Redis:
        """Underlying redis.asyncio client, for commands this layer does not wrap."""
        if not isinstance(self.store, RedisStoreAdapter):
            raise AttributeError(f"{type(self.store).__name__} has no Redis client")
        return self.store.client
    
    async def connect(self) -> None:
        await self.store.connect()
    
    async def close(self) -> None:
        await self.store.disconnect()
    
    def get_stats(self) -> Dict[str, Any]:
        return {
            **super().get_stats(),
            "store": repr(self.store),
            "codec": repr(self.codec),
        }
    
    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(store={self.store!r}, codec={self.codec!r})"
    
    async def __aenter__(self):
        await self.connect()
        return self
    
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
        logger.debug("Cache closed")
