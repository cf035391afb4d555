"""
cacheaside - Cache-aside layer for Redis-like key-value stores

Read from the cache, compute on a miss, write back; for single keys, batches
of keys and fields of hash maps. Also provides counter reservations that are
rolled back when the guarded work fails.

Version: 1.0.0
"""

__version__ = "1.0.0"

from cacheaside.adapters import (
    AdapterFactory,
    IStoreAdapter,
    InMemoryStoreAdapter,
    RedisStoreAdapter,
    StoreConfig,
    StoreType,
)
from cacheaside.cache import (
    NOT_FOUND,
    Cache,
    CacheOptions,
    IValueCodec,
    JsonCodec,
    is_found,
)

__all__ = [
    "__version__",
    "Cache",
    "CacheOptions",
    "NOT_FOUND",
    "is_found",
    "IValueCodec",
    "JsonCodec",
    "AdapterFactory",
    "IStoreAdapter",
    "InMemoryStoreAdapter",
    "RedisStoreAdapter",
    "StoreConfig",
    "StoreType",
]
