"""
Store Adapters

Backends the cache layer reads and writes through. Every adapter implements
IStoreAdapter; pick one with AdapterFactory or instantiate it directly.

```python
from cacheaside.adapters import AdapterFactory

store = AdapterFactory.create_redis(host="localhost", key_prefix="app:")
await store.connect()
```
"""

from cacheaside.adapters.base import (
    IStoreAdapter,
    IStorePipeline,
    Key,
    StoreConfig,
    StoreType,
)
from cacheaside.adapters.memory_adapter import InMemoryStoreAdapter
from cacheaside.adapters.redis_adapter import RedisStoreAdapter
from cacheaside.adapters.factory import AdapterFactory

__all__ = [
    "IStoreAdapter",
    "IStorePipeline",
    "Key",
    "StoreConfig",
    "StoreType",
    "InMemoryStoreAdapter",
    "RedisStoreAdapter",
    "AdapterFactory",
]
