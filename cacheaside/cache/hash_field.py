"""
Hash Field Cache
Cache-aside for single fields of a store hash map

There is no per-field ttl; expire the whole hash through the store if needed.
"""

from typing import Any, Callable

from loguru import logger

from cacheaside.adapters.base import Key
from cacheaside.cache.base import CacheBase
from cacheaside.cache.sentinel import NOT_FOUND


class HashFieldCacheMixin(CacheBase):
    """Single (key, field) operations."""
    
    async def hash_cache(self, key: Key, field: Key, fn: Callable[[], Any]) -> Any:
        """Same as cache(), addressed to one field of hash `key`."""
        value = await self.get_hash_cache(key, field)
        if value is not NOT_FOUND:
            self._record_lookup(1, 0)
            logger.debug(f"Hash cache hit: {key}[{field}]")
            return value
        
        self._record_lookup(0, 1)
        logger.debug(f"Hash cache miss: {key}[{field}]")
        value = await self._resolve(fn)
        await self.set_hash_cache(key, field, value)
        return value
    
    async def get_hash_cache(self, key: Key, field: Key) -> Any:
        data = await self.store.hget(key, field)
        return self._decode(data)
    
    async def set_hash_cache(self, key: Key, field: Key, value: Any) -> int:
        """
        Returns:
            Number of fields created (0 when an existing field was overwritten)
        """
        data = self.codec.encode(value)
        return await self.store.hset(key, field, data)
    
    async def delete_hash_cache(self, key: Key, *ids: Key) -> int:
        """Delete fields of a hash, returning how many existed."""
        return await self.store.hdel(key, *ids)
