"""
Point Cache
Single-key reads, writes and cache-aside
"""

from typing import Any, Callable, Optional

from loguru import logger

from cacheaside.adapters.base import Key
from cacheaside.cache.base import CacheBase, check_ttl
from cacheaside.cache.sentinel import NOT_FOUND


class PointCacheMixin(CacheBase):
    """Single-key operations."""
    
    async def cache(self, key: Key, fn: Callable[[], Any], ttl: Optional[int] = None) -> Any:
        """
        Return the cached value of `key`, computing and storing it on a miss.
        
        On a miss fn() is called (it may be a coroutine function) and its
        result is stored unconditionally, None included. If fn raises, the
        error propagates and nothing is written.
        
        Concurrent callers missing the same key each call fn; the last write
        wins.
        
        Args:
            key: Cache key
            fn: Resolver producing the value on a miss
            ttl: Expiry in seconds for the stored value, None for no expiry
        """
        check_ttl(ttl)
        value = await self.get_cache(key)
        if value is not NOT_FOUND:
            self._record_lookup(1, 0)
            logger.debug(f"Cache hit: {key}")
            return value
        
        self._record_lookup(0, 1)
        logger.debug(f"Cache miss: {key}")
        value = await self._resolve(fn)
        await self.set_cache(key, value, ttl)
        return value
    
    async def get_cache(self, key: Key) -> Any:
        """
        Get a cached value.
        
        Returns:
            Decoded value, or NOT_FOUND when the key is missing or holds an
            empty string
        """
        data = await self.store.get(key)
        return self._decode(data)
    
    async def set_cache(self, key: Key, value: Any, ttl: Optional[int] = None) -> Any:
        """Store a value. Without ttl any previous expiry on the key is cleared."""
        check_ttl(ttl)
        data = self.codec.encode(value)
        if ttl is not None:
            return await self.store.setex(key, ttl, data)
        return await self.store.set(key, data)
    
    async def delete_cache(self, *keys: Key) -> int:
        """Delete keys, returning how many of them existed."""
        return await self.store.delete(*keys)
