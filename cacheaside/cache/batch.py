"""
Batch Cache
Multi-key cache-aside with partial-hit reconciliation

many_cache() reads every requested key in one MGET, hands only the misses to
the resolver, writes back what the resolver produced and returns values in
request order.
"""

from typing import Any, Callable, List, Mapping, Optional, Sequence

from loguru import logger

from cacheaside.adapters.base import Key
from cacheaside.cache.base import CacheBase, check_ttl, normalize_resolved
from cacheaside.cache.sentinel import NOT_FOUND


class BatchCacheMixin(CacheBase):
    """Multi-key operations on top-level keys."""
    
    async def many_cache(
        self,
        keys: Sequence[Key],
        fn: Callable[[List[Key]], Any],
        prefix: str = "",
        ttl: Optional[int] = None,
    ) -> List[Any]:
        """
        Cache-aside for many keys at once.
        
        Keys are looked up as f"{prefix}{key}". fn is called once with the
        unprefixed keys that missed, in request order, and is not called at
        all when everything hit. It may return a mapping key -> value or a
        sequence aligned with the keys it received.
        
        Keys fn leaves out come back as NOT_FOUND and are not stored.
        
        Args:
            keys: Logical keys
            fn: Resolver for the missing keys
            prefix: Namespace prepended to every key
            ttl: Expiry in seconds for newly stored values
            
        Returns:
            One value per requested key, in the same order
        """
        check_ttl(ttl)
        keys = list(keys)
        full_keys = [f"{prefix}{key}" for key in keys]
        cached_values = await self.get_many_cache(full_keys)
        
        uncached_keys = [keys[i] for i, v in enumerate(cached_values) if v is NOT_FOUND]
        self._record_lookup(len(keys) - len(uncached_keys), len(uncached_keys))
        logger.debug(
            f"many_cache prefix={prefix!r}: {len(keys) - len(uncached_keys)} hits, "
            f"{len(uncached_keys)} misses"
        )
        
        if not uncached_keys:
            return cached_values
        
        uncached_value_map = normalize_resolved(
            uncached_keys, await self._resolve(fn, uncached_keys)
        )
        await self.set_many_cache(
            {f"{prefix}{key}": value for key, value in uncached_value_map.items()},
            ttl,
        )
        
        for i, value in enumerate(cached_values):
            if value is NOT_FOUND:
                cached_values[i] = uncached_value_map.get(str(keys[i]), NOT_FOUND)
        return cached_values
    
    async def get_many_cache(self, keys: Sequence[Key]) -> List[Any]:
        """
        Get many cached values.
        
        Returns:
            One value per key, NOT_FOUND for misses; [] for no keys without
            touching the store
        """
        if len(keys) <= 0:
            return []
        data = await self.store.mget(list(keys))
        return self._decode_many(data)
    
    async def set_many_cache(self, value_map: Mapping[Key, Any], ttl: Optional[int] = None) -> Any:
        """
        Store many values with one MSET.
        
        With a ttl, MSET and one EXPIRE per key are sent as a pipeline. The
        pipeline is not a transaction: a crash after MSET leaves keys without
        expiry.
        """
        check_ttl(ttl)
        if len(value_map) <= 0:
            return []
        params = self._build_set_params(value_map)
        if ttl is None:
            return await self.store.mset(params)
        
        pipeline = self.store.pipeline()
        pipeline.mset(params)
        for key in params:
            pipeline.expire(key, ttl)
        return await pipeline.execute()
