"""
Hash Batch Cache
Multi-field cache-aside within one hash map
"""

from typing import Any, Callable, List, Mapping, Sequence

from loguru import logger

from cacheaside.adapters.base import Key
from cacheaside.cache.base import CacheBase, normalize_resolved
from cacheaside.cache.sentinel import NOT_FOUND


class HashBatchCacheMixin(CacheBase):
    """Multi-field operations on one hash key."""
    
    async def hash_many_cache(
        self,
        key: Key,
        ids: Sequence[Key],
        fn: Callable[[List[Key]], Any],
    ) -> List[Any]:
        """
        Cache-aside for many fields of hash `key`.
        
        Follows many_cache(): fn receives only the missing ids, in request
        order, may answer with a mapping or an aligned sequence, and ids it
        leaves out come back as NOT_FOUND without being stored.
        
        Returns:
            One value per requested id, in the same order
        """
        ids = list(ids)
        cached_values = await self.get_hash_many_cache(key, ids)
        
        uncached_ids = [ids[i] for i, v in enumerate(cached_values) if v is NOT_FOUND]
        self._record_lookup(len(ids) - len(uncached_ids), len(uncached_ids))
        logger.debug(
            f"hash_many_cache {key}: {len(ids) - len(uncached_ids)} hits, "
            f"{len(uncached_ids)} misses"
        )
        
        if not uncached_ids:
            return cached_values
        
        uncached_value_map = normalize_resolved(
            uncached_ids, await self._resolve(fn, uncached_ids)
        )
        await self.set_hash_many_cache(key, uncached_value_map)
        
        for i, value in enumerate(cached_values):
            if value is NOT_FOUND:
                cached_values[i] = uncached_value_map.get(str(ids[i]), NOT_FOUND)
        return cached_values
    
    async def get_hash_many_cache(self, key: Key, ids: Sequence[Key]) -> List[Any]:
        if len(ids) <= 0:
            return []
        data = await self.store.hmget(key, list(ids))
        return self._decode_many(data)
    
    async def set_hash_many_cache(self, key: Key, value_map: Mapping[Key, Any]) -> Any:
        if len(value_map) <= 0:
            return []
        params = self._build_set_params(value_map)
        return await self.store.hmset(key, params)
