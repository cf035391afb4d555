"""
Point Cache Unit Tests
Single-key get / set / cache-aside / delete
"""

import json
from unittest.mock import Mock

import pytest

from fixtures.sample_data import VALUE_1, VALUE_2

from cacheaside.cache.sentinel import NOT_FOUND

KEY = "test1"
KEY_2 = "test2"


async def query():
    return VALUE_2


class TestGetCache:
    """get_cache"""
    
    @pytest.mark.asyncio
    async def test_missing_key(self, cache):
        assert await cache.get_cache(KEY) is NOT_FOUND
    
    @pytest.mark.asyncio
    async def test_existing_key(self, cache, store):
        await store.set(KEY, json.dumps(VALUE_1))
        
        assert await cache.get_cache(KEY) == VALUE_1
    
    @pytest.mark.asyncio
    async def test_raw_empty_string_reads_as_miss(self, cache, store):
        """An empty string written around the codec cannot be told from a miss."""
        await store.set(KEY, "")
        
        assert await cache.get_cache(KEY) is NOT_FOUND
    
    @pytest.mark.asyncio
    async def test_malformed_data_raises(self, cache, store):
        await store.set(KEY, "{not json")
        
        with pytest.raises(json.JSONDecodeError):
            await cache.get_cache(KEY)


class TestSetCache:
    """set_cache"""
    
    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", [VALUE_1, None, 0, "", False, "abc", 1.5, [1, "x"]])
    async def test_round_trip(self, cache, value):
        await cache.set_cache(KEY, value)
        
        assert await cache.get_cache(KEY) == value
    
    @pytest.mark.asyncio
    async def test_none_is_a_hit(self, cache):
        await cache.set_cache(KEY, None)
        
        assert await cache.get_cache(KEY) is None
    
    @pytest.mark.asyncio
    async def test_overwrites(self, cache, store):
        await store.set(KEY, json.dumps(VALUE_2))
        
        await cache.set_cache(KEY, VALUE_1)
        
        assert await cache.get_cache(KEY) == VALUE_1
    
    @pytest.mark.asyncio
    async def test_ttl_expires(self, cache, clock):
        await cache.set_cache(KEY, VALUE_1, ttl=1)
        assert await cache.get_cache(KEY) == VALUE_1
        
        clock.advance(1.1)
        
        assert await cache.get_cache(KEY) is NOT_FOUND
    
    @pytest.mark.asyncio
    async def test_set_without_ttl_clears_expiry(self, cache, clock):
        await cache.set_cache(KEY, VALUE_1, ttl=1)
        await cache.set_cache(KEY, VALUE_2)
        
        clock.advance(5)
        
        assert await cache.get_cache(KEY) == VALUE_2
    
    @pytest.mark.asyncio
    @pytest.mark.parametrize("ttl", [0, -1, 1.5, "10", True])
    async def test_invalid_ttl(self, cache, store, ttl):
        with pytest.raises(ValueError):
            await cache.set_cache(KEY, VALUE_1, ttl=ttl)
        
        assert await store.get(KEY) is None


class TestCache:
    """cache (single-key cache-aside)"""
    
    @pytest.mark.asyncio
    async def test_returns_cached_value(self, cache, store):
        await store.set(KEY, json.dumps(VALUE_1))
        fn = Mock(return_value=VALUE_2)
        
        assert await cache.cache(KEY, fn) == VALUE_1
        fn.assert_not_called()
    
    @pytest.mark.asyncio
    async def test_hit_ignores_ttl(self, cache, store, clock):
        """A hit does not put an expiry on the existing key."""
        await store.set(KEY, json.dumps(VALUE_1))
        
        await cache.cache(KEY, query, ttl=1)
        clock.advance(1.1)
        
        assert await cache.get_cache(KEY) == VALUE_1
    
    @pytest.mark.asyncio
    async def test_miss_returns_resolver_value(self, cache):
        assert await cache.cache(KEY, query) == VALUE_2
    
    @pytest.mark.asyncio
    async def test_miss_stores_resolver_value(self, cache):
        await cache.cache(KEY, query)
        fn2 = Mock(return_value=1)
        
        assert await cache.cache(KEY, fn2) == VALUE_2
        fn2.assert_not_called()
    
    @pytest.mark.asyncio
    async def test_sync_resolver_called_once(self, cache):
        fn = Mock(return_value="abc")
        
        assert await cache.cache(KEY, fn) == "abc"
        fn.assert_called_once_with()
    
    @pytest.mark.asyncio
    async def test_miss_with_ttl(self, cache, clock):
        await cache.cache(KEY, query, ttl=1)
        assert await cache.get_cache(KEY) == VALUE_2
        
        clock.advance(1.1)
        
        assert await cache.get_cache(KEY) is NOT_FOUND
    
    @pytest.mark.asyncio
    @pytest.mark.parametrize("first, second", [(None, VALUE_2), ("abc", "def"), (1, 2), ("", "x")])
    async def test_caches_falsy_and_scalar_values(self, cache, first, second):
        assert await cache.cache(KEY, lambda: first) == first
        assert await cache.cache(KEY, lambda: second) == first
    
    @pytest.mark.asyncio
    async def test_resolver_error_propagates_without_write(self, cache, store):
        async def failing():
            raise RuntimeError("db down")
        
        with pytest.raises(RuntimeError, match="db down"):
            await cache.cache(KEY, failing)
        
        assert await store.get(KEY) is None
    
    @pytest.mark.asyncio
    async def test_stats(self, cache):
        await cache.cache(KEY, query)
        await cache.cache(KEY, query)
        
        stats = cache.get_stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["resolver_calls"] == 1
        assert stats["hit_rate"] == 0.5


class TestDeleteCache:
    """delete_cache"""
    
    @pytest.mark.asyncio
    async def test_deletes_values_and_hashes(self, cache):
        await cache.set_cache(KEY, VALUE_1)
        await cache.set_hash_cache(KEY_2, "id", VALUE_1)
        await cache.set_hash_cache(KEY_2, "id2", VALUE_2)
        
        await cache.delete_cache(KEY, KEY_2)
        
        assert await cache.get_cache(KEY) is NOT_FOUND
        assert await cache.get_hash_cache(KEY_2, "id") is NOT_FOUND
        assert await cache.get_hash_cache(KEY_2, "id2") is NOT_FOUND
    
    @pytest.mark.asyncio
    async def test_returns_deleted_count(self, cache):
        await cache.set_cache(KEY, VALUE_1)
        await cache.set_hash_cache(KEY_2, "id", VALUE_1)
        
        assert await cache.delete_cache(KEY, KEY_2, "empty_key") == 2
    
    @pytest.mark.asyncio
    async def test_no_keys(self, cache):
        assert await cache.delete_cache() == 0
