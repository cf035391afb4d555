"""
Pattern Eraser Unit Tests
delete_pattern over single and multiple SCAN pages
"""

from unittest.mock import patch

import pytest

from cacheaside.cache.sentinel import NOT_FOUND


class TestDeletePattern:
    """delete_pattern"""
    
    @pytest.mark.asyncio
    async def test_deletes_matching_keys(self, cache, store):
        await store.mset({"test1": '{"a": 1}', "test2": '{"b": 2}', "othertest": "1", "otherkey": "1"})
        
        await cache.delete_pattern("*test*")
        
        assert await cache.get_cache("test1") is NOT_FOUND
        assert await cache.get_cache("test2") is NOT_FOUND
        assert await cache.get_cache("othertest") is NOT_FOUND
    
    @pytest.mark.asyncio
    async def test_keeps_unmatched_keys(self, cache, store):
        await store.mset({"test1": '{"a": 1}', "othertest": "1", "otherkey": "1"})
        
        await cache.delete_pattern("*test*")
        
        assert await cache.get_cache("otherkey") == 1
    
    @pytest.mark.asyncio
    async def test_deletes_hashes(self, cache):
        await cache.set_hash_cache("test:h", "f", 1)
        
        await cache.delete_pattern("test:*")
        
        assert await cache.get_hash_cache("test:h", "f") is NOT_FOUND
    
    @pytest.mark.asyncio
    async def test_many_pages_and_partial_last_batch(self, cache, store):
        await cache.set_many_cache({f"test:{i}": i for i in range(250)})
        await cache.set_many_cache({f"keep:{i}": i for i in range(5)})
        
        with patch.object(store, "pipeline", wraps=store.pipeline) as pipeline:
            await cache.delete_pattern("test:*", batch_size=7)
        
        # 35 full pipelines of 7 plus one holding the last 5 keys
        assert pipeline.call_count == 36
        assert await cache.get_many_cache([f"test:{i}" for i in range(250)]) == [NOT_FOUND] * 250
        assert await cache.get_many_cache([f"keep:{i}" for i in range(5)]) == list(range(5))
    
    @pytest.mark.asyncio
    async def test_no_matches(self, cache, store):
        await cache.set_cache("keep", 1)
        
        await cache.delete_pattern("nothing*")
        
        assert await cache.get_cache("keep") == 1
    
    @pytest.mark.asyncio
    async def test_only_own_prefix_is_scanned(self, cache, store):
        """Keys outside the store prefix are never matched."""
        store._data["foreign:test1"] = "1"
        
        await cache.delete_pattern("*test*")
        
        assert store._data["foreign:test1"] == "1"
    
    @pytest.mark.asyncio
    async def test_default_batch_size_from_cache(self, cache, store):
        cache.pattern_batch_size = 2
        await cache.set_many_cache({f"test:{i}": i for i in range(5)})
        
        with patch.object(store, "scan_keys", wraps=store.scan_keys) as scan_keys:
            await cache.delete_pattern("test:*")
        
        scan_keys.assert_called_once_with(f"{store.key_prefix}test:*", count=2)
    
    @pytest.mark.asyncio
    async def test_invalid_batch_size(self, cache):
        with pytest.raises(ValueError):
            await cache.delete_pattern("*", batch_size=0)
    
    @pytest.mark.asyncio
    async def test_scan_error_waits_for_sent_batches(self, cache, store):
        await cache.set_many_cache({"test:0": 0, "test:1": 1, "test:2": 2})
        
        async def failing_scan(match, count=100):
            yield [f"{store.key_prefix}test:0", f"{store.key_prefix}test:1"]
            raise ConnectionError("connection lost")
        
        with patch.object(store, "scan_keys", side_effect=failing_scan):
            with pytest.raises(ConnectionError):
                await cache.delete_pattern("test:*", batch_size=2)
        
        assert await cache.get_many_cache(["test:0", "test:1", "test:2"]) == [NOT_FOUND, NOT_FOUND, 2]
