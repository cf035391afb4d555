"""
Shared state and helpers for the cache components

Every component mixin (point, batch, hash, reservation, eraser) works on the
same store adapter and codec held here.
"""

import inspect
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from loguru import logger

from cacheaside.adapters.base import IStoreAdapter, Key
from cacheaside.cache.codec import IValueCodec, JsonCodec
from cacheaside.cache.sentinel import NOT_FOUND


async def call_maybe_async(fn: Callable[..., Any], *args: Any) -> Any:
    """Call fn and await the result if it is awaitable."""
    result = fn(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


def check_ttl(ttl: Optional[int]) -> None:
    """TTL must be absent or a positive number of seconds."""
    if ttl is None:
        return
    if isinstance(ttl, bool) or not isinstance(ttl, int) or ttl <= 0:
        raise ValueError(f"ttl must be a positive integer number of seconds, got {ttl!r}")


def normalize_resolved(ids: Sequence[Key], resolved: Any) -> Dict[str, Any]:
    """
    Turn a resolver result into an id -> value map.
    
    Resolvers may answer with a mapping keyed by id, or with a sequence aligned
    with `ids`. In the sequence form a NOT_FOUND entry (or a short sequence)
    means the resolver has no value for that id.
    
    Ids are keyed by str(id), the form they take in the store, so an integer
    id and its string spelling name the same entry.
    
    Args:
        ids: Ids the resolver was called with, in call order
        resolved: Resolver result
        
    Returns:
        Map str(id) -> value holding only the ids the resolver produced a value for
    """
    if resolved is None:
        return {}
    
    if isinstance(resolved, Mapping):
        items = resolved.items()
    elif isinstance(resolved, (str, bytes)) or not isinstance(resolved, Sequence):
        raise TypeError(
            f"resolver must return a mapping or a sequence, got {type(resolved).__name__}"
        )
    else:
        if len(resolved) > len(ids):
            raise ValueError(
                f"resolver returned {len(resolved)} values for {len(ids)} ids"
            )
        items = zip(ids, resolved)
    
    return {str(k): v for k, v in items if v is not NOT_FOUND}


class CacheBase:
    """
    Holds the store adapter, the codec and the counters.
    
    Args:
        store: Store adapter all reads and writes go through
        codec: Value codec (JsonCodec when omitted)
    """
    
    def __init__(self, store: IStoreAdapter, codec: Optional[IValueCodec] = None):
        self.store = store
        self.codec = codec or JsonCodec()
        
        # Stats
        self._stats = {
            "hits": 0,
            "misses": 0,
            "resolver_calls": 0,
            "acquires": 0,
            "releases": 0,
            "release_failures": 0,
        }
    
    @property
    def prefix(self) -> str:
        """Key prefix the store applies to every key."""
        return self.store.key_prefix
    
    def _decode(self, data: Optional[str]) -> Any:
        # Falsy raw data (missing key or empty string) counts as a miss
        return self.codec.decode(data) if data else NOT_FOUND
    
    def _decode_many(self, data: List[Optional[str]]) -> List[Any]:
        return [self._decode(e) for e in data]
    
    def _build_set_params(self, value_map: Mapping[Key, Any]) -> Dict[str, str]:
        return {str(k): self.codec.encode(v) for k, v in value_map.items()}
    
    def _record_lookup(self, hits: int, misses: int) -> None:
        self._stats["hits"] += hits
        self._stats["misses"] += misses
    
    async def _resolve(self, fn: Callable[..., Any], *args: Any) -> Any:
        self._stats["resolver_calls"] += 1
        return await call_maybe_async(fn, *args)
    
    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics"""
        total = self._stats["hits"] + self._stats["misses"]
        return {
            **self._stats,
            "hit_rate": self._stats["hits"] / total if total else 0.0,
        }
    
    def reset_stats(self) -> None:
        for name in self._stats:
            self._stats[name] = 0
        logger.debug("Cache stats reset")
