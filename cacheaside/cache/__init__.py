"""
Cache-aside components

- Cache: facade combining every component below
- PointCacheMixin: single keys
- BatchCacheMixin: many keys with partial-hit reconciliation
- HashFieldCacheMixin / HashBatchCacheMixin: fields of a store hash map
- ReservationMixin: counter reservations rolled back on failure
- PatternEraserMixin: SCAN-based bulk delete
"""

from cacheaside.cache.base import CacheBase, normalize_resolved
from cacheaside.cache.batch import BatchCacheMixin
from cacheaside.cache.cache import Cache, CacheOptions, build_store
from cacheaside.cache.codec import IValueCodec, JsonCodec
from cacheaside.cache.eraser import PatternEraserMixin
from cacheaside.cache.hash_batch import HashBatchCacheMixin
from cacheaside.cache.hash_field import HashFieldCacheMixin
from cacheaside.cache.point import PointCacheMixin
from cacheaside.cache.reservation import ReservationMixin
from cacheaside.cache.sentinel import NOT_FOUND, is_found

__all__ = [
    "Cache",
    "CacheOptions",
    "CacheBase",
    "build_store",
    "normalize_resolved",
    "PointCacheMixin",
    "BatchCacheMixin",
    "HashFieldCacheMixin",
    "HashBatchCacheMixin",
    "ReservationMixin",
    "PatternEraserMixin",
    "IValueCodec",
    "JsonCodec",
    "NOT_FOUND",
    "is_found",
]
