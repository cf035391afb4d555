"""
Shared pytest fixtures.

Every cache test runs against the in-memory store with a fake clock, so no
Redis server is needed and expiry is tested without sleeping.
"""

import pytest

from fixtures.fake_clock import FakeClock

from cacheaside.adapters.base import StoreConfig, StoreType
from cacheaside.adapters.memory_adapter import InMemoryStoreAdapter
from cacheaside.cache.cache import Cache

KEY_PREFIX = "cacheaside-test:"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    config = StoreConfig(store_type=StoreType.MEMORY, key_prefix=KEY_PREFIX)
    return InMemoryStoreAdapter(config, clock=clock)


@pytest.fixture
def cache(store):
    return Cache(store)
