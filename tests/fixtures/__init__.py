"""
Test fixtures for cacheaside unit tests.
Provides a controllable clock and sample data.
"""

from .fake_clock import FakeClock
from .sample_data import (
    ALL_IDS,
    CACHED_MAP,
    DATA_MAP,
    UNCACHED_MAP,
    VALUE_1,
    VALUE_2,
    query_many,
    query_many_as_list,
)

__all__ = [
    "FakeClock",
    "ALL_IDS",
    "CACHED_MAP",
    "DATA_MAP",
    "UNCACHED_MAP",
    "VALUE_1",
    "VALUE_2",
    "query_many",
    "query_many_as_list",
]
