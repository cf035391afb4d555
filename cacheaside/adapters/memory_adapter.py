"""
In-Memory Store Adapter
Simple dict-backed store for testing and development

Mimics the Redis semantics the cache layer relies on: string values, hash
maps, integer/float counters stored as text, per-key expiry and paged scanning
with Redis glob syntax.

Note: Data is lost when the process terminates.

Version: 1.0.0
"""

import re
import time
from typing import Any, AsyncIterator, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from loguru import logger

from cacheaside.adapters.base import (
    IStoreAdapter,
    IStorePipeline,
    Key,
    StoreConfig,
    StoreType,
)


def _format_float(value: float) -> str:
    """Format a counter the way Redis does (no trailing .0 for integral values)."""
    if value == int(value):
        return str(int(value))
    return repr(value)


def _compile_glob(pattern: str) -> "re.Pattern[str]":
    """
    Compile a Redis MATCH glob.
    
    Redis globs differ from fnmatch: a class is negated with [^...] and a
    backslash escapes the next character, also inside a class.
    """
    parts = []
    i, n = 0, len(pattern)
    while i < n:
        c = pattern[i]
        i += 1
        if c == "*":
            parts.append(".*")
        elif c == "?":
            parts.append(".")
        elif c == "\\" and i < n:
            parts.append(re.escape(pattern[i]))
            i += 1
        elif c == "[":
            negate = i < n and pattern[i] == "^"
            if negate:
                i += 1
            members = []
            while i < n and pattern[i] != "]":
                if pattern[i] == "\\" and i + 1 < n:
                    members.append(re.escape(pattern[i + 1]))
                    i += 2
                elif i + 2 < n and pattern[i + 1] == "-" and pattern[i + 2] != "]":
                    # Redis accepts reversed ranges like [z-a]
                    lo, hi = sorted((pattern[i], pattern[i + 2]))
                    members.append(f"{re.escape(lo)}-{re.escape(hi)}")
                    i += 3
                else:
                    members.append(re.escape(pattern[i]))
                    i += 1
            # Closing bracket; an unterminated class runs to the end
            i += 1
            if members:
                parts.append(f"[{'^' if negate else ''}{''.join(members)}]")
            else:
                parts.append("." if negate else "(?!)")
        else:
            parts.append(re.escape(c))
    return re.compile("".join(parts), re.DOTALL)


class InMemoryStorePipeline(IStorePipeline):
    """Queues adapter calls and runs them in order on execute()."""
    
    def __init__(self, adapter: "InMemoryStoreAdapter"):
        self._adapter = adapter
        self._commands: List[Tuple[str, tuple]] = []
    
    def mset(self, mapping: Mapping[str, str]) -> "InMemoryStorePipeline":
        self._commands.append(("mset", (dict(mapping),)))
        return self
    
    def expire(self, key: Key, seconds: int) -> "InMemoryStorePipeline":
        self._commands.append(("expire", (key, seconds)))
        return self
    
    def delete(self, *keys: Key) -> "InMemoryStorePipeline":
        self._commands.append(("delete", keys))
        return self
    
    def __len__(self) -> int:
        return len(self._commands)
    
    async def execute(self) -> List[Any]:
        commands, self._commands = self._commands, []
        results = []
        for name, args in commands:
            results.append(await getattr(self._adapter, name)(*args))
        return results


class InMemoryStoreAdapter(IStoreAdapter):
    """
    In-memory adapter for the cache layer.
    
    Useful for:
    - Testing
    - Development
    - Single-process deployments
    
    Expiry is evaluated lazily against `clock`, which tests may replace to
    move time forward without sleeping.
    
    Example:
        store = InMemoryStoreAdapter(StoreConfig(key_prefix="test:"))
        await store.connect()
        await store.setex("k", 60, '"v"')
    """
    
    def __init__(
        self,
        config: Optional[StoreConfig] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize in-memory adapter."""
        super().__init__(config)
        
        if self.config.store_type != StoreType.MEMORY:
            self.config.store_type = StoreType.MEMORY
        
        self.clock = clock
        
        # In-memory storage, keyed by full (prefixed) key
        self._data: Dict[str, Any] = {}  # key -> str | Dict[str, str]
        self._expires: Dict[str, float] = {}  # key -> deadline
    
    async def connect(self) -> None:
        """Initialize in-memory storage (no-op)."""
        self._connected = True
        logger.info("In-memory store initialized")
    
    async def disconnect(self) -> None:
        """Clear in-memory storage."""
        self._data.clear()
        self._expires.clear()
        self._connected = False
        logger.info("In-memory store cleared")
    
    async def health_check(self) -> bool:
        return self._connected
    
    async def flush(self) -> None:
        self._data.clear()
        self._expires.clear()
    
    def _purge(self, full_key: str) -> None:
        deadline = self._expires.get(full_key)
        if deadline is not None and deadline <= self.clock():
            self._data.pop(full_key, None)
            self._expires.pop(full_key, None)
    
    def _lookup(self, full_key: str, kind: type) -> Any:
        self._purge(full_key)
        value = self._data.get(full_key)
        if value is not None and not isinstance(value, kind):
            raise TypeError(
                f"WRONGTYPE Operation against key {full_key!r} holding the wrong kind of value"
            )
        return value
    
    def _hash(self, key: Key, create: bool = False) -> Optional[Dict[str, str]]:
        full_key = self.make_key(key)
        value = self._lookup(full_key, dict)
        if value is None and create:
            value = self._data[full_key] = {}
        return value
    
    # Plain values
    
    async def get(self, key: Key) -> Optional[str]:
        return self._lookup(self.make_key(key), str)
    
    async def set(self, key: Key, value: str) -> Any:
        full_key = self.make_key(key)
        self._data[full_key] = value
        self._expires.pop(full_key, None)
        return True
    
    async def setex(self, key: Key, seconds: int, value: str) -> Any:
        full_key = self.make_key(key)
        self._data[full_key] = value
        self._expires[full_key] = self.clock() + seconds
        return True
    
    async def mget(self, keys: Sequence[Key]) -> List[Optional[str]]:
        results = []
        for key in keys:
            full_key = self.make_key(key)
            self._purge(full_key)
            value = self._data.get(full_key)
            # MGET answers nil for keys of another type instead of failing
            results.append(value if isinstance(value, str) else None)
        return results
    
    async def mset(self, mapping: Mapping[str, str]) -> Any:
        for key, value in mapping.items():
            await self.set(key, value)
        return True
    
    async def delete(self, *keys: Key) -> int:
        count = 0
        for key in keys:
            full_key = self.make_key(key)
            self._purge(full_key)
            if self._data.pop(full_key, None) is not None:
                count += 1
            self._expires.pop(full_key, None)
        return count
    
    async def expire(self, key: Key, seconds: int) -> bool:
        full_key = self.make_key(key)
        self._purge(full_key)
        if full_key not in self._data:
            return False
        self._expires[full_key] = self.clock() + seconds
        return True
    
    async def scan_keys(self, match: str, count: int = 100) -> AsyncIterator[List[str]]:
        for full_key in list(self._data):
            self._purge(full_key)
        regex = _compile_glob(match)
        matched = [k for k in self._data if regex.fullmatch(k)]
        step = max(count, 1)
        for start in range(0, len(matched), step):
            yield matched[start:start + step]
    
    # Hash maps
    
    async def hget(self, key: Key, field: Key) -> Optional[str]:
        mapping = self._hash(key)
        return mapping.get(str(field)) if mapping else None
    
    async def hset(self, key: Key, field: Key, value: str) -> int:
        mapping = self._hash(key, create=True)
        created = 0 if str(field) in mapping else 1
        mapping[str(field)] = value
        return created
    
    async def hmget(self, key: Key, fields: Sequence[Key]) -> List[Optional[str]]:
        mapping = self._hash(key) or {}
        return [mapping.get(str(f)) for f in fields]
    
    async def hmset(self, key: Key, mapping: Mapping[str, str]) -> Any:
        target = self._hash(key, create=True)
        target.update({str(k): v for k, v in mapping.items()})
        return True
    
    async def hdel(self, key: Key, *fields: Key) -> int:
        mapping = self._hash(key)
        if not mapping:
            return 0
        count = sum(1 for f in fields if mapping.pop(str(f), None) is not None)
        if not mapping:
            await self.delete(key)
        return count
    
    # Counters
    
    def _add(self, current: Optional[str], amount: Any, use_float: bool) -> str:
        if use_float:
            return _format_float(float(current or 0) + float(amount))
        try:
            base = int(current or 0)
        except ValueError:
            raise ValueError("value is not an integer or out of range")
        return str(base + int(amount))
    
    async def incrby(self, key: Key, amount: int) -> int:
        full_key = self.make_key(key)
        value = self._add(self._lookup(full_key, str), amount, False)
        self._data[full_key] = value
        return int(value)
    
    async def incrbyfloat(self, key: Key, amount: float) -> float:
        full_key = self.make_key(key)
        value = self._add(self._lookup(full_key, str), amount, True)
        self._data[full_key] = value
        return float(value)
    
    async def hincrby(self, key: Key, field: Key, amount: int) -> int:
        mapping = self._hash(key, create=True)
        value = mapping[str(field)] = self._add(mapping.get(str(field)), amount, False)
        return int(value)
    
    async def hincrbyfloat(self, key: Key, field: Key, amount: float) -> float:
        mapping = self._hash(key, create=True)
        value = mapping[str(field)] = self._add(mapping.get(str(field)), amount, True)
        return float(value)
    
    # Grouped commands
    
    def pipeline(self) -> InMemoryStorePipeline:
        return InMemoryStorePipeline(self)
