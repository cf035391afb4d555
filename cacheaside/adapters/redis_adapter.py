"""
Redis Store Adapter
Connects the cache layer to Redis through redis.asyncio

Keys are namespaced with StoreConfig.key_prefix on the client side, so two
caches with different prefixes can share one Redis database.

Version: 1.0.0
"""

from typing import Any, AsyncIterator, List, Mapping, Optional, Sequence

from loguru import logger
import redis.asyncio as aioredis

from cacheaside.adapters.base import (
    IStoreAdapter,
    IStorePipeline,
    Key,
    StoreConfig,
    StoreType,
)


class RedisStorePipeline(IStorePipeline):
    """Non-transactional Redis pipeline that applies the adapter's key prefix."""
    
    def __init__(self, adapter: "RedisStoreAdapter"):
        self._adapter = adapter
        self._pipe = adapter.client.pipeline(transaction=False)
    
    def mset(self, mapping: Mapping[str, str]) -> "RedisStorePipeline":
        self._pipe.mset({self._adapter.make_key(k): v for k, v in mapping.items()})
        return self
    
    def expire(self, key: Key, seconds: int) -> "RedisStorePipeline":
        self._pipe.expire(self._adapter.make_key(key), seconds)
        return self
    
    def delete(self, *keys: Key) -> "RedisStorePipeline":
        self._pipe.delete(*[self._adapter.make_key(k) for k in keys])
        return self
    
    def __len__(self) -> int:
        return len(self._pipe)
    
    async def execute(self) -> List[Any]:
        return await self._pipe.execute()


class RedisStoreAdapter(IStoreAdapter):
    """
    Redis adapter for the cache layer.
    
    Either builds its own redis.asyncio client from StoreConfig on connect(),
    or wraps a client the caller already owns. A wrapped client is not closed
    by disconnect().
    
    Example:
        config = StoreConfig(host="localhost", port=6379, key_prefix="app:")
        
        async with RedisStoreAdapter(config) as store:
            await store.set("greeting", '"hello"')
    """
    
    def __init__(
        self,
        config: Optional[StoreConfig] = None,
        client: Optional[aioredis.Redis] = None,
    ):
        """
        Initialize Redis adapter.
        
        Args:
            config: Store configuration
            client: Pre-built redis.asyncio client to wrap instead of connecting
        """
        super().__init__(config)
        
        if self.config.store_type != StoreType.REDIS:
            self.config.store_type = StoreType.REDIS
        
        self._client: Optional[aioredis.Redis] = client
        self._owns_client = client is None
        if client is not None:
            self._connected = True
    
    @property
    def client(self) -> aioredis.Redis:
        """Get the underlying Redis client"""
        if self._client is None:
            raise RuntimeError("Redis adapter is not connected")
        return self._client
    
    async def connect(self) -> None:
        """Establish connection to Redis."""
        if self._connected:
            return
        
        try:
            self._client = aioredis.from_url(
                self.config.get_connection_string(),
                decode_responses=True,
                max_connections=self.config.max_connections,
                socket_timeout=self.config.socket_timeout,
                socket_connect_timeout=self.config.socket_connect_timeout,
                retry_on_timeout=self.config.retry_on_timeout,
                **self.config.options,
            )
            
            # Test connection
            await self._client.ping()
            
            self._connected = True
            logger.info(
                f"Connected to Redis at {self.config.host}:{self.config.port} "
                f"(db={self.config.db}, prefix={self.key_prefix!r})"
            )
            
        except Exception as e:
            logger.error(f"Failed to connect to Redis: {e}")
            raise
    
    async def disconnect(self) -> None:
        """Close Redis connection."""
        if not self._connected:
            return
        
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
        
        self._connected = False
        logger.info("Disconnected from Redis")
    
    async def health_check(self) -> bool:
        if self._client is None:
            return False
        
        try:
            return bool(await self._client.ping())
        except Exception as e:
            logger.warning(f"Redis health check failed: {e}")
            return False
    
    async def flush(self) -> None:
        await self.client.flushdb()
    
    async def get(self, key: Key) -> Optional[str]:
        return await self.client.get(self.make_key(key))
    
    async def set(self, key: Key, value: str) -> Any:
        return await self.client.set(self.make_key(key), value)
    
    async def setex(self, key: Key, seconds: int, value: str) -> Any:
        return await self.client.setex(self.make_key(key), seconds, value)
    
    async def mget(self, keys: Sequence[Key]) -> List[Optional[str]]:
        return await self.client.mget([self.make_key(k) for k in keys])
    
    async def mset(self, mapping: Mapping[str, str]) -> Any:
        return await self.client.mset({self.make_key(k): v for k, v in mapping.items()})
    
    async def delete(self, *keys: Key) -> int:
        if not keys:
            return 0
        return await self.client.delete(*[self.make_key(k) for k in keys])
    
    async def expire(self, key: Key, seconds: int) -> bool:
        return await self.client.expire(self.make_key(key), seconds)
    
    async def scan_keys(self, match: str, count: int = 100) -> AsyncIterator[List[str]]:
        # SCAN may return empty pages before the cursor wraps to 0
        cursor = 0
        while True:
            cursor, keys = await self.client.scan(cursor=cursor, match=match, count=count)
            if keys:
                # Clients built without decode_responses return bytes
                yield [k.decode() if isinstance(k, bytes) else k for k in keys]
            if cursor == 0:
                break
    
    async def hget(self, key: Key, field: Key) -> Optional[str]:
        return await self.client.hget(self.make_key(key), str(field))
    
    async def hset(self, key: Key, field: Key, value: str) -> int:
        return await self.client.hset(self.make_key(key), str(field), value)
    
    async def hmget(self, key: Key, fields: Sequence[Key]) -> List[Optional[str]]:
        return await self.client.hmget(self.make_key(key), [str(f) for f in fields])
    
    async def hmset(self, key: Key, mapping: Mapping[str, str]) -> Any:
        # HMSET is deprecated; HSET accepts a mapping since Redis 4.0
        return await self.client.hset(self.make_key(key), mapping=dict(mapping))
    
    async def hdel(self, key: Key, *fields: Key) -> int:
        if not fields:
            return 0
        return await self.client.hdel(self.make_key(key), *[str(f) for f in fields])
    
    async def incrby(self, key: Key, amount: int) -> int:
        return await self.client.incrby(self.make_key(key), amount)
    
    async def incrbyfloat(self, key: Key, amount: float) -> float:
        return await self.client.incrbyfloat(self.make_key(key), amount)
    
    async def hincrby(self, key: Key, field: Key, amount: int) -> int:
        return await self.client.hincrby(self.make_key(key), str(field), amount)
    
    async def hincrbyfloat(self, key: Key, field: Key, amount: float) -> float:
        return await self.client.hincrbyfloat(self.make_key(key), str(field), amount)
    
    def pipeline(self) -> RedisStorePipeline:
        return RedisStorePipeline(self)
