"""
Reservation
Counter increments that are rolled back when the guarded work fails

Typical use is a quota: reserve N units, run the work, and give the units
back if the work raises.

```python
async def book(current):
    if current > capacity:
        raise SoldOut()
    return await create_booking()

await cache.acquire("event:42:seats", 2, book)
```

The increment and the compensating decrement are two separate commands. A
crash between them, or a failing decrement, leaves the counter too high.
"""

from typing import Any, Awaitable, Callable, Union

from loguru import logger

from cacheaside.adapters.base import Key
from cacheaside.cache.base import CacheBase, call_maybe_async

Number = Union[int, float]


class ReservationMixin(CacheBase):
    """acquire / hash_acquire."""
    
    async def acquire(
        self,
        key: Key,
        amount: Number,
        fn: Callable[[Number], Any],
        use_float: bool = False,
    ) -> Any:
        """
        Increment `key` by `amount`, then run fn(current).
        
        The counter is created on first use. If fn raises, the key is
        decremented by `amount` again and the error is re-raised.
        
        Args:
            key: Counter key
            amount: Units to reserve
            fn: Work guarded by the reservation, receives the counter after the increment
            use_float: Use INCRBYFLOAT and pass a float to fn
            
        Returns:
            Whatever fn returns
        """
        incr = self.store.incrbyfloat if use_float else self.store.incrby
        current = await incr(key, amount)
        return await self._run_reserved(
            fn,
            float(current) if use_float else int(current),
            lambda: incr(key, -amount),
            str(key),
        )
    
    async def hash_acquire(
        self,
        key: Key,
        field: Key,
        amount: Number,
        fn: Callable[[Number], Any],
        use_float: bool = False,
    ) -> Any:
        """Same as acquire(), on one field of hash `key`."""
        incr = self.store.hincrbyfloat if use_float else self.store.hincrby
        current = await incr(key, field, amount)
        return await self._run_reserved(
            fn,
            float(current) if use_float else int(current),
            lambda: incr(key, field, -amount),
            f"{key}[{field}]",
        )
    
    async def _run_reserved(
        self,
        fn: Callable[[Number], Any],
        current: Number,
        release: Callable[[], Awaitable[Any]],
        label: str,
    ) -> Any:
        self._stats["acquires"] += 1
        try:
            return await call_maybe_async(fn, current)
        except Exception:
            await self._release(release, label)
            raise
    
    async def _release(self, release: Callable[[], Awaitable[Any]], label: str) -> None:
        try:
            await release()
            self._stats["releases"] += 1
            logger.debug(f"Released reservation on {label}")
        except Exception as e:
            # The counter stays over-incremented; the caller only sees fn's error
            self._stats["release_failures"] += 1
            logger.warning(f"Failed to release reservation on {label}: {e}")
