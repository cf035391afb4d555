"""
Pattern Eraser
Deletes every key matching a glob without blocking the store

Keys are found with SCAN and removed in pipelines of `batch_size` DEL
commands. Pipelines are sent as soon as they fill up and awaited together at
the end.
"""

import asyncio
from typing import Optional

from loguru import logger

from cacheaside.cache.base import CacheBase


class PatternEraserMixin(CacheBase):
    """delete_pattern."""
    
    pattern_batch_size = 100
    
    async def delete_pattern(self, pattern: str, batch_size: Optional[int] = None) -> None:
        """
        Delete keys whose unprefixed name matches `pattern`.
        
        Args:
            pattern: Glob, e.g. "user:*" (the store key prefix is added)
            batch_size: SCAN page size and number of deletes per pipeline
                (pattern_batch_size, 100 by default)
        """
        if batch_size is None:
            batch_size = self.pattern_batch_size
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        
        prefix = self.prefix
        length = len(prefix)
        jobs = []
        count = 0
        
        pipeline = self.store.pipeline()
        try:
            async for keys in self.store.scan_keys(f"{prefix}{pattern}", count=batch_size):
                for key in keys:
                    # Scanned keys are raw; the pipeline adds the prefix back
                    pipeline.delete(key[length:])
                    count += 1
                    if len(pipeline) >= batch_size:
                        jobs.append(asyncio.ensure_future(pipeline.execute()))
                        pipeline = self.store.pipeline()
        except Exception:
            # Batches already sent still have to be awaited
            await asyncio.gather(*jobs, return_exceptions=True)
            raise
        
        if len(pipeline):
            jobs.append(asyncio.ensure_future(pipeline.execute()))
        await asyncio.gather(*jobs)
        
        logger.debug(f"delete_pattern {pattern!r}: {count} keys in {len(jobs)} batches")
