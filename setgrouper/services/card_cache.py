"""
Persistent card cache.

Wraps a CacheStorage with expiration and quota recovery. Every public
operation is best-effort: storage failures are logged and degrade to
"not cached" instead of propagating.

INVARIANTS:
1. At most one entry per key; writing a key replaces entry and timestamp
2. An entry with now - timestamp >= expiration is absent, and is deleted on read
3. Eviction ranks purely by timestamp ascending
"""

import logging
import time
from collections.abc import Callable
from datetime import timedelta
from typing import Any

from setgrouper.config import settings
from setgrouper.db.database import async_session_factory
from setgrouper.db.storage import (
    CacheStorage,
    CacheStorageError,
    SQLCacheStorage,
    StorageQuotaExceededError,
)
from setgrouper.models.cache import CacheStats

logger = logging.getLogger(__name__)

DEFAULT_EXPIRATION = timedelta(hours=96)
DEFAULT_RETENTION_COUNT = 50


class CardCache:
    """
    Timestamped key-value cache for card search responses.

    Constructed once and passed to whatever needs it; tests substitute a
    MemoryCacheStorage and a fake clock.
    """

    def __init__(
        self,
        storage: CacheStorage,
        *,
        expiration: timedelta = DEFAULT_EXPIRATION,
        retention_count: int = DEFAULT_RETENTION_COUNT,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Args:
            storage: Durable substrate holding the entries
            expiration: Age at which an entry is treated as absent
            retention_count: Entries kept when evicting under quota pressure
            clock: Returns the current time in seconds since the epoch
        """
        self.storage = storage
        self.expiration = expiration
        self.retention_count = retention_count
        self._clock = clock

    def is_expired(self, timestamp: float) -> bool:
        return self._clock() - timestamp >= self.expiration.total_seconds()

    async def get(self, key: str) -> Any | None:
        """
        Get the payload stored under key.

        Returns:
            The payload, or None if missing, expired or unreadable
        """
        try:
            entry = await self.storage.get(key)
        except CacheStorageError as e:
            logger.error("Error retrieving cache entry %s: %s", key, e)
            return None

        if entry is None:
            return None

        if self.is_expired(entry.timestamp):
            logger.debug("Cache entry %s expired", key)
            await self.remove(key)
            return None

        return entry.data

    async def set(self, key: str, data: Any, keep_count: int | None = None) -> bool:
        """
        Store data under key with the current timestamp.

        On quota failure, evicts all but the most recent keep_count entries
        (default: retention_count) and retries the write once.

        Returns:
            True if stored, False otherwise
        """
        try:
            await self.storage.put(key, self._clock(), data)
            return True
        except StorageQuotaExceededError as e:
            logger.warning("Cache quota reached while storing %s: %s", key, e)
        except CacheStorageError as e:
            logger.error("Error storing cache entry %s: %s", key, e)
            return False

        await self.clear_oldest_entries(keep_count)

        try:
            await self.storage.put(key, self._clock(), data)
            return True
        except CacheStorageError as e:
            logger.error("Unable to store %s after eviction: %s", key, e)
            return False

    async def remove(self, key: str) -> None:
        try:
            await self.storage.delete(key)
        except CacheStorageError as e:
            logger.error("Error removing cache entry %s: %s", key, e)

    async def clear(self) -> None:
        try:
            await self.storage.clear()
        except CacheStorageError as e:
            logger.error("Error clearing cache: %s", e)

    async def clear_oldest_entries(self, keep_count: int | None = None) -> int:
        """
        Delete all but the keep_count most recently written entries.

        Args:
            keep_count: Entries to keep; defaults to retention_count

        Returns:
            Number of entries removed
        """
        if keep_count is None:
            keep_count = self.retention_count
        keep_count = max(keep_count, 0)

        try:
            ranked = await self.storage.oldest_first()
            if len(ranked) <= keep_count:
                return 0

            to_remove = [key for key, _ in ranked[: len(ranked) - keep_count]]
            removed = await self.storage.delete_many(to_remove)
        except CacheStorageError as e:
            logger.error("Error clearing oldest cache entries: %s", e)
            return 0

        logger.info("Cleared %d old cache entries to free up space", removed)
        return removed

    async def get_all_keys(self) -> list[str]:
        try:
            return await self.storage.keys()
        except CacheStorageError as e:
            logger.error("Error getting cache keys: %s", e)
            return []

    async def get_storage_size(self) -> int:
        """Approximate total size of all entries (key + serialized entry)."""
        stats = await self.stats()
        return stats.approximate_byte_size

    async def stats(self) -> CacheStats:
        try:
            return await self.storage.summary()
        except CacheStorageError as e:
            logger.error("Error getting cache stats: %s", e)
            return CacheStats()


def create_card_cache() -> CardCache:
    """Build the card cache over the configured database."""
    storage = SQLCacheStorage(async_session_factory, quota_bytes=settings.cache_quota_bytes)
    return CardCache(
        storage,
        expiration=timedelta(hours=settings.cache_expiration_hours),
        retention_count=settings.cache_retention_count,
    )
