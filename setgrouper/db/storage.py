"""
Storage substrates for the card cache.

A CacheStorage is a durable key-value store of timestamped entries. It
raises CacheStorageError on failure and leaves recovery (expiration,
eviction, retries) to CardCache.

Implementations:
- SQLCacheStorage: async SQLAlchemy, one session per operation
- MemoryCacheStorage: dict-backed, for tests and throwaway runs
"""

import json
from abc import ABC, abstractmethod
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from setgrouper.db.operations import (
    clear_cache_entries,
    delete_cache_entries,
    delete_cache_entry,
    get_cache_entry,
    get_cache_keys,
    get_cache_summary,
    get_entries_oldest_first,
    get_total_size,
    upsert_cache_entry,
)
from setgrouper.models.cache import CacheStats, StoredEntry


class CacheStorageError(Exception):
    """Raised when the storage substrate cannot complete an operation."""

    pass


class StorageQuotaExceededError(CacheStorageError):
    """Raised when a write would take the store over its byte quota."""

    def __init__(self, required: int, quota: int) -> None:
        self.required = required
        self.quota = quota
        super().__init__(f"Storage quota exceeded: {required} bytes needed, quota is {quota}")


def entry_size(key: str, timestamp: float, data: Any) -> int:
    """
    Approximate stored size of an entry: key length plus serialized entry length.

    Raises:
        CacheStorageError: If data is not JSON serializable
    """
    try:
        serialized = json.dumps({"timestamp": timestamp, "data": data})
    except (TypeError, ValueError) as e:
        raise CacheStorageError(f"Cannot serialize entry for {key}: {e}") from e
    return len(key) + len(serialized)


class CacheStorage(ABC):
    """Contract for the durable store behind CardCache."""

    @abstractmethod
    async def get(self, key: str) -> StoredEntry | None:
        """Return the entry for key, or None if there is none."""

    @abstractmethod
    async def put(self, key: str, timestamp: float, data: Any) -> None:
        """
        Store data under key, replacing any prior entry.

        Raises:
            StorageQuotaExceededError: If the write does not fit the quota
            CacheStorageError: On any other storage failure
        """

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove key. No-op if absent."""

    @abstractmethod
    async def delete_many(self, keys: list[str]) -> int:
        """Remove all keys. Returns the number removed."""

    @abstractmethod
    async def clear(self) -> None:
        """Remove every entry."""

    @abstractmethod
    async def keys(self) -> list[str]:
        """All stored keys."""

    @abstractmethod
    async def oldest_first(self) -> list[tuple[str, float]]:
        """(key, timestamp) pairs ordered by timestamp ascending."""

    @abstractmethod
    async def summary(self) -> CacheStats:
        """Entry count, total approximate size and oldest timestamp."""


class SQLCacheStorage(CacheStorage):
    """
    Cache storage backed by the card_cache_entries table.

    Every operation runs in its own session and transaction.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        quota_bytes: int | None = None,
    ) -> None:
        """
        Args:
            session_factory: Async session factory bound to the cache database
            quota_bytes: Maximum total entry size; None means unlimited
        """
        self._session_factory = session_factory
        self._quota_bytes = quota_bytes

    async def get(self, key: str) -> StoredEntry | None:
        try:
            async with self._session_factory() as session:
                row = await get_cache_entry(session, key)
                if row is None:
                    return None
                return StoredEntry(
                    key=row.key, timestamp=row.timestamp, data=row.data, size=row.size
                )
        except (SQLAlchemyError, ValueError) as e:
            # ValueError covers undecodable JSON in the data column
            raise CacheStorageError(f"Failed to read {key}: {e}") from e

    async def put(self, key: str, timestamp: float, data: Any) -> None:
        size = entry_size(key, timestamp, data)
        try:
            async with self._session_factory() as session:
                if self._quota_bytes is not None:
                    used = await get_total_size(session, exclude_key=key)
                    if used + size > self._quota_bytes:
                        raise StorageQuotaExceededError(used + size, self._quota_bytes)
                await upsert_cache_entry(session, key, timestamp, data, size)
                await session.commit()
        except SQLAlchemyError as e:
            raise CacheStorageError(f"Failed to write {key}: {e}") from e

    async def delete(self, key: str) -> None:
        try:
            async with self._session_factory() as session:
                await delete_cache_entry(session, key)
                await session.commit()
        except SQLAlchemyError as e:
            raise CacheStorageError(f"Failed to delete {key}: {e}") from e

    async def delete_many(self, keys: list[str]) -> int:
        try:
            async with self._session_factory() as session:
                removed = await delete_cache_entries(session, keys)
                await session.commit()
                return removed
        except SQLAlchemyError as e:
            raise CacheStorageError(f"Failed to delete {len(keys)} entries: {e}") from e

    async def clear(self) -> None:
        try:
            async with self._session_factory() as session:
                await clear_cache_entries(session)
                await session.commit()
        except SQLAlchemyError as e:
            raise CacheStorageError(f"Failed to clear cache: {e}") from e

    async def keys(self) -> list[str]:
        try:
            async with self._session_factory() as session:
                return await get_cache_keys(session)
        except SQLAlchemyError as e:
            raise CacheStorageError(f"Failed to list keys: {e}") from e

    async def oldest_first(self) -> list[tuple[str, float]]:
        try:
            async with self._session_factory() as session:
                return await get_entries_oldest_first(session)
        except SQLAlchemyError as e:
            raise CacheStorageError(f"Failed to rank entries: {e}") from e

    async def summary(self) -> CacheStats:
        try:
            async with self._session_factory() as session:
                return await get_cache_summary(session)
        except SQLAlchemyError as e:
            raise CacheStorageError(f"Failed to summarize cache: {e}") from e


class MemoryCacheStorage(CacheStorage):
    """In-process cache storage with the same quota semantics as SQLCacheStorage."""

    def __init__(self, quota_bytes: int | None = None) -> None:
        self._entries: dict[str, StoredEntry] = {}
        self.quota_bytes = quota_bytes

    async def get(self, key: str) -> StoredEntry | None:
        return self._entries.get(key)

    async def put(self, key: str, timestamp: float, data: Any) -> None:
        size = entry_size(key, timestamp, data)
        if self.quota_bytes is not None:
            used = sum(entry.size for k, entry in self._entries.items() if k != key)
            if used + size > self.quota_bytes:
                raise StorageQuotaExceededError(used + size, self.quota_bytes)
        # Re-inserting moves the key to the end, matching a fresh write
        self._entries.pop(key, None)
        self._entries[key] = StoredEntry(key=key, timestamp=timestamp, data=data, size=size)

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    async def delete_many(self, keys: list[str]) -> int:
        removed = 0
        for key in keys:
            if self._entries.pop(key, None) is not None:
                removed += 1
        return removed

    async def clear(self) -> None:
        self._entries.clear()

    async def keys(self) -> list[str]:
        return sorted(self._entries)

    async def oldest_first(self) -> list[tuple[str, float]]:
        ranked = sorted(self._entries.values(), key=lambda entry: (entry.timestamp, entry.key))
        return [(entry.key, entry.timestamp) for entry in ranked]

    async def summary(self) -> CacheStats:
        if not self._entries:
            return CacheStats()
        return CacheStats(
            count=len(self._entries),
            approximate_byte_size=sum(entry.size for entry in self._entries.values()),
            oldest_timestamp=min(entry.timestamp for entry in self._entries.values()),
        )
