"""
Database CRUD operations for cached card search responses.

Each function works inside the caller's session; committing is left to
the caller.
"""

from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from setgrouper.models.cache import CacheStats
from setgrouper.models.db import CardCacheEntryDB


async def get_cache_entry(session: AsyncSession, key: str) -> CardCacheEntryDB | None:
    """
    Get a cache entry by key.

    Returns None if no entry exists for this key.
    """
    return await session.get(CardCacheEntryDB, key)


async def upsert_cache_entry(
    session: AsyncSession,
    key: str,
    timestamp: float,
    data: Any,
    size: int,
) -> CardCacheEntryDB:
    """
    Create or replace the entry stored under key.

    Replacing an entry resets its timestamp.
    """
    entry = await get_cache_entry(session, key)
    if entry is None:
        entry = CardCacheEntryDB(key=key, timestamp=timestamp, data=data, size=size)
        session.add(entry)
    else:
        entry.timestamp = timestamp
        entry.data = data
        entry.size = size

    await session.flush()
    return entry


async def delete_cache_entry(session: AsyncSession, key: str) -> bool:
    """
    Delete a single entry.

    Returns True if deleted, False if not found.
    """
    result = await session.execute(delete(CardCacheEntryDB).where(CardCacheEntryDB.key == key))
    return bool(result.rowcount)


async def delete_cache_entries(session: AsyncSession, keys: list[str]) -> int:
    """Delete all entries in keys. Returns number of rows deleted."""
    if not keys:
        return 0
    result = await session.execute(
        delete(CardCacheEntryDB).where(CardCacheEntryDB.key.in_(keys))
    )
    return result.rowcount or 0


async def clear_cache_entries(session: AsyncSession) -> int:
    """Delete every entry. Returns number of rows deleted."""
    result = await session.execute(delete(CardCacheEntryDB))
    return result.rowcount or 0


async def get_cache_keys(session: AsyncSession) -> list[str]:
    """Get all cache keys in key order."""
    result = await session.execute(select(CardCacheEntryDB.key).order_by(CardCacheEntryDB.key))
    return list(result.scalars().all())


async def get_entries_oldest_first(session: AsyncSession) -> list[tuple[str, float]]:
    """Get (key, timestamp) pairs ordered by timestamp ascending."""
    result = await session.execute(
        select(CardCacheEntryDB.key, CardCacheEntryDB.timestamp).order_by(
            CardCacheEntryDB.timestamp.asc(), CardCacheEntryDB.key.asc()
        )
    )
    return [(key, timestamp) for key, timestamp in result.all()]


async def get_total_size(session: AsyncSession, exclude_key: str | None = None) -> int:
    """
    Sum of approximate entry sizes.

    Args:
        session: Database session
        exclude_key: Leave this key out (the entry about to be replaced)
    """
    query = select(func.coalesce(func.sum(CardCacheEntryDB.size), 0))
    if exclude_key is not None:
        query = query.where(CardCacheEntryDB.key != exclude_key)
    result = await session.execute(query)
    return int(result.scalar_one())


async def get_cache_summary(session: AsyncSession) -> CacheStats:
    """Count, total size and oldest timestamp of all entries."""
    result = await session.execute(
        select(
            func.count(CardCacheEntryDB.key),
            func.coalesce(func.sum(CardCacheEntryDB.size), 0),
            func.min(CardCacheEntryDB.timestamp),
        )
    )
    count, size, oldest = result.one()
    return CacheStats(
        count=int(count),
        approximate_byte_size=int(size),
        oldest_timestamp=float(oldest) if oldest is not None else None,
    )
