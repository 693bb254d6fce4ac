"""
Card cache API endpoints.

Diagnostics and maintenance for the persistent card cache.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from setgrouper.api.dependencies import get_card_cache
from setgrouper.services.card_cache import CardCache

router = APIRouter(prefix="/cache", tags=["cache"])


class CacheStatsResponse(BaseModel):
    """Response model for cache statistics."""

    count: int = 0
    approximate_byte_size: int = Field(
        default=0,
        description="Sum of key and serialized entry lengths",
    )
    oldest_timestamp: float | None = Field(
        default=None,
        description="Write time of the oldest entry, seconds since the epoch",
    )


class CacheKeysResponse(BaseModel):
    keys: list[str] = Field(default_factory=list)


class EvictResponse(BaseModel):
    """Response model for eviction."""

    removed: int
    kept: int


class ClearResponse(BaseModel):
    cleared: bool = True


class RemoveResponse(BaseModel):
    key: str
    removed: bool = True


@router.get("/stats", response_model=CacheStatsResponse)
async def get_cache_stats(
    cache: Annotated[CardCache, Depends(get_card_cache)],
) -> CacheStatsResponse:
    """Get entry count, approximate size and oldest entry time."""
    stats = await cache.stats()
    return CacheStatsResponse(
        count=stats.count,
        approximate_byte_size=stats.approximate_byte_size,
        oldest_timestamp=stats.oldest_timestamp,
    )


@router.get("/keys", response_model=CacheKeysResponse)
async def get_cache_keys(
    cache: Annotated[CardCache, Depends(get_card_cache)],
) -> CacheKeysResponse:
    return CacheKeysResponse(keys=await cache.get_all_keys())


@router.post("/evict", response_model=EvictResponse)
async def evict_oldest_entries(
    cache: Annotated[CardCache, Depends(get_card_cache)],
    keep: Annotated[int | None, Query(ge=0, description="Entries to keep")] = None,
) -> EvictResponse:
    """
    Delete all but the most recently written entries.

    Keeps the configured retention count unless keep is given.
    """
    removed = await cache.clear_oldest_entries(keep)
    stats = await cache.stats()
    return EvictResponse(removed=removed, kept=stats.count)


@router.delete("", response_model=ClearResponse)
async def clear_cache(
    cache: Annotated[CardCache, Depends(get_card_cache)],
) -> ClearResponse:
    """Delete every cached entry."""
    await cache.clear()
    return ClearResponse()


@router.delete("/{key:path}", response_model=RemoveResponse)
async def remove_cache_entry(
    key: str,
    cache: Annotated[CardCache, Depends(get_card_cache)],
) -> RemoveResponse:
    """Delete one cached entry. Card names may contain "/" (split cards)."""
    await cache.remove(key)
    return RemoveResponse(key=key)
