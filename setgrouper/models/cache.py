from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class StoredEntry:
    """
    A cached payload as held by the storage substrate.

    Attributes:
        key: Cache key (prefix + requested card name)
        timestamp: Write time, seconds since the epoch
        data: Opaque service response
        size: Approximate serialized size of key + entry
    """

    key: str
    timestamp: float
    data: Any
    size: int = 0


@dataclass(frozen=True, slots=True)
class CacheStats:
    """Diagnostic summary of the cache contents."""

    count: int = 0
    approximate_byte_size: int = 0
    oldest_timestamp: float | None = None
