from setgrouper.db.database import dispose_db, get_session, init_db
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
from setgrouper.db.storage import (
    CacheStorage,
    CacheStorageError,
    MemoryCacheStorage,
    SQLCacheStorage,
    StorageQuotaExceededError,
)

__all__ = [
    "CacheStorage",
    "CacheStorageError",
    "MemoryCacheStorage",
    "SQLCacheStorage",
    "StorageQuotaExceededError",
    "clear_cache_entries",
    "delete_cache_entries",
    "delete_cache_entry",
    "dispose_db",
    "get_cache_entry",
    "get_cache_keys",
    "get_cache_summary",
    "get_entries_oldest_first",
    "get_session",
    "get_total_size",
    "init_db",
    "upsert_cache_entry",
]
