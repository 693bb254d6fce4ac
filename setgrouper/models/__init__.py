from setgrouper.models.cache import CacheStats, StoredEntry
from setgrouper.models.card import (
    LOW_PRICE_CEILING,
    MID_PRICE_CEILING,
    CardRecord,
    PriceCategory,
    SetGroup,
    categorize_price,
)
from setgrouper.models.selection import ALL_PRICE_CATEGORIES, SelectionState

__all__ = [
    "ALL_PRICE_CATEGORIES",
    "CacheStats",
    "CardRecord",
    "LOW_PRICE_CEILING",
    "MID_PRICE_CEILING",
    "PriceCategory",
    "SelectionState",
    "SetGroup",
    "StoredEntry",
    "categorize_price",
]
