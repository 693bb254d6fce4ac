"""
SetGrouper services.

Card cache, card resolution pipeline, aggregation, selection view and export.
"""

from setgrouper.services.aggregator import (
    SetGroups,
    add_card,
    group_records,
    remove_card_from_groups,
    sort_groups,
)
from setgrouper.services.card_cache import CardCache, create_card_cache
from setgrouper.services.card_sets import (
    MalformedResponseError,
    cache_key,
    fetch_card_sets,
    normalize_print,
    normalize_search_response,
    parse_price,
    process_search_response,
)
from setgrouper.services.export import groups_to_csv, groups_to_rows
from setgrouper.services.scryfall import (
    FetchError,
    create_client,
    is_list_response,
    search_card_prints,
)
from setgrouper.services.selection import CardView, GroupView, build_view, view_to_groups

__all__ = [
    # Cache
    "CardCache",
    "create_card_cache",
    # Resolution pipeline
    "FetchError",
    "MalformedResponseError",
    "cache_key",
    "create_client",
    "fetch_card_sets",
    "is_list_response",
    "normalize_print",
    "normalize_search_response",
    "parse_price",
    "process_search_response",
    "search_card_prints",
    # Aggregation
    "SetGroups",
    "add_card",
    "group_records",
    "remove_card_from_groups",
    "sort_groups",
    # Selection view
    "CardView",
    "GroupView",
    "build_view",
    "view_to_groups",
    # Export
    "groups_to_csv",
    "groups_to_rows",
]
