"""
Card resolution pipeline.

Turns canonical card names into price-categorised set groups:
cache lookup, Scryfall search on miss, normalization, cache write.

Names are resolved one at a time. A failure for one name is logged and that
name contributes nothing; it never aborts the batch.
"""

import logging
import math
from collections.abc import Callable, Iterable
from typing import Any

import httpx

from setgrouper.config import CACHE_KEY_PREFIX, settings
from setgrouper.models.card import CardRecord, SetGroup
from setgrouper.services.aggregator import SetGroups, add_card, sort_groups
from setgrouper.services.card_cache import CardCache
from setgrouper.services.scryfall import FetchError, is_list_response, search_card_prints

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]


def cache_key(card_name: str) -> str:
    return f"{CACHE_KEY_PREFIX}{card_name}"


def parse_price(prices: Any) -> float:
    """USD price from a Scryfall prices object; 0 when absent or unparsable."""
    if not isinstance(prices, dict):
        return 0.0
    try:
        price = float(prices.get("usd") or 0)
    except (TypeError, ValueError):
        return 0.0
    # Guard against NaN, infinity and negative values
    return price if math.isfinite(price) and price > 0 else 0.0


def _image_url(entry: dict[str, Any]) -> str:
    image_uris = entry.get("image_uris")
    if isinstance(image_uris, dict) and image_uris.get("normal"):
        return str(image_uris["normal"])

    # Double-faced cards carry images per face
    faces = entry.get("card_faces")
    if isinstance(faces, list) and faces and isinstance(faces[0], dict):
        face_uris = faces[0].get("image_uris")
        if isinstance(face_uris, dict) and face_uris.get("normal"):
            return str(face_uris["normal"])

    return ""


def normalize_print(
    entry: dict[str, Any], exclude_zero_price: bool = True
) -> tuple[str, CardRecord] | None:
    """
    Convert one Scryfall print into (set name, CardRecord).

    Returns:
        None if the print should not be surfaced: promo, oversized,
        missing name/set, or (when exclude_zero_price) no market price
    """
    if entry.get("promo") or entry.get("oversized"):
        return None

    name = entry.get("name")
    set_name = entry.get("set_name")
    if not name or not set_name:
        return None

    price = parse_price(entry.get("prices"))
    if exclude_zero_price and price == 0:
        return None

    colors = entry.get("color_identity") or entry.get("colors") or []

    card = CardRecord(
        name=str(name),
        colors=tuple(str(color) for color in colors),
        image_url=_image_url(entry),
        price=price,
    )
    return str(set_name), card


class MalformedResponseError(Exception):
    """Raised when a search response has a print that cannot be normalized."""

    pass


def normalize_search_response(
    payload: dict[str, Any], exclude_zero_price: bool = True
) -> list[tuple[str, CardRecord]]:
    """
    Normalize every print of a search response.

    All or nothing: one malformed print fails the whole response.

    Raises:
        MalformedResponseError: If a print has values of the wrong type
    """
    records: list[tuple[str, CardRecord]] = []
    for entry in payload.get("data", []):
        if not isinstance(entry, dict):
            continue
        try:
            normalized = normalize_print(entry, exclude_zero_price)
        except (TypeError, ValueError, AttributeError) as e:
            raise MalformedResponseError(f"Malformed print {entry.get('name')!r}: {e}") from e
        if normalized is not None:
            records.append(normalized)
    return records


def process_search_response(
    payload: dict[str, Any], groups: SetGroups, exclude_zero_price: bool = True
) -> int:
    """
    Fold a search response into groups.

    Shared by the cache-hit and fresh-fetch paths. Groups are only touched
    once the whole response has been normalized.

    Returns:
        Number of prints added

    Raises:
        MalformedResponseError: If a print cannot be normalized
    """
    records = normalize_search_response(payload, exclude_zero_price)
    added = 0
    for set_name, card in records:
        if add_card(groups, set_name, card):
            added += 1
    return added


async def _resolve_name(
    card_name: str,
    groups: SetGroups,
    cache: CardCache,
    client: httpx.AsyncClient,
    exclude_zero_price: bool,
) -> None:
    key = cache_key(card_name)

    cached = await cache.get(key)
    if cached is not None and is_list_response(cached):
        try:
            process_search_response(cached, groups, exclude_zero_price)
            logger.debug("Using cached data for %s", card_name)
            return
        except MalformedResponseError as e:
            logger.warning("Discarding corrupt cache entry for %s: %s", card_name, e)
            await cache.remove(key)

    logger.debug("Fetching fresh data for %s", card_name)
    try:
        payload = await search_card_prints(client, card_name)
        # Process first; the result stands whether or not caching succeeds
        process_search_response(payload, groups, exclude_zero_price)
    except (FetchError, MalformedResponseError) as e:
        logger.error("Error fetching data for %s: %s", card_name, e)
        return

    if not await cache.set(key, payload):
        logger.warning("Unable to cache data for %s, but card data is still processed", card_name)


async def fetch_card_sets(
    card_names: Iterable[str],
    cache: CardCache,
    client: httpx.AsyncClient,
    on_progress: ProgressCallback | None = None,
    exclude_zero_price: bool | None = None,
) -> list[SetGroup]:
    """
    Resolve card names into set groups.

    Args:
        card_names: Canonical names, in order (duplicates allowed)
        cache: Card cache consulted before each search
        client: HTTP client for Scryfall
        on_progress: Called once per name with the number completed so far
        exclude_zero_price: Drop prints without a market price
            (defaults to settings.exclude_zero_price)

    Returns:
        Set groups, largest first
    """
    if exclude_zero_price is None:
        exclude_zero_price = settings.exclude_zero_price

    groups: SetGroups = {}
    completed = 0

    for card_name in card_names:
        try:
            await _resolve_name(card_name, groups, cache, client, exclude_zero_price)
        except Exception as e:
            logger.error("Error resolving %s: %s", card_name, e)

        completed += 1
        if on_progress is not None:
            on_progress(completed)

    logger.info("Resolved %d card names into %d sets", completed, len(groups))
    return sort_groups(groups.values())
