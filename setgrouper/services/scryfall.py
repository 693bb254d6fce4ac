"""Search Scryfall for every print of a card.

Uses the card search endpoint with an exact-name query scoped to unique
prints. Respects Scryfall rate limits (10 requests/second) when following
result pages.
"""

import asyncio
from typing import Any

import httpx

from setgrouper.config import settings

# Rate limit: max 10 requests per second, so delay 100ms between requests
RATE_LIMIT_DELAY = 0.1


class FetchError(Exception):
    """Raised when searching for a card fails."""

    pass


def create_client() -> httpx.AsyncClient:
    """Create the shared HTTP client used for Scryfall requests."""
    return httpx.AsyncClient(
        headers={"User-Agent": settings.user_agent, "Accept": "application/json"},
        follow_redirects=True,
        timeout=settings.request_timeout,
    )


def is_list_response(payload: Any) -> bool:
    """True if payload has the search result shape: object == "list" with a data list."""
    return (
        isinstance(payload, dict)
        and payload.get("object") == "list"
        and isinstance(payload.get("data"), list)
    )


def build_search_params(card_name: str) -> dict[str, str]:
    """Query parameters for an exact-name search over unique prints."""
    return {"q": f'!"{card_name}"', "unique": "prints"}


async def _get_page(
    client: httpx.AsyncClient, url: str, params: dict[str, str] | None, card_name: str
) -> dict[str, Any]:
    try:
        response = await client.get(url, params=params)
        response.raise_for_status()
        payload = response.json()
    except httpx.HTTPStatusError as e:
        raise FetchError(
            f"Failed to search prints for {card_name}: HTTP {e.response.status_code}"
        ) from e
    except httpx.RequestError as e:
        raise FetchError(f"Failed to search prints for {card_name}: {e}") from e
    except ValueError as e:
        raise FetchError(f"Invalid JSON in response for {card_name}: {e}") from e

    if not is_list_response(payload):
        kind = payload.get("object") if isinstance(payload, dict) else type(payload).__name__
        raise FetchError(f"Unexpected response for {card_name}: object={kind}")

    return payload


async def search_card_prints(
    client: httpx.AsyncClient,
    card_name: str,
    api_url: str | None = None,
) -> dict[str, Any]:
    """Fetch all unique prints of a card from Scryfall.

    Follows pagination and merges every page into one list response, so the
    result is cached and normalized the same way as a single page.

    Args:
        client: HTTP client
        card_name: Exact card name
        api_url: Scryfall base URL (defaults to settings)

    Returns:
        Search response with object == "list" and all prints in data

    Raises:
        FetchError: On transport errors, non-2xx status, invalid JSON or
            a response that is not a list
    """
    base_url = (api_url or settings.scryfall_api_url).rstrip("/")

    payload = await _get_page(
        client, f"{base_url}/cards/search", build_search_params(card_name), card_name
    )
    prints: list[dict[str, Any]] = list(payload["data"])

    while payload.get("has_more") and payload.get("next_page"):
        await asyncio.sleep(RATE_LIMIT_DELAY)
        # Next page URL includes params
        payload = await _get_page(client, str(payload["next_page"]), None, card_name)
        prints.extend(payload["data"])

    return {
        "object": "list",
        "total_cards": len(prints),
        "has_more": False,
        "data": prints,
    }
