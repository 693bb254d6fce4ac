"""
Shared FastAPI dependencies.

The card cache and HTTP client are created once in the application lifespan
and stored on app.state; tests override these dependencies.
"""

import httpx
from fastapi import Request

from setgrouper.services.card_cache import CardCache


def get_card_cache(request: Request) -> CardCache:
    """Dependency that provides the application's card cache."""
    cache: CardCache = request.app.state.card_cache
    return cache


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Dependency that provides the shared Scryfall HTTP client."""
    client: httpx.AsyncClient = request.app.state.http_client
    return client
