from setgrouper.api.cache import router as cache_router
from setgrouper.api.cards import router as cards_router
from setgrouper.api.health import router as health_router

__all__ = [
    "cache_router",
    "cards_router",
    "health_router",
]
