from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from setgrouper.api import cache_router, cards_router, health_router
from setgrouper.config import settings
from setgrouper.db.database import dispose_db, init_db
from setgrouper.services.card_cache import create_card_cache
from setgrouper.services.scryfall import create_client


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    await init_db()
    app.state.card_cache = create_card_cache()
    app.state.http_client = create_client()
    try:
        yield
    finally:
        await app.state.http_client.aclose()
        await dispose_db()


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("setgrouper"),
    lifespan=lifespan,
)

app.include_router(cards_router)
app.include_router(cache_router)
app.include_router(health_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Tighten in production
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)
