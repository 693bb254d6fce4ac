from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "SetGrouper"
    debug: bool = False

    # Durable store for the card cache
    database_url: str = "sqlite+aiosqlite:///./card_cache.db"

    scryfall_api_url: str = "https://api.scryfall.com"
    user_agent: str = "SetGrouper/1.0"
    request_timeout: float = 30.0

    cache_expiration_hours: int = 96
    cache_retention_count: int = 50
    # None disables the quota check
    cache_quota_bytes: int | None = 50 * 1024 * 1024

    # When True, prints without a USD market price are not surfaced at all.
    # When False they are kept at price 0 (LOW category).
    exclude_zero_price: bool = True


settings = Settings()


# =============================================================================
# CACHE
# =============================================================================

# Every cached search response is stored under this prefix + the card name
CACHE_KEY_PREFIX = "card_"
