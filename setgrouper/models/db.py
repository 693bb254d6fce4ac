"""
SQLAlchemy ORM models for persistent storage.
"""

from typing import Any

from sqlalchemy import JSON, Float, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class CardCacheEntryDB(Base):
    """
    One cached Scryfall search response.

    Keyed by cache key; timestamp is indexed for oldest-first eviction.
    """

    __tablename__ = "card_cache_entries"

    key: Mapped[str] = mapped_column(String(512), primary_key=True)
    timestamp: Mapped[float] = mapped_column(Float, index=True)
    data: Mapped[Any] = mapped_column(JSON)
    # Approximate serialized length of key + entry, used for quota accounting
    size: Mapped[int] = mapped_column(Integer, default=0)

    def __repr__(self) -> str:
        return f"<CardCacheEntryDB(key={self.key}, timestamp={self.timestamp})>"
