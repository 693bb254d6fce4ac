"""
Card print and set group models.

INVARIANTS:
- price_category is always derived from price, never stored
- A SetGroup holds at most one CardRecord per card name
"""

from dataclasses import dataclass, field
from enum import Enum

# Upper bounds (exclusive) of the LOW and MID price buckets, in USD
LOW_PRICE_CEILING = 1.0
MID_PRICE_CEILING = 5.0


class PriceCategory(str, Enum):
    """Price bucket of a single print."""

    LOW = "low"
    MID = "mid"
    HIGH = "high"

    @property
    def symbol(self) -> str:
        """Dollar-sign shorthand ($, $$, $$$)."""
        return {
            PriceCategory.LOW: "$",
            PriceCategory.MID: "$$",
            PriceCategory.HIGH: "$$$",
        }[self]


def categorize_price(price: float) -> PriceCategory:
    """Bucket a unit price: LOW < 1.00 <= MID < 5.00 <= HIGH."""
    if price < LOW_PRICE_CEILING:
        return PriceCategory.LOW
    if price < MID_PRICE_CEILING:
        return PriceCategory.MID
    return PriceCategory.HIGH


@dataclass(frozen=True, slots=True)
class CardRecord:
    """
    One print of a card in one set.

    Attributes:
        name: Canonical card name
        colors: Color identity letters (W, U, B, R, G, C) in source order
        image_url: Image URL, empty if the service supplied none
        price: USD market price, 0 when unavailable
    """

    name: str
    colors: tuple[str, ...] = ()
    image_url: str = ""
    price: float = 0.0

    @property
    def price_category(self) -> PriceCategory:
        return categorize_price(self.price)


@dataclass
class SetGroup:
    """Distinct cards sharing one named release."""

    set_name: str
    cards: list[CardRecord] = field(default_factory=list)

    def has_card(self, name: str) -> bool:
        return any(card.name == name for card in self.cards)

    def card_names(self) -> list[str]:
        return [card.name for card in self.cards]

    def __len__(self) -> int:
        return len(self.cards)
