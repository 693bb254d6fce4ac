"""
User selection state for the grouped results view.

Selection is an immutable value: every change returns a new state and the
underlying Result Collection is never modified.
"""

from collections.abc import Iterable
from dataclasses import dataclass, replace

from setgrouper.models.card import PriceCategory

ALL_PRICE_CATEGORIES = frozenset(PriceCategory)


@dataclass(frozen=True, slots=True)
class SelectionState:
    """
    Deselected card names and enabled price categories.

    Attributes:
        deselected: Card names marked inactive in every group
        enabled_categories: Price categories currently shown
    """

    deselected: frozenset[str] = frozenset()
    enabled_categories: frozenset[PriceCategory] = ALL_PRICE_CATEGORIES

    def is_selected(self, card_name: str) -> bool:
        return card_name not in self.deselected

    def is_enabled(self, category: PriceCategory) -> bool:
        return category in self.enabled_categories

    def deselect(self, card_name: str) -> "SelectionState":
        """Deselect a card name across all groups."""
        return replace(self, deselected=self.deselected | {card_name})

    def select(self, card_name: str) -> "SelectionState":
        """Re-select a previously deselected card name."""
        return replace(self, deselected=self.deselected - {card_name})

    def toggle(self, card_name: str) -> "SelectionState":
        if card_name in self.deselected:
            return self.select(card_name)
        return self.deselect(card_name)

    def with_categories(self, categories: Iterable[PriceCategory]) -> "SelectionState":
        return replace(self, enabled_categories=frozenset(categories))

    def toggle_category(self, category: PriceCategory) -> "SelectionState":
        return replace(self, enabled_categories=self.enabled_categories ^ {category})
