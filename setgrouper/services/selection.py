"""
Displayed view of the grouped results under a SelectionState.

Pure functions: the Result Collection is never modified.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from setgrouper.models.card import CardRecord, SetGroup
from setgrouper.models.selection import SelectionState


@dataclass(frozen=True, slots=True)
class CardView:
    """A card as displayed: deselected cards stay visible but inactive."""

    card: CardRecord
    selected: bool


@dataclass(frozen=True, slots=True)
class GroupView:
    """A set group filtered by enabled price categories."""

    set_name: str
    cards: tuple[CardView, ...]

    @property
    def selected_count(self) -> int:
        return sum(1 for view in self.cards if view.selected)

    @property
    def total_count(self) -> int:
        return len(self.cards)


def build_view(groups: Iterable[SetGroup], state: SelectionState) -> list[GroupView]:
    """
    Compute the displayed groups.

    - Cards whose price category is disabled are left out
    - Groups with no cards left are hidden; deselection alone never hides a group
    - Cards keep the group's stored order
    - Groups are ordered by selected card count, largest first, ties stable

    Args:
        groups: Result Collection
        state: Current selection

    Returns:
        Visible groups in display order
    """
    views: list[GroupView] = []

    for group in groups:
        cards = tuple(
            CardView(card=card, selected=state.is_selected(card.name))
            for card in group.cards
            if state.is_enabled(card.price_category)
        )
        if not cards:
            continue
        views.append(GroupView(set_name=group.set_name, cards=cards))

    return sorted(views, key=lambda view: view.selected_count, reverse=True)


def view_to_groups(views: Iterable[GroupView]) -> list[SetGroup]:
    """Selected cards of each visible group, for export. Groups left empty are dropped."""
    groups: list[SetGroup] = []
    for view in views:
        cards = [card_view.card for card_view in view.cards if card_view.selected]
        if cards:
            groups.append(SetGroup(set_name=view.set_name, cards=cards))
    return groups
