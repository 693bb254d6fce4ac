"""
Fold card prints into per-set groups and order them.

Groups are accumulated in a dict keyed by set name, so iteration order is
the order in which each set was first encountered.
"""

from collections.abc import Iterable

from setgrouper.models.card import CardRecord, SetGroup

SetGroups = dict[str, SetGroup]


def add_card(groups: SetGroups, set_name: str, card: CardRecord) -> bool:
    """
    Add a print to the group for set_name.

    The first print seen for a name wins; later prints with the same name in
    the same set are dropped, not merged.

    Returns:
        True if the card was added
    """
    group = groups.get(set_name)
    if group is None:
        group = SetGroup(set_name=set_name)
        groups[set_name] = group

    if group.has_card(card.name):
        return False

    group.cards.append(card)
    return True


def group_records(records: Iterable[tuple[str, CardRecord]]) -> list[SetGroup]:
    """Group (set name, card) pairs and return them in result order."""
    groups: SetGroups = {}
    for set_name, card in records:
        add_card(groups, set_name, card)
    return sort_groups(groups.values())


def sort_groups(groups: Iterable[SetGroup]) -> list[SetGroup]:
    """Order groups by card count, largest first. Ties keep encounter order."""
    return sorted(groups, key=lambda group: len(group.cards), reverse=True)


def remove_card_from_groups(groups: Iterable[SetGroup], card_name: str) -> list[SetGroup]:
    """
    Drop a card name from every group, and drop groups left empty.

    Returns new groups; the input is not modified. Use SelectionState for a
    reversible deselect.
    """
    remaining: list[SetGroup] = []
    for group in groups:
        cards = [card for card in group.cards if card.name != card_name]
        if cards:
            remaining.append(SetGroup(set_name=group.set_name, cards=cards))
    return remaining
