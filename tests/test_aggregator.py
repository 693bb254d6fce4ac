from setgrouper.models.card import CardRecord, SetGroup
from setgrouper.services.aggregator import (
    add_card,
    group_records,
    remove_card_from_groups,
    sort_groups,
)


def card(name: str, price: float = 2.0) -> CardRecord:
    return CardRecord(name=name, colors=("G",), price=price)


class TestAddCard:
    def test_creates_group_on_first_card(self) -> None:
        groups: dict[str, SetGroup] = {}

        assert add_card(groups, "Alpha", card("Forest")) is True
        assert groups["Alpha"].card_names() == ["Forest"]

    def test_first_print_wins(self) -> None:
        groups: dict[str, SetGroup] = {}
        add_card(groups, "Alpha", card("Forest", price=0.5))

        assert add_card(groups, "Alpha", card("Forest", price=99.0)) is False
        assert [c.price for c in groups["Alpha"].cards] == [0.5]

    def test_same_name_in_different_sets(self) -> None:
        groups: dict[str, SetGroup] = {}
        add_card(groups, "Alpha", card("Forest"))
        add_card(groups, "Beta", card("Forest"))

        assert list(groups) == ["Alpha", "Beta"]


class TestSortGroups:
    def test_largest_first(self) -> None:
        small = SetGroup("Small", [card("A")])
        large = SetGroup("Large", [card("A"), card("B"), card("C")])
        medium = SetGroup("Medium", [card("A"), card("B")])

        assert [g.set_name for g in sort_groups([small, large, medium])] == [
            "Large",
            "Medium",
            "Small",
        ]

    def test_ties_keep_input_order(self) -> None:
        groups = [SetGroup(name, [card("A")]) for name in ["Zeta", "Alpha", "Mu"]]

        assert [g.set_name for g in sort_groups(groups)] == ["Zeta", "Alpha", "Mu"]


class TestGroupRecords:
    def test_groups_and_sorts(self) -> None:
        records = [
            ("Alpha", card("Forest")),
            ("Beta", card("Island")),
            ("Beta", card("Swamp")),
            ("Beta", card("Island")),
        ]

        groups = group_records(records)

        assert [(g.set_name, g.card_names()) for g in groups] == [
            ("Beta", ["Island", "Swamp"]),
            ("Alpha", ["Forest"]),
        ]

    def test_no_records(self) -> None:
        assert group_records([]) == []


class TestRemoveCardFromGroups:
    def test_removes_name_everywhere_and_drops_empty_groups(self) -> None:
        groups = [
            SetGroup("Alpha", [card("Forest"), card("Island")]),
            SetGroup("Beta", [card("Forest")]),
        ]

        remaining = remove_card_from_groups(groups, "Forest")

        assert [(g.set_name, g.card_names()) for g in remaining] == [("Alpha", ["Island"])]

    def test_does_not_modify_input(self) -> None:
        groups = [SetGroup("Alpha", [card("Forest"), card("Island")])]

        remove_card_from_groups(groups, "Forest")

        assert groups[0].card_names() == ["Forest", "Island"]
