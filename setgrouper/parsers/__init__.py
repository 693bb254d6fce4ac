from setgrouper.parsers.deck_list import extract_card_name, extract_card_names

__all__ = [
    "extract_card_name",
    "extract_card_names",
]
