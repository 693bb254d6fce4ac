"""
Parser for pasted deck lists.

Accepts one card reference per line in any of these shapes:
    Evolving Wilds
    1 Evolving Wilds
    1 Evolving Wilds (INR)
    1 Birds of Paradise (SLD) 176
    1 Mountain (NEO) 290a
    1 Sol Ring (CMM) 400 *F*
    1 Fire // Ice (MH2) 290

Section headers (Deck, Sideboard, Commander), blank lines and lines starting
with "/" are skipped.
"""

import re

# Groups: (name,) - everything else is optional decoration around the name
# Quantity:          "4 "
# Set code:          " (SLD)"  uppercase letters/digits only
# Collector number:  " 176", " 290a", " A-12"  ends in digits, optional lowercase suffix
# Flag:              " *F*"
CARD_LINE_PATTERN = re.compile(
    r"^(?:\d+\s+)?"
    r"(?P<name>.+?)"
    r"(?:\s*\([A-Z0-9]+\))?"
    r"(?:\s+[A-Za-z0-9-]*\d+[a-z]*)?"
    r"(?:\s+\*\w*\*)?$"
)

# A "name" made only of a set code or flag, e.g. from "1 (SLD) 176"
DECORATION_ONLY_PATTERN = re.compile(r"^(?:\([A-Z0-9]+\)|\*\w*\*)$")

LINE_SPLIT_PATTERN = re.compile(r"\r?\n")

SECTION_HEADERS = frozenset({"Deck", "Sideboard", "Commander"})

COMMENT_PREFIX = "/"


def extract_card_name(line: str) -> str | None:
    """
    Extract the canonical card name from a single trimmed line.

    Args:
        line: One deck list line, already stripped

    Returns:
        Card name, or None if nothing is left once decorations are removed
    """
    match = CARD_LINE_PATTERN.match(line)
    if not match:
        return None

    name = match.group("name").strip()
    if not name or DECORATION_ONLY_PATTERN.match(name):
        return None
    return name


def _is_card_line(line: str) -> bool:
    return bool(line) and not line.startswith(COMMENT_PREFIX) and line not in SECTION_HEADERS


def extract_card_names(text: str) -> list[str]:
    """
    Parse deck list text into canonical card names.

    Args:
        text: Raw deck list (clipboard paste)

    Returns:
        Card names in input order. Duplicates are kept.

    Raises:
        TypeError: If text is not a string
    """
    if not isinstance(text, str):
        raise TypeError(f"Deck list must be a string, got {type(text).__name__}")

    names: list[str] = []

    for raw_line in LINE_SPLIT_PATTERN.split(text):
        line = raw_line.strip()

        if not _is_card_line(line):
            continue

        name = extract_card_name(line)
        if name is not None:
            names.append(name)

    return names
