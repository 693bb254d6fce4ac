"""
CSV export of set groups.

One row per set: the set name and its card names joined with ", ".
"""

import csv
import io
from collections.abc import Iterable

from setgrouper.models.card import SetGroup

CSV_HEADER = ("Set", "Cards")
EXPORT_FILENAME = "mtg_set_groups.csv"


def groups_to_rows(groups: Iterable[SetGroup]) -> list[tuple[str, str]]:
    return [(group.set_name, ", ".join(group.card_names())) for group in groups]


def groups_to_csv(groups: Iterable[SetGroup]) -> str:
    """Render groups as CSV text with a Set,Cards header."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    writer.writerows(groups_to_rows(groups))
    return buffer.getvalue()
