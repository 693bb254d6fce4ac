"""
Group a deck list by set from the command line.

Reads a deck list file, resolves every card through the card cache and
Scryfall, then prints the groups or writes them as CSV.

Usage:
    python -m setgrouper.jobs.group_deck deck.txt
    python -m setgrouper.jobs.group_deck deck.txt --csv mtg_set_groups.csv
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from setgrouper.config import settings
from setgrouper.db.database import dispose_db, init_db
from setgrouper.models.card import SetGroup
from setgrouper.parsers.deck_list import extract_card_names
from setgrouper.services.card_cache import create_card_cache
from setgrouper.services.card_sets import fetch_card_sets
from setgrouper.services.export import groups_to_csv
from setgrouper.services.scryfall import create_client

logger = logging.getLogger(__name__)


def format_groups(groups: list[SetGroup]) -> str:
    """Plain-text listing: one header per set, one line per card."""
    lines: list[str] = []
    for group in groups:
        lines.append(f"{group.set_name} ({len(group.cards)} cards)")
        for card in group.cards:
            colors = "".join(card.colors) or "-"
            lines.append(
                f"  {card.name}  [{colors}]  ${card.price:.2f} {card.price_category.symbol}"
            )
    return "\n".join(lines)


async def run_group_deck(
    deck_path: Path,
    csv_path: Path | None = None,
    exclude_zero_price: bool | None = None,
    show_stats: bool = False,
) -> list[SetGroup]:
    """
    Resolve a deck list file into set groups.

    Args:
        deck_path: Deck list text file
        csv_path: Where to write CSV output; prints to stdout if None
        exclude_zero_price: Override settings.exclude_zero_price
        show_stats: Log cache statistics after the run

    Returns:
        Set groups, largest first
    """
    names = extract_card_names(deck_path.read_text(encoding="utf-8"))
    if not names:
        logger.warning("No card names found in %s", deck_path)
        return []

    logger.info("Resolving %d card names from %s", len(names), deck_path)

    await init_db()
    cache = create_card_cache()

    def report(completed: int) -> None:
        logger.info("Processed %d/%d", completed, len(names))

    try:
        async with create_client() as client:
            groups = await fetch_card_sets(
                names,
                cache,
                client,
                on_progress=report,
                exclude_zero_price=exclude_zero_price,
            )

        if show_stats:
            stats = await cache.stats()
            logger.info(
                "Cache: %d entries, ~%d bytes, oldest %s",
                stats.count,
                stats.approximate_byte_size,
                stats.oldest_timestamp,
            )
    finally:
        await dispose_db()

    if csv_path is not None:
        csv_path.write_text(groups_to_csv(groups), encoding="utf-8")
        logger.info("Wrote %d sets to %s", len(groups), csv_path)
    else:
        print(format_groups(groups))

    return groups


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Group a deck list by set")
    parser.add_argument("deck", type=Path, help="Deck list file, one card per line")
    parser.add_argument("--csv", type=Path, default=None, help="Write CSV to this path")
    parser.add_argument(
        "--include-zero-price",
        action="store_true",
        help="Keep prints without a market price (as $0.00)",
    )
    parser.add_argument("--stats", action="store_true", help="Log cache statistics")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    args = parse_args(argv)

    if not args.deck.exists():
        logger.error("Deck list not found: %s", args.deck)
        sys.exit(1)

    asyncio.run(
        run_group_deck(
            args.deck,
            csv_path=args.csv,
            exclude_zero_price=False if args.include_zero_price else None,
            show_stats=args.stats,
        )
    )


if __name__ == "__main__":
    main()
