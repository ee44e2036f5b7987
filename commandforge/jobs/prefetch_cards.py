"""
Resolve a card list against the catalog.

Reads one card name per line (blank lines and "#" comments ignored) and
reports which names the catalog could not resolve. Useful for checking a
decklist or warming up before a session.

    python -m commandforge.jobs.prefetch_cards decklist.txt
"""

import argparse
import asyncio
import logging
import re
from pathlib import Path

from commandforge.models.card import CardRecord
from commandforge.services.catalog_client import CatalogClient

logger = logging.getLogger(__name__)

# Leading quantity: "4 Lightning Bolt" or "4x Lightning Bolt". A bare count is
# at most two digits so names such as "1996 World Champion" are left alone.
_QUANTITY_PREFIX = re.compile(r"^(?:\d+x|\d{1,2})\s+", re.IGNORECASE)


def read_card_names(path: Path) -> list[str]:
    """Card names from a text file, one per line."""
    names: list[str] = []
    with open(path, encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            names.append(_QUANTITY_PREFIX.sub("", line))
    return names


async def run_prefetch(names: list[str], catalog: CatalogClient) -> dict[str, CardRecord]:
    """Resolve names, logging progress and anything left unresolved."""

    def on_progress(fetched: int, total: int) -> None:
        logger.info("Fetched %d/%d", fetched, total)

    logger.info("Resolving %d card names...", len(names))
    cards = await catalog.resolve_many(names, on_progress=on_progress)

    missing = [name for name in dict.fromkeys(names) if name not in cards]
    if missing:
        logger.warning("Could not resolve %d names: %s", len(missing), ", ".join(missing))
    logger.info("Resolved %d cards", len(cards))
    return cards


async def _main(path: Path) -> None:
    async with CatalogClient() as catalog:
        await run_prefetch(read_card_names(path), catalog)


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Resolve a card list against Scryfall")
    parser.add_argument("path", type=Path, help="File with one card name per line")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(_main(args.path))


if __name__ == "__main__":
    main()
