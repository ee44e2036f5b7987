"""
Single-name card resolution.

Resolves one card name to its canonical record through a fallback chain:

1. Record cache (no network)
2. Search of every non-digital printing, cheapest USD first
3. Exact-name lookup

Not-found is a normal None result. Exhausted 429 retries count as
not-found for the path that hit them. Only transport failures propagate.
"""

import logging

from commandforge.models.card import CardRecord
from commandforge.models.errors import CardNotFoundError, RetriesExhaustedError
from commandforge.scryfall.cache import RecordCache
from commandforge.scryfall.transport import CatalogTransport

logger = logging.getLogger(__name__)


def exact_name_query(name: str) -> str:
    """Catalog query matching exactly one card name."""
    escaped = name.replace('"', '\\"')
    return f'!"{escaped}"'


def pick_cheapest_priced(records: list[CardRecord]) -> CardRecord | None:
    """
    Choose a printing from a price-ordered result list.

    Prefers the first printing with a direct USD price, then the first with
    any recognized price, then simply the first.
    """
    if not records:
        return None
    for record in records:
        if record.prices.has_usd:
            return record
    for record in records:
        if record.prices.has_any_price:
            return record
    return records[0]


class CardResolver:
    """Resolves card names one at a time against cache and catalog."""

    def __init__(self, transport: CatalogTransport, cache: RecordCache) -> None:
        self._transport = transport
        self._cache = cache

    async def resolve(self, name: str) -> CardRecord | None:
        """
        Resolve a card name to its canonical record.

        Args:
            name: Card name as supplied by the caller

        Returns:
            The record, or None if the catalog does not have it

        Raises:
            TransportFailureError: If the catalog could not be reached
        """
        cached = self._cache.get(name)
        if cached is not None:
            logger.debug("Cache hit for %s", name)
            return cached

        record = await self.search_cheapest_printing(name)
        if record is None:
            logger.debug("Search found nothing for %s, trying exact lookup", name)
            record = await self.lookup_exact(name)

        if record is not None:
            self._cache.put(name, record)
        return record

    async def search_cheapest_printing(self, name: str) -> CardRecord | None:
        """
        Search all paper printings of a name, ordered by ascending USD price.

        Does not read or write the cache.

        Returns:
            The preferred printing, or None on 404, empty result, or
            exhausted rate-limit retries
        """
        params = {
            "q": f"{exact_name_query(name)} -is:digital",
            "order": "usd",
            "dir": "asc",
            "unique": "prints",
        }
        try:
            data = await self._transport.get("/cards/search", params=params)
        except CardNotFoundError:
            return None
        except RetriesExhaustedError:
            logger.warning("Rate limit retries exhausted searching for %s", name)
            return None

        records = [CardRecord.from_scryfall(card) for card in data.get("data", [])]
        return pick_cheapest_priced(records)

    async def lookup_exact(self, name: str) -> CardRecord | None:
        """Exact-name lookup. None on 404 or exhausted retries."""
        return await self._lookup_named({"exact": name})

    async def lookup_fuzzy(self, name: str) -> CardRecord | None:
        """Fuzzy-name lookup. None on 404 or exhausted retries."""
        return await self._lookup_named({"fuzzy": name})

    async def _lookup_named(self, params: dict[str, str]) -> CardRecord | None:
        try:
            data = await self._transport.get("/cards/named", params=params)
        except CardNotFoundError:
            return None
        except RetriesExhaustedError:
            logger.warning("Rate limit retries exhausted looking up %s", params)
            return None
        return CardRecord.from_scryfall(data)
