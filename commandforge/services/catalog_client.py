"""
Catalog client.

One object owns everything with session lifetime: the HTTP connection pool,
the request throttle, the record cache and the game changer cache.
Construct it once and hand it to every call site; independent instances
share no state.
"""

import logging
import time
from collections.abc import Callable, Iterable
from types import TracebackType

import httpx

from commandforge.config import (
    BASIC_LAND_NAMES,
    COLLECTION_CHUNK_SIZE,
    GAME_CHANGER_TTL_SECONDS,
    settings,
)
from commandforge.models.card import CardRecord, SearchPage
from commandforge.scryfall.cache import RecordCache, game_changer_cache
from commandforge.scryfall.throttle import RequestThrottle
from commandforge.scryfall.transport import CatalogTransport
from commandforge.services.batch_dispatcher import BatchDispatcher, ProgressCallback
from commandforge.services.query_translator import QueryTranslator, SearchOrder
from commandforge.services.resolver import CardResolver

logger = logging.getLogger(__name__)


class CatalogClient:
    """
    Resilient client for the card catalog.

    Usage:
        async with CatalogClient() as catalog:
            cards = await catalog.resolve_many(["Sol Ring", "Arcane Signet"])
    """

    def __init__(
        self,
        base_url: str | None = None,
        min_request_interval: float | None = None,
        max_retries: int | None = None,
        backoff: float | None = None,
        chunk_size: int = COLLECTION_CHUNK_SIZE,
        game_changer_ttl: float = GAME_CHANGER_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: Catalog root. Defaults to settings.scryfall_base_url.
            min_request_interval: Seconds between requests. Defaults to
                settings.min_request_interval.
            max_retries: 429 retry budget. Defaults to settings.max_rate_limit_retries.
            backoff: Seconds per 429 backoff step. Defaults to settings.rate_limit_backoff.
            chunk_size: Names per bulk request
            game_changer_ttl: Lifetime of the game changer set in seconds
            clock: Monotonic clock shared by throttle and caches
            http_client: Pre-built httpx client
        """
        interval = (
            settings.min_request_interval if min_request_interval is None else min_request_interval
        )
        self.throttle = RequestThrottle(interval, clock=clock)
        self.transport = CatalogTransport(
            self.throttle,
            base_url=base_url,
            max_retries=max_retries,
            backoff=backoff,
            client=http_client,
        )
        self.cache = RecordCache()
        self.game_changer_cache = game_changer_cache(game_changer_ttl, timer=clock)

        self.resolver = CardResolver(self.transport, self.cache)
        self.dispatcher = BatchDispatcher(
            self.transport,
            self.cache,
            self.resolver,
            chunk_size=chunk_size,
            retry_delay=backoff,
            max_retries=max_retries,
        )
        self.translator = QueryTranslator(
            self.transport,
            self.cache,
            self.resolver,
            game_changers=self.game_changer_cache,
        )

    async def __aenter__(self) -> "CatalogClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.transport.aclose()

    # -------------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------------

    def get_cached(self, name: str) -> CardRecord | None:
        """Cached record for a name, without any network call."""
        return self.cache.get(name)

    async def resolve(self, name: str) -> CardRecord | None:
        return await self.resolver.resolve(name)

    async def lookup_fuzzy(self, name: str) -> CardRecord | None:
        record = await self.resolver.lookup_fuzzy(name)
        if record is not None:
            self.cache.put(name, record)
        return record

    async def resolve_many(
        self,
        names: Iterable[str],
        on_progress: ProgressCallback | None = None,
    ) -> dict[str, CardRecord]:
        return await self.dispatcher.resolve_many(names, on_progress=on_progress)

    async def prefetch_basic_lands(self) -> dict[str, CardRecord]:
        """Warm the cache with the basic lands every deck needs."""
        return await self.resolve_many(BASIC_LAND_NAMES)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    async def find_partners(self, commander: CardRecord, refinement: str = "") -> list[CardRecord]:
        return await self.translator.find_partners(commander, refinement)

    async def fetch_combo_pieces(self, names: Iterable[str]) -> dict[str, CardRecord]:
        return await self.translator.fetch_combo_pieces(names)

    async def game_changers(self) -> frozenset[str]:
        return await self.translator.game_changers()

    async def multi_copy_caps(self) -> dict[str, int | None]:
        return await self.translator.multi_copy_caps()

    async def search_commanders(self, query: str) -> list[CardRecord]:
        return await self.translator.search_commanders(query)

    async def search_cards(
        self,
        query: str,
        color_identity: Iterable[str] = (),
        order: SearchOrder = "edhrec",
        page: int = 1,
    ) -> SearchPage:
        return await self.translator.search_cards(query, color_identity, order=order, page=page)

    async def autocomplete(self, partial: str) -> list[str]:
        return await self.translator.autocomplete(partial)

    async def ban_list(self, format_name: str) -> list[str]:
        return await self.translator.ban_list(format_name)
