"""
Query translation.

Turns a small set of domain intents into catalog search queries and parses
the responses into structured facts:

- valid partners for a commander (one query template per partner kind)
- a named list of combo pieces
- game changer membership (catalog-wide set, 30 minute TTL)
- multi-copy cards and their copy caps (built once per session)
- commander / card search, autocomplete and format ban lists

Catalog-wide facts are rebuilt wholesale and never partially updated.
"""

import asyncio
import logging
from collections.abc import Iterable
from typing import Literal, assert_never

from cachetools import TTLCache

from commandforge.config import AUTOCOMPLETE_MIN_LENGTH
from commandforge.models.card import CardRecord, SearchPage
from commandforge.models.errors import CardNotFoundError, CatalogError, RetriesExhaustedError
from commandforge.parsers.rules_text import parse_copy_limit
from commandforge.scryfall.cache import GAME_CHANGERS_KEY, RecordCache
from commandforge.scryfall.transport import CatalogTransport
from commandforge.services.batch_dispatcher import chunked, dedupe_names
from commandforge.services.card_text import oracle_text
from commandforge.services.partners import PartnerKind, classify_partner, partner_with_name
from commandforge.services.resolver import CardResolver, exact_name_query

logger = logging.getLogger(__name__)

SearchOrder = Literal["edhrec", "cmc", "name", "usd"]

GAME_CHANGER_QUERY = "is:gamechanger"
MULTI_COPY_QUERY = 'o:"a deck can have" o:"cards named"'

# Keeps "(!"A" or !"B" ...)" queries well under the catalog's length limit
COMBO_NAMES_PER_QUERY = 20


def partner_query(kind: PartnerKind) -> str | None:
    """
    Catalog query listing the legal partners for a partner kind.

    Returns None for kinds that are not answered by a search
    (no partner, or a single explicitly named partner).
    """
    match kind:
        case PartnerKind.NONE | PartnerKind.PARTNER_WITH:
            return None
        case PartnerKind.PARTNER:
            return 'is:commander f:commander keyword:partner -o:"Partner with"'
        case PartnerKind.FRIENDS_FOREVER:
            return 'is:commander f:commander keyword:"Friends forever"'
        case PartnerKind.CHOOSE_BACKGROUND:
            return "t:background"
        case PartnerKind.BACKGROUND:
            return 'is:commander f:commander o:"Choose a Background"'
        case PartnerKind.DOCTORS_COMPANION:
            return 'is:commander f:commander t:"Time Lord" t:Doctor'
        case PartnerKind.DOCTOR:
            return "is:commander f:commander keyword:\"Doctor's companion\""
        case _:
            assert_never(kind)


def combo_query(names: Iterable[str]) -> str:
    """Catalog query matching any of the given exact names."""
    return "(" + " or ".join(exact_name_query(name) for name in names) + ")"


class QueryTranslator:
    """Issues intent-level catalog queries and parses their results."""

    def __init__(
        self,
        transport: CatalogTransport,
        cache: RecordCache,
        resolver: CardResolver,
        game_changers: "TTLCache[str, frozenset[str]]",
    ) -> None:
        self._transport = transport
        self._cache = cache
        self._resolver = resolver
        self._game_changers = game_changers
        # Built once per session, then never refreshed
        self.multi_copy: dict[str, int | None] | None = None
        # One rebuild at a time; late arrivals reuse the fresh value
        self._game_changer_lock = asyncio.Lock()
        self._multi_copy_lock = asyncio.Lock()

    # -------------------------------------------------------------------------
    # Search plumbing
    # -------------------------------------------------------------------------

    async def search_page(
        self,
        query: str,
        order: SearchOrder = "edhrec",
        page: int = 1,
        direction: Literal["asc", "desc"] | None = None,
        unique: Literal["cards", "prints"] | None = None,
    ) -> SearchPage:
        """
        Fetch one page of search results. A search with no hits is an
        empty page, not an error.

        Raises:
            RetriesExhaustedError: If the page stayed rate limited
            TransportFailureError: If the catalog could not be reached
        """
        params: dict[str, str | int] = {"q": query, "order": order, "page": page}
        if direction:
            params["dir"] = direction
        if unique:
            params["unique"] = unique

        try:
            data = await self._transport.get("/cards/search", params=params)
        except CardNotFoundError:
            logger.debug("No results for %r", query)
            return SearchPage(cards=[])

        cards = [CardRecord.from_scryfall(card) for card in data.get("data", [])]
        for card in cards:
            self._cache.put(card.name, card)
        return SearchPage(
            cards=cards,
            has_more=bool(data.get("has_more", False)),
            total_cards=int(data.get("total_cards", len(cards))),
        )

    async def search_all(self, query: str, order: SearchOrder = "name") -> list[CardRecord]:
        """Follow has_more through every result page."""
        cards: list[CardRecord] = []
        page_number = 1
        while True:
            page = await self.search_page(query, order=order, page=page_number)
            cards.extend(page.cards)
            if not page.has_more:
                return cards
            page_number += 1

    # -------------------------------------------------------------------------
    # Partners
    # -------------------------------------------------------------------------

    async def find_partners(self, commander: CardRecord, refinement: str = "") -> list[CardRecord]:
        """
        Find cards that can be paired with a commander.

        Args:
            commander: The primary commander
            refinement: Optional free-text query appended to the template

        Returns:
            Candidate partners, never including the commander itself.
            Empty if the commander has no partner mechanic or the catalog
            could not answer.
        """
        kind = classify_partner(commander)

        if kind is PartnerKind.PARTNER_WITH:
            return await self._named_partner(commander)

        template = partner_query(kind)
        if template is None:
            return []

        query = f"{template} {refinement.strip()}" if refinement.strip() else template
        try:
            page = await self.search_page(query, order="edhrec")
        except CatalogError as e:
            logger.warning("Partner search failed for %s: %s", commander.name, e)
            return []

        return [card for card in page.cards if card.name != commander.name]

    async def _named_partner(self, commander: CardRecord) -> list[CardRecord]:
        """A "Partner with" card pairs with exactly one named card."""
        name = partner_with_name(commander)
        if not name:
            return []

        cached = self._cache.get(name)
        if cached is not None:
            return [cached]

        try:
            partner = await self._resolver.lookup_exact(name)
        except CatalogError as e:
            logger.warning("Lookup of partner %s failed: %s", name, e)
            return []

        if partner is None:
            return []
        self._cache.put(name, partner)
        return [partner]

    # -------------------------------------------------------------------------
    # Combo pieces
    # -------------------------------------------------------------------------

    async def fetch_combo_pieces(self, names: Iterable[str]) -> dict[str, CardRecord]:
        """
        Fetch a list of named cards through search rather than bulk lookup.

        Returns:
            Dict mapping requested name -> record; unknown names are absent
        """
        unique = dedupe_names(names)
        by_lower = {name.lower(): name for name in unique}
        found: dict[str, CardRecord] = {}

        for group in chunked(unique, COMBO_NAMES_PER_QUERY):
            try:
                cards = await self.search_all(combo_query(group))
            except CatalogError as e:
                logger.warning("Combo piece search failed: %s", e)
                continue

            for card in cards:
                for candidate in (card.name, *card.face_names):
                    requested = by_lower.get(candidate.lower())
                    if requested is not None:
                        found[requested] = card
                        self._cache.put(requested, card)
                        break

        return found

    # -------------------------------------------------------------------------
    # Catalog-wide facts
    # -------------------------------------------------------------------------

    async def game_changers(self) -> frozenset[str]:
        """
        Names of every game changer card.

        Re-fetched wholesale once the cached set expires. A failed refresh
        returns an empty set and leaves nothing cached.
        """
        cached = self._game_changers.get(GAME_CHANGERS_KEY)
        if cached is not None:
            return cached

        async with self._game_changer_lock:
            cached = self._game_changers.get(GAME_CHANGERS_KEY)
            if cached is not None:
                return cached

            try:
                cards = await self.search_all(GAME_CHANGER_QUERY)
            except CatalogError as e:
                logger.warning("Could not fetch game changers: %s", e)
                return frozenset()

            names = frozenset(card.name for card in cards)
            self._game_changers[GAME_CHANGERS_KEY] = names
            logger.info("Cached %d game changers", len(names))
            return names

    async def is_game_changer(self, name: str) -> bool:
        return name in await self.game_changers()

    async def multi_copy_caps(self) -> dict[str, int | None]:
        """
        Cards exempt from the one-copy-per-name rule.

        Returns:
            Dict mapping card name -> copy cap, None meaning unlimited.
            Built once per session; a failed build is not stored.
        """
        cached = self.multi_copy
        if cached is not None:
            return dict(cached)

        async with self._multi_copy_lock:
            cached = self.multi_copy
            if cached is not None:
                return dict(cached)

            try:
                cards = await self.search_all(MULTI_COPY_QUERY)
            except CatalogError as e:
                logger.warning("Could not fetch multi-copy cards: %s", e)
                return {}

            caps: dict[str, int | None] = {}
            for card in cards:
                matched, cap = parse_copy_limit(oracle_text(card))
                if matched:
                    caps[card.name] = cap

            self.multi_copy = caps
            logger.info("Cached copy caps for %d cards", len(caps))
            return dict(caps)

    # -------------------------------------------------------------------------
    # General search
    # -------------------------------------------------------------------------

    async def search_commanders(self, query: str) -> list[CardRecord]:
        """Commander-legal commanders matching free text, most popular first."""
        if not query.strip():
            return []
        page = await self.search_page(f"is:commander f:commander {query.strip()}")
        return page.cards

    async def search_cards(
        self,
        query: str,
        color_identity: Iterable[str] = (),
        order: SearchOrder = "edhrec",
        page: int = 1,
    ) -> SearchPage:
        """
        Commander-legal cards within a color identity.

        The query is parenthesized so the identity filter also applies to
        any "or" clauses inside it.
        """
        colors = "".join(color_identity)
        color_filter = f"id<={colors}" if colors else ""
        full_query = f"{color_filter} ({query}) f:commander".strip()
        return await self.search_page(full_query, order=order, page=page)

    async def autocomplete(self, partial: str) -> list[str]:
        """Card name completions. Too-short input issues no request."""
        partial = partial.strip()
        if len(partial) < AUTOCOMPLETE_MIN_LENGTH:
            return []

        try:
            data = await self._transport.get("/cards/autocomplete", params={"q": partial})
        except (CardNotFoundError, RetriesExhaustedError):
            return []
        return [str(name) for name in data.get("data", [])]

    async def ban_list(self, format_name: str) -> list[str]:
        """Names of every card banned in a format."""
        cards = await self.search_all(f"banned:{format_name}")
        return [card.name for card in cards]
