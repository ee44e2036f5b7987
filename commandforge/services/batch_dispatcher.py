"""
Bulk card resolution.

Resolves many names at once with as few catalog round-trips as possible:

1. Cached names are answered immediately
2. The rest go out in chunks of 75 through POST /cards/collection
3. Bulk records with no recognized price (e.g., unreleased reprints) are
   re-searched individually for a priced printing
4. Names still missing go through the single-name resolver as a last resort

INVARIANTS:
- Result keys are always a subset of the deduplicated input
- Every returned record is in the cache afterwards, under the requested name
- Chunks are requested and retried strictly in input order
- Per-name failures are logged and show up only as omissions
"""

import asyncio
import logging
from collections.abc import Callable, Iterable
from typing import Any

from commandforge.config import COLLECTION_CHUNK_SIZE, settings
from commandforge.models.card import CardRecord
from commandforge.models.errors import (
    BatchTransportError,
    CatalogError,
    RateLimitedError,
    RetriesExhaustedError,
    TransportFailureError,
)
from commandforge.scryfall.cache import RecordCache
from commandforge.scryfall.transport import CatalogTransport
from commandforge.services.resolver import CardResolver

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


def dedupe_names(names: Iterable[str]) -> list[str]:
    """
    Drop blank names and exact duplicates, keep first-seen order.

    Names are kept exactly as given: they are the keys of the result.
    Surrounding whitespace is only trimmed when talking to the catalog.
    """
    return list(dict.fromkeys(name for name in names if name.strip()))


def chunked(names: list[str], size: int) -> list[list[str]]:
    """Split names into consecutive chunks of at most `size`."""
    return [names[i : i + size] for i in range(0, len(names), size)]


class BatchDispatcher:
    """Fans a name list out into bulk lookups plus individual fallbacks."""

    def __init__(
        self,
        transport: CatalogTransport,
        cache: RecordCache,
        resolver: CardResolver,
        chunk_size: int = COLLECTION_CHUNK_SIZE,
        retry_delay: float | None = None,
        max_retries: int | None = None,
    ) -> None:
        """
        Args:
            transport: Shared throttled transport
            cache: Shared record cache
            resolver: Single-name resolver used by the fallback passes
            chunk_size: Identifiers per bulk request (catalog ceiling is 75)
            retry_delay: Fixed wait before re-sending a rate-limited chunk
            max_retries: Re-sends allowed per chunk
        """
        self._transport = transport
        self._cache = cache
        self._resolver = resolver
        self.chunk_size = chunk_size
        self.retry_delay = settings.rate_limit_backoff if retry_delay is None else retry_delay
        self.max_retries = settings.max_rate_limit_retries if max_retries is None else max_retries

    async def resolve_many(
        self,
        names: Iterable[str],
        on_progress: ProgressCallback | None = None,
    ) -> dict[str, CardRecord]:
        """
        Resolve many card names.

        Args:
            names: Card names, duplicates allowed
            on_progress: Called as (fetched, total) after each chunk

        Returns:
            Dict mapping requested name -> record. Names the catalog does not
            have are simply absent.

        Raises:
            BatchTransportError: If every bulk request failed at the transport
                level (the whole batch can be retried by the caller)
        """
        unique = dedupe_names(names)
        total = len(unique)
        result: dict[str, CardRecord] = {}
        uncached: list[str] = []

        for name in unique:
            cached = self._cache.get(name)
            if cached is not None:
                result[name] = cached
            else:
                uncached.append(name)

        if not uncached:
            logger.debug("All %d names served from cache", total)
            _report(on_progress, total, total)
            return result

        chunks = chunked(uncached, self.chunk_size)
        logger.info(
            "Resolving %d names: %d cached, %d uncached in %d chunks",
            total,
            len(result),
            len(uncached),
            len(chunks),
        )

        fetched = len(result)
        bulk_found: list[str] = []
        missing: list[str] = []
        transport_failure: TransportFailureError | None = None
        failed_chunks = 0

        for index, chunk in enumerate(chunks, start=1):
            found: dict[str, CardRecord] = {}
            try:
                found = await self._fetch_chunk(chunk)
            except TransportFailureError as e:
                logger.error("Chunk %d/%d failed: %s", index, len(chunks), e)
                transport_failure = e
                failed_chunks += 1
            except CatalogError as e:
                logger.warning("Chunk %d/%d unresolved: %s", index, len(chunks), e)

            result.update(found)
            bulk_found.extend(found)
            missing.extend(name for name in chunk if name not in found)

            fetched += len(chunk)
            _report(on_progress, fetched, total)

        if transport_failure is not None and failed_chunks == len(chunks):
            raise BatchTransportError(len(chunks), transport_failure)

        # The two fallback passes touch disjoint names
        await self._repair_prices(bulk_found, result)
        await self._resolve_missing(missing, result)

        logger.info("Resolved %d of %d names", len(result), total)
        return result

    async def _fetch_chunk(self, chunk: list[str]) -> dict[str, CardRecord]:
        """
        Bulk-lookup one chunk, re-sending the same chunk on 429.

        Raises:
            RetriesExhaustedError: If 429 persisted through every re-send
            TransportFailureError: On network failure or unexpected status
        """
        trimmed = dict.fromkeys(name.strip() for name in chunk)
        payload = {"identifiers": [{"name": name} for name in trimmed]}
        attempts = self.max_retries + 1

        for attempt in range(1, attempts + 1):
            try:
                data = await self._transport.send("POST", "/cards/collection", json=payload)
            except RateLimitedError:
                if attempt == attempts:
                    raise RetriesExhaustedError(attempts) from None
                logger.warning(
                    "Collection request rate limited (attempt %d/%d), retrying in %.1fs",
                    attempt,
                    attempts,
                    self.retry_delay,
                )
                await asyncio.sleep(self.retry_delay)
                continue

            not_found = [entry.get("name") for entry in data.get("not_found", [])]
            if not_found:
                logger.debug("Catalog reported not found: %s", [n for n in not_found if n])
            return self._match_records(chunk, data.get("data", []))

        raise RetriesExhaustedError(attempts)

    def _match_records(
        self, chunk: list[str], payloads: list[dict[str, Any]]
    ) -> dict[str, CardRecord]:
        """
        Map returned records back to the names that were requested.

        A record matches a requested name by canonical name or by any face
        name, case-insensitively. Every record is cached, matched or not.
        """
        pending: dict[str, list[str]] = {}
        for name in chunk:
            pending.setdefault(name.strip().lower(), []).append(name)

        found: dict[str, CardRecord] = {}
        for payload in payloads:
            record = CardRecord.from_scryfall(payload)
            requested: list[str] = []
            for candidate in (record.name, *record.face_names):
                requested = pending.pop(candidate.lower(), [])
                if requested:
                    break

            if not requested:
                logger.debug("Unrequested record in collection response: %s", record.name)
                self._cache.put(record.name, record)
                continue

            for name in requested:
                found[name] = record
                self._cache.put(name, record)

        return found

    async def _repair_prices(self, names: list[str], result: dict[str, CardRecord]) -> None:
        """Re-search bulk records that carry no recognized price."""
        priceless = [name for name in names if not result[name].prices.has_any_price]
        if not priceless:
            return

        logger.info("Re-searching %d priceless records", len(priceless))
        await asyncio.gather(*(self._repair_one(name, result) for name in priceless))

    async def _repair_one(self, name: str, result: dict[str, CardRecord]) -> None:
        try:
            record = await self._resolver.search_cheapest_printing(name.strip())
        except CatalogError as e:
            logger.warning("Price repair failed for %s: %s", name, e)
            return

        if record is not None and record.prices.has_any_price:
            result[name] = record
            self._cache.put(name, record)

    async def _resolve_missing(self, names: list[str], result: dict[str, CardRecord]) -> None:
        """Last-resort individual resolution of names the bulk pass missed."""
        if not names:
            return

        logger.info("Resolving %d missing names individually", len(names))
        await asyncio.gather(*(self._resolve_one(name, result) for name in names))

    async def _resolve_one(self, name: str, result: dict[str, CardRecord]) -> None:
        try:
            record = await self._resolver.resolve(name.strip())
        except CatalogError as e:
            logger.warning("Could not resolve %s: %s", name, e)
            return

        if record is not None:
            result[name] = record
            self._cache.put(name, record)
        else:
            logger.debug("Not in catalog: %s", name)


def _report(on_progress: ProgressCallback | None, fetched: int, total: int) -> None:
    if on_progress is not None:
        on_progress(fetched, total)
