"""
Throttled HTTP transport for the Scryfall catalog.

Every request waits on the shared RequestThrottle before it leaves, and the
response status is mapped onto the catalog error taxonomy:

- 2xx: parsed JSON body
- 429: RateLimitedError (retried by request(), bounded)
- 404: CardNotFoundError
- anything else, or a network failure: TransportFailureError

API docs: https://scryfall.com/docs/api
"""

import asyncio
import logging
from typing import Any

import httpx

from commandforge.config import settings
from commandforge.models.errors import (
    CardNotFoundError,
    RateLimitedError,
    RetriesExhaustedError,
    TransportFailureError,
)
from commandforge.scryfall.throttle import RequestThrottle

logger = logging.getLogger(__name__)


class CatalogTransport:
    """
    Owns the HTTP connection pool and the request throttle.

    One transport is shared by the resolver, the batch dispatcher and the
    query translator of a client, so they all queue on the same throttle.
    """

    def __init__(
        self,
        throttle: RequestThrottle,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the transport.

        Args:
            throttle: Admission queue every request passes through
            base_url: Catalog root. Defaults to settings.scryfall_base_url.
            timeout: Request timeout in seconds. Defaults to settings.scryfall_timeout.
            max_retries: 429 retry budget. Defaults to settings.max_rate_limit_retries.
            backoff: Seconds per backoff step. Defaults to settings.rate_limit_backoff.
            client: Pre-built httpx client (its base_url must point at the catalog)
        """
        self.throttle = throttle
        self.base_url = base_url or settings.scryfall_base_url
        self.max_retries = settings.max_rate_limit_retries if max_retries is None else max_retries
        self.backoff = settings.rate_limit_backoff if backoff is None else backoff
        self._client = client or httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "User-Agent": settings.scryfall_user_agent,
                "Accept": "application/json",
            },
            timeout=timeout or settings.scryfall_timeout,
        )

    def backoff_delay(self, attempt: int) -> float:
        """Stepped delay before retry number `attempt` (1-based)."""
        return self.backoff * attempt

    async def send(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Issue exactly one throttled request.

        Raises:
            RateLimitedError: On 429
            CardNotFoundError: On 404
            TransportFailureError: On network failure or any other non-2xx
        """
        await self.throttle.acquire()
        logger.debug("%s %s params=%s", method, path, params)

        try:
            response = await self._client.request(method, path, params=params, json=json)
        except httpx.RequestError as e:
            raise TransportFailureError(f"{method} {path} failed: {e}") from e

        if response.status_code == 429:
            raise RateLimitedError()
        if response.status_code == 404:
            raise CardNotFoundError(_error_details(response) or f"{path} not found")
        if not response.is_success:
            raise TransportFailureError(
                f"{method} {path} failed: HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data: dict[str, Any] = response.json()
        except ValueError as e:
            raise TransportFailureError(f"Invalid JSON from {path}: {e}") from e
        return data

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Issue a throttled request, retrying 429 responses.

        Retries run as a bounded loop; the delay steps up with each attempt.

        Raises:
            RetriesExhaustedError: If 429 persisted through every retry
            CardNotFoundError: On 404
            TransportFailureError: On network failure or any other non-2xx
        """
        attempts = self.max_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                return await self.send(method, path, params=params, json=json)
            except RateLimitedError:
                if attempt == attempts:
                    break
                delay = self.backoff_delay(attempt)
                logger.warning(
                    "Rate limited on %s (attempt %d/%d), retrying in %.1fs",
                    path,
                    attempt,
                    attempts,
                    delay,
                )
                await asyncio.sleep(delay)

        logger.warning("Giving up on %s after %d rate-limited attempts", path, attempts)
        raise RetriesExhaustedError(attempts)

    async def get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: dict[str, Any]) -> dict[str, Any]:
        return await self.request("POST", path, json=json)

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()


def _error_details(response: httpx.Response) -> str | None:
    """Pull the `details` field out of a catalog error object, if present."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get("object") == "error":
        details = body.get("details")
        return str(details) if details else None
    return None
