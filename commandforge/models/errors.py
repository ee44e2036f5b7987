"""
Catalog error taxonomy.

Every failure talking to the card catalog is classified into one of four
kinds. Only some of them ever reach callers:

- RateLimited: HTTP 429, recovered by bounded retry
- RetriesExhausted: 429 persisted past the retry budget, treated as not-found
- NotFound: HTTP 404 or an empty result, represented as absence (None)
- TransportFailure: network failure or any other non-2xx status

INVARIANT: "not found" is never an exception at the public surface.
"""

from enum import Enum


class CatalogErrorKind(str, Enum):
    """Classification of catalog failures."""

    RATE_LIMITED = "rate_limited"
    RETRIES_EXHAUSTED = "retries_exhausted"
    NOT_FOUND = "not_found"
    TRANSPORT_FAILURE = "transport_failure"


class CatalogError(Exception):
    """
    Base class for failures raised by the catalog transport.

    Attributes:
        kind: Classification of the failure
        message: Human readable explanation
        status_code: HTTP status of the response, if there was one
    """

    def __init__(
        self,
        kind: CatalogErrorKind,
        message: str,
        status_code: int | None = None,
    ):
        self.kind = kind
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class RateLimitedError(CatalogError):
    """The catalog answered 429."""

    def __init__(self, message: str = "Rate limited by catalog", status_code: int = 429):
        super().__init__(CatalogErrorKind.RATE_LIMITED, message, status_code)


class RetriesExhaustedError(RateLimitedError):
    """429 persisted after every retry in the budget was spent."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"Still rate limited after {attempts} attempts")
        self.kind = CatalogErrorKind.RETRIES_EXHAUSTED


class CardNotFoundError(CatalogError):
    """The catalog answered 404."""

    def __init__(self, message: str = "Not found in catalog"):
        super().__init__(CatalogErrorKind.NOT_FOUND, message, 404)


class TransportFailureError(CatalogError):
    """Network failure, or a non-2xx status other than 404/429."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(CatalogErrorKind.TRANSPORT_FAILURE, message, status_code)


class BatchTransportError(TransportFailureError):
    """Every bulk request of a batch failed at the transport level."""

    def __init__(self, chunk_count: int, cause: TransportFailureError):
        self.chunk_count = chunk_count
        super().__init__(
            f"All {chunk_count} bulk requests failed: {cause.message}",
            cause.status_code,
        )
