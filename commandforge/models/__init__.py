from commandforge.models.card import (
    RECOGNIZED_PRICE_FIELDS,
    CardFace,
    CardPrices,
    CardRecord,
    SearchPage,
)
from commandforge.models.errors import (
    BatchTransportError,
    CardNotFoundError,
    CatalogError,
    CatalogErrorKind,
    RateLimitedError,
    RetriesExhaustedError,
    TransportFailureError,
)

__all__ = [
    "BatchTransportError",
    "CardFace",
    "CardNotFoundError",
    "CardPrices",
    "CardRecord",
    "CatalogError",
    "CatalogErrorKind",
    "RECOGNIZED_PRICE_FIELDS",
    "RateLimitedError",
    "RetriesExhaustedError",
    "SearchPage",
    "TransportFailureError",
]
