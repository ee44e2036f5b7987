"""
Catalog services.

Resolution, bulk lookup and query translation over the card catalog.
"""

from commandforge.services.batch_dispatcher import BatchDispatcher
from commandforge.services.catalog_client import CatalogClient
from commandforge.services.partners import PartnerKind, classify_partner
from commandforge.services.query_translator import QueryTranslator
from commandforge.services.resolver import CardResolver

__all__ = [
    "BatchDispatcher",
    "CardResolver",
    "CatalogClient",
    "PartnerKind",
    "QueryTranslator",
    "classify_partner",
]
