from commandforge.scryfall.cache import RecordCache, game_changer_cache
from commandforge.scryfall.throttle import RequestThrottle
from commandforge.scryfall.transport import CatalogTransport

__all__ = [
    "CatalogTransport",
    "RecordCache",
    "RequestThrottle",
    "game_changer_cache",
]
