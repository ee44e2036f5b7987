"""
In-memory caches for catalog data.

All caches live for the lifetime of their owning client. Nothing is written
to disk and the record cache is never evicted. The game changer set lives in
a single-entry cachetools TTLCache so it is rebuilt wholesale once it expires.
"""

from collections.abc import Callable

from cachetools import TTLCache

from commandforge.models.card import CardRecord

GAME_CHANGERS_KEY = "game_changers"


def game_changer_cache(
    ttl_seconds: float, timer: Callable[[], float]
) -> "TTLCache[str, frozenset[str]]":
    """Single-slot cache for the game changer set."""
    return TTLCache(maxsize=1, ttl=ttl_seconds, timer=timer)


class RecordCache:
    """
    Name -> CardRecord mapping.

    A record is stored under the name used to look it up AND under its
    canonical name, so a later lookup by either spelling is a hit.
    Each put is a plain dict assignment, so readers never observe a
    half-written entry.
    """

    def __init__(self) -> None:
        self._records: dict[str, CardRecord] = {}

    def get(self, name: str) -> CardRecord | None:
        return self._records.get(name)

    def put(self, name: str, record: CardRecord) -> None:
        self._records[name] = record
        if record.name != name:
            self._records[record.name] = record

    def has(self, name: str) -> bool:
        return name in self._records

    def __contains__(self, name: object) -> bool:
        return name in self._records

    def __len__(self) -> int:
        return len(self._records)
