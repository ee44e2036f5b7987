"""
Card catalog records.

Parsed, immutable views of the JSON objects the catalog returns. A record is
never mutated after it is built; a fresher fetch replaces it wholesale.

INVARIANTS:
- name is the canonical catalog name and the identity key
- faces holds 0, 1 or 2 entries (two for double-faced and split cards)
- a missing price is None, never an empty string
"""

from dataclasses import dataclass, field
from typing import Any

# Price fields that count as "this record has a price".
# tix (MTGO tickets) is not one of them.
RECOGNIZED_PRICE_FIELDS = ("usd", "usd_foil", "usd_etched", "eur", "eur_foil")


def _price(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


@dataclass(frozen=True, slots=True)
class CardPrices:
    """
    Market prices as decimal strings.

    Attributes:
        usd: Non-foil USD price
        usd_foil: Foil USD price
        usd_etched: Etched foil USD price
        eur: Non-foil EUR price
        eur_foil: Foil EUR price
        tix: MTGO ticket price (not a recognized paper price)
    """

    usd: str | None = None
    usd_foil: str | None = None
    usd_etched: str | None = None
    eur: str | None = None
    eur_foil: str | None = None
    tix: str | None = None

    @classmethod
    def from_scryfall(cls, data: dict[str, Any] | None) -> "CardPrices":
        data = data or {}
        return cls(
            usd=_price(data.get("usd")),
            usd_foil=_price(data.get("usd_foil")),
            usd_etched=_price(data.get("usd_etched")),
            eur=_price(data.get("eur")),
            eur_foil=_price(data.get("eur_foil")),
            tix=_price(data.get("tix")),
        )

    @property
    def has_usd(self) -> bool:
        """True if the record carries a direct (non-foil) USD price."""
        return self.usd is not None

    @property
    def has_any_price(self) -> bool:
        """True if any recognized price field is present."""
        return any(getattr(self, name) is not None for name in RECOGNIZED_PRICE_FIELDS)


@dataclass(frozen=True, slots=True)
class CardFace:
    """One face of a multi-faced card."""

    name: str
    type_line: str = ""
    oracle_text: str = ""
    mana_cost: str = ""
    image_uris: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_scryfall(cls, data: dict[str, Any]) -> "CardFace":
        return cls(
            name=str(data.get("name", "")),
            type_line=str(data.get("type_line", "")),
            oracle_text=str(data.get("oracle_text", "")),
            mana_cost=str(data.get("mana_cost", "")),
            image_uris=dict(data.get("image_uris") or {}),
        )


@dataclass(frozen=True, slots=True)
class CardRecord:
    """
    Canonical card record from the catalog.

    Attributes:
        name: Canonical name (may differ from the name used to look it up)
        type_line: Full type line; for multi-faced cards both faces joined by "//"
        oracle_text: Rules text of single-faced cards, empty for multi-faced ones
        mana_cost: Mana cost string (e.g., "{1}{G}")
        cmc: Mana value
        color_identity: Color identity symbols (W, U, B, R, G)
        keywords: Keyword abilities as reported by the catalog
        faces: Sub-faces, each optionally carrying images and rules text
        prices: Market prices for this printing
        image_uris: Top-level images (absent on most double-faced cards)
        legalities: Format -> legality status
        games: Platforms the printing exists on (paper, arena, mtgo)
        rarity: Printing rarity
        set_code: Printing set code
        edhrec_rank: EDHREC popularity rank, if ranked
    """

    name: str
    type_line: str = ""
    oracle_text: str = ""
    mana_cost: str = ""
    cmc: float = 0.0
    color_identity: frozenset[str] = frozenset()
    keywords: tuple[str, ...] = ()
    faces: tuple[CardFace, ...] = ()
    prices: CardPrices = field(default_factory=CardPrices)
    image_uris: dict[str, str] = field(default_factory=dict)
    legalities: dict[str, str] = field(default_factory=dict)
    games: tuple[str, ...] = ()
    rarity: str = ""
    set_code: str = ""
    edhrec_rank: int | None = None

    @classmethod
    def from_scryfall(cls, data: dict[str, Any]) -> "CardRecord":
        """Build a record from a catalog card object."""
        faces = tuple(CardFace.from_scryfall(face) for face in data.get("card_faces") or [])
        edhrec_rank = data.get("edhrec_rank")
        return cls(
            name=str(data["name"]),
            type_line=str(data.get("type_line", "")),
            oracle_text=str(data.get("oracle_text", "")),
            mana_cost=str(data.get("mana_cost", "")),
            cmc=float(data.get("cmc") or 0),
            color_identity=frozenset(data.get("color_identity") or []),
            keywords=tuple(data.get("keywords") or []),
            faces=faces,
            prices=CardPrices.from_scryfall(data.get("prices")),
            image_uris=dict(data.get("image_uris") or {}),
            legalities=dict(data.get("legalities") or {}),
            games=tuple(data.get("games") or []),
            rarity=str(data.get("rarity", "")),
            set_code=str(data.get("set", "")),
            edhrec_rank=int(edhrec_rank) if edhrec_rank is not None else None,
        )

    @property
    def face_names(self) -> tuple[str, ...]:
        """Names of every face (empty for single-faced cards)."""
        return tuple(face.name for face in self.faces if face.name)


@dataclass(frozen=True, slots=True)
class SearchPage:
    """One page of a catalog search."""

    cards: list[CardRecord]
    has_more: bool = False
    total_cards: int = 0
