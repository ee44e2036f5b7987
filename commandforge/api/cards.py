"""
Card catalog API endpoints.

Thin HTTP surface over the shared CatalogClient. Not-found is a 404;
a catalog that cannot be reached is a 502, one that keeps rate limiting
us is a 503.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field

from commandforge.api.dependencies import get_catalog
from commandforge.models.card import CardRecord
from commandforge.models.errors import CatalogError, TransportFailureError
from commandforge.services.batch_dispatcher import dedupe_names
from commandforge.services.card_text import back_face_image_url, image_url, oracle_text
from commandforge.services.catalog_client import CatalogClient
from commandforge.services.partners import classify_partner

router = APIRouter(prefix="/cards", tags=["cards"])

Catalog = Annotated[CatalogClient, Depends(get_catalog)]


class CardResponse(BaseModel):
    """A card record as exposed over HTTP."""

    name: str
    type_line: str
    oracle_text: str
    mana_cost: str
    cmc: float
    color_identity: list[str]
    image_url: str
    back_image_url: str | None = None
    prices: dict[str, str | None] = Field(default_factory=dict)

    @classmethod
    def from_record(cls, record: CardRecord) -> "CardResponse":
        prices = record.prices
        return cls(
            name=record.name,
            type_line=record.type_line,
            oracle_text=oracle_text(record),
            mana_cost=record.mana_cost,
            cmc=record.cmc,
            color_identity=sorted(record.color_identity),
            image_url=image_url(record),
            back_image_url=back_face_image_url(record),
            prices={
                "usd": prices.usd,
                "usd_foil": prices.usd_foil,
                "usd_etched": prices.usd_etched,
                "eur": prices.eur,
                "eur_foil": prices.eur_foil,
            },
        )


class ResolveRequest(BaseModel):
    """Request body for bulk resolution."""

    names: list[str] = Field(default_factory=list, max_length=2000)


class ResolveResponse(BaseModel):
    """Resolved cards keyed by requested name, plus the names not found."""

    cards: dict[str, CardResponse]
    missing: list[str]


class AutocompleteResponse(BaseModel):
    data: list[str]


class PartnersResponse(BaseModel):
    commander: str
    partner_kind: str
    partners: list[CardResponse]


class GameChangersResponse(BaseModel):
    names: list[str]


class MultiCopyResponse(BaseModel):
    caps: dict[str, int | None]


def _catalog_error(e: CatalogError) -> HTTPException:
    """Map a catalog failure onto an HTTP error."""
    if isinstance(e, TransportFailureError):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message)


@router.get("/named", response_model=CardResponse)
async def get_named_card(
    catalog: Catalog,
    name: Annotated[str, Query(min_length=1)],
    fuzzy: bool = False,
) -> CardResponse:
    """Resolve a single card by name."""
    try:
        record = await (catalog.lookup_fuzzy(name) if fuzzy else catalog.resolve(name))
    except CatalogError as e:
        raise _catalog_error(e) from e

    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Card '{name}' not found",
        )
    return CardResponse.from_record(record)


@router.post("/resolve", response_model=ResolveResponse)
async def resolve_cards(catalog: Catalog, request: ResolveRequest) -> ResolveResponse:
    """Resolve many card names at once. Unknown names are listed as missing."""
    try:
        records = await catalog.resolve_many(request.names)
    except CatalogError as e:
        raise _catalog_error(e) from e

    requested = dedupe_names(request.names)
    return ResolveResponse(
        cards={name: CardResponse.from_record(record) for name, record in records.items()},
        missing=[name for name in requested if name not in records],
    )


@router.get("/autocomplete", response_model=AutocompleteResponse)
async def autocomplete(catalog: Catalog, q: str = "") -> AutocompleteResponse:
    """Card name completions for a partial name."""
    try:
        names = await catalog.autocomplete(q)
    except CatalogError as e:
        raise _catalog_error(e) from e
    return AutocompleteResponse(data=names)


@router.get("/partners", response_model=PartnersResponse)
async def partners(
    catalog: Catalog,
    commander: Annotated[str, Query(min_length=1)],
    q: str = "",
) -> PartnersResponse:
    """Legal partner candidates for a commander, optionally refined by free text."""
    try:
        record = await catalog.resolve(commander)
    except CatalogError as e:
        raise _catalog_error(e) from e

    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Commander '{commander}' not found",
        )

    candidates = await catalog.find_partners(record, q)
    return PartnersResponse(
        commander=record.name,
        partner_kind=classify_partner(record).value,
        partners=[CardResponse.from_record(card) for card in candidates],
    )


@router.get("/game-changers", response_model=GameChangersResponse)
async def game_changers(catalog: Catalog) -> GameChangersResponse:
    """Every card currently on the game changer list."""
    names = await catalog.game_changers()
    return GameChangersResponse(names=sorted(names))


@router.get("/multi-copy", response_model=MultiCopyResponse)
async def multi_copy(catalog: Catalog) -> MultiCopyResponse:
    """Cards allowed more than once per deck, with their copy caps (null = unlimited)."""
    caps = await catalog.multi_copy_caps()
    return MultiCopyResponse(caps=caps)
