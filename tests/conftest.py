import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest
import respx

from commandforge.services.catalog_client import CatalogClient

SCRYFALL = "https://api.scryfall.com"

CardFactory = Callable[..., dict[str, Any]]


def _make_card(
    name: str,
    *,
    usd: str | None = None,
    usd_foil: str | None = None,
    usd_etched: str | None = None,
    eur: str | None = None,
    eur_foil: str | None = None,
    tix: str | None = None,
    type_line: str = "Artifact",
    oracle_text: str = "",
    keywords: list[str] | None = None,
    color_identity: list[str] | None = None,
    card_faces: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Scryfall-like card object."""
    slug = name.lower().replace(" ", "-")
    card: dict[str, Any] = {
        "object": "card",
        "name": name,
        "type_line": type_line,
        "mana_cost": "{1}",
        "cmc": 1.0,
        "keywords": keywords or [],
        "color_identity": color_identity or [],
        "set": "cmm",
        "rarity": "rare",
        "prices": {
            "usd": usd,
            "usd_foil": usd_foil,
            "usd_etched": usd_etched,
            "eur": eur,
            "eur_foil": eur_foil,
            "tix": tix,
        },
    }
    if card_faces:
        card["card_faces"] = card_faces
    else:
        card["oracle_text"] = oracle_text
        card["image_uris"] = {"normal": f"https://cards.example/{slug}.jpg"}
    return card


@pytest.fixture
def make_card() -> CardFactory:
    """Factory for Scryfall card payloads."""
    return _make_card


@pytest.fixture
def scryfall():
    """respx router standing in for api.scryfall.com."""
    with respx.mock(base_url=SCRYFALL, assert_all_called=False) as router:
        yield router


@pytest.fixture
async def catalog():
    """Catalog client with no throttle spacing and no backoff waits."""
    client = CatalogClient(base_url=SCRYFALL, min_request_interval=0.0, backoff=0.0)
    yield client
    await client.aclose()


def search_response(cards: list[dict[str, Any]], has_more: bool = False) -> httpx.Response:
    return httpx.Response(
        200,
        json={"object": "list", "total_cards": len(cards), "has_more": has_more, "data": cards},
    )


def not_found_response() -> httpx.Response:
    return httpx.Response(
        404,
        json={"object": "error", "code": "not_found", "status": 404, "details": "No cards found"},
    )


def collection_handler(known: dict[str, dict[str, Any]]) -> Callable[[httpx.Request], httpx.Response]:
    """POST /cards/collection handler answering from a name -> payload dict."""

    def handler(request: httpx.Request) -> httpx.Response:
        identifiers = json.loads(request.content)["identifiers"]
        data = []
        not_found = []
        for identifier in identifiers:
            card = known.get(identifier["name"])
            if card is None:
                not_found.append({"name": identifier["name"]})
            else:
                data.append(card)
        return httpx.Response(200, json={"object": "list", "not_found": not_found, "data": data})

    return handler


@pytest.fixture
def search_ok() -> Callable[..., httpx.Response]:
    return search_response


@pytest.fixture
def not_found() -> Callable[[], httpx.Response]:
    return not_found_response


@pytest.fixture
def collection_from() -> Callable[[dict[str, dict[str, Any]]], Callable]:
    return collection_handler
