"""Tests for card record read helpers."""

from commandforge.models.card import CardFace, CardPrices, CardRecord
from commandforge.services.card_text import (
    PLACEHOLDER_IMAGE_URL,
    back_face_image_url,
    card_price,
    front_face_type_line,
    image_url,
    is_double_faced,
    oracle_text,
)

TRANSFORM = CardRecord(
    name="Delver of Secrets // Insectile Aberration",
    type_line="Creature — Human Wizard // Creature — Human Insect",
    faces=(
        CardFace(
            name="Delver of Secrets",
            type_line="Creature — Human Wizard",
            oracle_text="At the beginning of your upkeep, look at the top card.",
            image_uris={"normal": "https://img/front.jpg"},
        ),
        CardFace(
            name="Insectile Aberration",
            type_line="Creature — Human Insect",
            oracle_text="Flying",
            image_uris={"normal": "https://img/back.jpg"},
        ),
    ),
)

SPLIT = CardRecord(
    name="Fire // Ice",
    type_line="Instant // Instant",
    image_uris={"normal": "https://img/fire-ice.jpg"},
    faces=(
        CardFace(name="Fire", oracle_text="Fire deals 2 damage divided as you choose."),
        CardFace(name="Ice", oracle_text="Tap target permanent."),
    ),
)

SOL_RING = CardRecord(
    name="Sol Ring",
    type_line="Artifact",
    oracle_text="{T}: Add {C}{C}.",
    image_uris={"normal": "https://img/sol-ring.jpg", "small": "https://img/sol-ring-s.jpg"},
)


class TestImages:
    def test_top_level_image(self) -> None:
        assert image_url(SOL_RING) == "https://img/sol-ring.jpg"
        assert image_url(SOL_RING, "small") == "https://img/sol-ring-s.jpg"

    def test_front_face_image(self) -> None:
        assert image_url(TRANSFORM) == "https://img/front.jpg"

    def test_placeholder(self) -> None:
        assert image_url(CardRecord(name="Nothing")) == PLACEHOLDER_IMAGE_URL

    def test_back_face(self) -> None:
        assert is_double_faced(TRANSFORM)
        assert back_face_image_url(TRANSFORM) == "https://img/back.jpg"

    def test_split_card_is_not_double_faced(self) -> None:
        assert not is_double_faced(SPLIT)
        assert back_face_image_url(SPLIT) is None
        assert back_face_image_url(SOL_RING) is None


class TestOracleText:
    def test_single_faced(self) -> None:
        assert oracle_text(SOL_RING) == "{T}: Add {C}{C}."

    def test_joins_faces(self) -> None:
        assert oracle_text(SPLIT) == (
            "Fire deals 2 damage divided as you choose.\n\nTap target permanent."
        )


class TestFrontFaceTypeLine:
    def test_from_face(self) -> None:
        assert front_face_type_line(TRANSFORM) == "Creature — Human Wizard"

    def test_split_type_line(self) -> None:
        assert front_face_type_line(SPLIT) == "Instant"

    def test_normal_card(self) -> None:
        assert front_face_type_line(SOL_RING) == "Artifact"


class TestCardPrice:
    def test_prefers_non_foil(self) -> None:
        record = CardRecord(name="X", prices=CardPrices(usd="1.00", usd_foil="5.00"))

        assert card_price(record) == "1.00"

    def test_falls_back_through_finishes(self) -> None:
        assert card_price(CardRecord(name="X", prices=CardPrices(usd_foil="5.00"))) == "5.00"
        assert card_price(CardRecord(name="X", prices=CardPrices(usd_etched="7.00"))) == "7.00"

    def test_eur(self) -> None:
        record = CardRecord(name="X", prices=CardPrices(usd="1.00", eur_foil="3.00"))

        assert card_price(record, "EUR") == "3.00"

    def test_no_price(self) -> None:
        assert card_price(CardRecord(name="X", prices=CardPrices(tix="0.01"))) is None
