"""
Read helpers over card records.

Double-faced cards keep their images and rules text on the faces rather
than on the record, so callers go through these instead of reading fields
directly.
"""

from typing import Literal

from commandforge.models.card import CardRecord

ImageSize = Literal["small", "normal", "large", "png", "art_crop", "border_crop"]
Currency = Literal["USD", "EUR"]

PLACEHOLDER_IMAGE_URL = (
    "https://cards.scryfall.io/normal/front/0/0/00000000-0000-0000-0000-000000000000.jpg"
)


def is_double_faced(record: CardRecord) -> bool:
    """True if both faces carry their own images (transform, MDFC)."""
    return len(record.faces) >= 2 and all(face.image_uris for face in record.faces[:2])


def image_url(record: CardRecord, size: ImageSize = "normal") -> str:
    """Image of the card, falling back to the front face, then a placeholder."""
    if record.image_uris.get(size):
        return record.image_uris[size]
    if record.faces and record.faces[0].image_uris.get(size):
        return record.faces[0].image_uris[size]
    return PLACEHOLDER_IMAGE_URL


def back_face_image_url(record: CardRecord, size: ImageSize = "normal") -> str | None:
    """Image of the back face, or None for single-faced cards."""
    if not is_double_faced(record):
        return None
    return record.faces[1].image_uris.get(size)


def oracle_text(record: CardRecord) -> str:
    """Rules text, joining every face for multi-faced cards."""
    if record.oracle_text:
        return record.oracle_text
    return "\n\n".join(face.oracle_text for face in record.faces if face.oracle_text)


def front_face_type_line(record: CardRecord) -> str:
    """Type line of the front face (the whole type line for normal cards)."""
    if record.faces and record.faces[0].type_line:
        return record.faces[0].type_line
    return record.type_line.split("//")[0].strip()


def card_price(record: CardRecord, currency: Currency = "USD") -> str | None:
    """Best available price in a currency, preferring non-foil."""
    prices = record.prices
    if currency == "EUR":
        return prices.eur or prices.eur_foil
    return prices.usd or prices.usd_foil or prices.usd_etched
