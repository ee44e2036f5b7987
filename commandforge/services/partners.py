"""
Partner mechanic classification.

Several rules let two commanders share a deck. Each variant pairs with a
different set of cards, so a commander is first classified into exactly one
PartnerKind and the kind then drives the partner search.
"""

import re
from enum import Enum

from commandforge.models.card import CardRecord
from commandforge.services.card_text import oracle_text


class PartnerKind(str, Enum):
    """How (if at all) a commander can be paired."""

    NONE = "none"
    PARTNER = "partner"  # generic Partner keyword
    PARTNER_WITH = "partner-with"  # Partner with <Name>
    FRIENDS_FOREVER = "friends-forever"
    CHOOSE_BACKGROUND = "choose-background"  # commander that may add a Background
    BACKGROUND = "background"  # the Background enchantment itself
    DOCTORS_COMPANION = "doctors-companion"  # pairs with a Time Lord Doctor
    DOCTOR = "doctor"  # Time Lord Doctor, pairs with a Doctor's companion


PARTNER_LABELS = {
    PartnerKind.NONE: "",
    PartnerKind.PARTNER: "Partner",
    PartnerKind.PARTNER_WITH: "Partner with",
    PartnerKind.FRIENDS_FOREVER: "Friends forever",
    PartnerKind.CHOOSE_BACKGROUND: "Choose a Background",
    PartnerKind.BACKGROUND: "Background",
    PartnerKind.DOCTORS_COMPANION: "Doctor's companion",
    PartnerKind.DOCTOR: "Doctor",
}

# Complementary kinds pair with each other; symmetric kinds pair with themselves
_PAIRS = {
    (PartnerKind.PARTNER, PartnerKind.PARTNER),
    (PartnerKind.FRIENDS_FOREVER, PartnerKind.FRIENDS_FOREVER),
    (PartnerKind.CHOOSE_BACKGROUND, PartnerKind.BACKGROUND),
    (PartnerKind.BACKGROUND, PartnerKind.CHOOSE_BACKGROUND),
    (PartnerKind.DOCTORS_COMPANION, PartnerKind.DOCTOR),
    (PartnerKind.DOCTOR, PartnerKind.DOCTORS_COMPANION),
}

# "Partner with Name" runs to end of line or the reminder text
_PARTNER_WITH = re.compile(r"Partner with ([A-Z][^(\n]+)")


def classify_partner(record: CardRecord) -> PartnerKind:
    """Classify a commander's partner mechanic."""
    text = oracle_text(record)
    keywords = set(record.keywords)

    if "Background" in record.type_line:
        return PartnerKind.BACKGROUND
    if "Choose a Background" in text:
        return PartnerKind.CHOOSE_BACKGROUND
    if "Doctor's companion" in keywords or "Doctor's companion" in text:
        return PartnerKind.DOCTORS_COMPANION
    if "Friends forever" in keywords:
        return PartnerKind.FRIENDS_FOREVER
    # Checked before the generic keyword: these cards also have "Partner"
    if _PARTNER_WITH.search(text):
        return PartnerKind.PARTNER_WITH
    if "Partner" in keywords:
        return PartnerKind.PARTNER
    if "Time Lord Doctor" in record.type_line:
        return PartnerKind.DOCTOR
    return PartnerKind.NONE


def partner_with_name(record: CardRecord) -> str | None:
    """Name of the specific partner of a "Partner with" card."""
    match = _PARTNER_WITH.search(oracle_text(record))
    return match.group(1).strip() if match else None


def are_valid_partners(first: CardRecord, second: CardRecord) -> bool:
    """True if the two commanders can legally share a deck."""
    if first.name == second.name:
        return False

    first_kind = classify_partner(first)
    second_kind = classify_partner(second)

    if first_kind is PartnerKind.PARTNER_WITH:
        return partner_with_name(first) == second.name
    if second_kind is PartnerKind.PARTNER_WITH:
        return partner_with_name(second) == first.name

    return (first_kind, second_kind) in _PAIRS


def partner_label(kind: PartnerKind) -> str:
    """Human readable label for a partner kind."""
    return PARTNER_LABELS[kind]
