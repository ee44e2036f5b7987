"""
Rules text parsing.

Extracts per-card deck-construction exceptions from oracle text:

    "A deck can have any number of cards named Relentless Rats."  -> unlimited
    "A deck can have up to seven cards named Seven Dwarves."      -> 7
"""

import re

NUMBER_WORDS = {
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
    "ten": 10,
    "eleven": 11,
    "twelve": 12,
    "thirteen": 13,
    "fourteen": 14,
    "fifteen": 15,
    "sixteen": 16,
    "seventeen": 17,
    "eighteen": 18,
    "nineteen": 19,
    "twenty": 20,
}

_ANY_NUMBER = re.compile(r"any number of cards named", re.IGNORECASE)
_UP_TO = re.compile(r"up to (\w+) cards named", re.IGNORECASE)


def parse_number(token: str) -> int | None:
    """Parse a number word (one..twenty) or a digit string."""
    token = token.lower()
    if token.isdigit():
        return int(token)
    return NUMBER_WORDS.get(token)


def parse_copy_limit(text: str) -> tuple[bool, int | None]:
    """
    Parse a "more than one copy allowed" clause.

    Args:
        text: Oracle text of a card (all faces joined)

    Returns:
        (matched, cap). cap is None when any number of copies is allowed.
        (False, None) when the text grants no exception.
    """
    if _ANY_NUMBER.search(text):
        return True, None

    match = _UP_TO.search(text)
    if match:
        cap = parse_number(match.group(1))
        if cap is not None:
            return True, cap

    return False, None
