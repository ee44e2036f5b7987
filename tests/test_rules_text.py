"""Tests for rules text parsing."""

import pytest

from commandforge.parsers.rules_text import parse_copy_limit, parse_number


class TestParseNumber:
    @pytest.mark.parametrize(
        ("token", "expected"),
        [("seven", 7), ("Nine", 9), ("twenty", 20), ("15", 15), ("many", None)],
    )
    def test_parse(self, token: str, expected: int | None) -> None:
        assert parse_number(token) == expected


class TestParseCopyLimit:
    def test_any_number(self) -> None:
        text = "A deck can have any number of cards named Relentless Rats."

        assert parse_copy_limit(text) == (True, None)

    def test_up_to_word(self) -> None:
        text = "A deck can have up to seven cards named Seven Dwarves."

        assert parse_copy_limit(text) == (True, 7)

    def test_up_to_nine(self) -> None:
        text = "A deck can have up to nine cards named Nazgûl."

        assert parse_copy_limit(text) == (True, 9)

    def test_case_insensitive(self) -> None:
        assert parse_copy_limit("A DECK CAN HAVE ANY NUMBER OF CARDS NAMED X.") == (True, None)

    def test_embedded_in_longer_text(self) -> None:
        text = (
            "Flying\n"
            "A deck can have any number of cards named Shadowborn Apostle.\n"
            "{B}, Sacrifice"
        )

        assert parse_copy_limit(text) == (True, None)

    def test_no_exception(self) -> None:
        assert parse_copy_limit("Flying, haste") == (False, None)

    def test_unparseable_cap(self) -> None:
        assert parse_copy_limit("up to several cards named Foo") == (False, None)
