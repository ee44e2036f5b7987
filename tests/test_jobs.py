"""Tests for the card list prefetch job."""

import logging
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from commandforge.jobs.prefetch_cards import main, read_card_names, run_prefetch
from commandforge.models.card import CardRecord
from commandforge.services.catalog_client import CatalogClient


@pytest.fixture
def decklist(tmp_path: Path) -> Path:
    path = tmp_path / "decklist.txt"
    path.write_text(
        "# Commander\n"
        "1 Atraxa, Praetors' Voice\n"
        "\n"
        "Sol Ring\n"
        "4x Lightning Bolt\n"
        "  Arcane Signet  \n",
        encoding="utf-8",
    )
    return path


class TestReadCardNames:
    def test_reads_names(self, decklist: Path) -> None:
        names = read_card_names(decklist)

        assert names == [
            "Atraxa, Praetors' Voice",
            "Sol Ring",
            "Lightning Bolt",
            "Arcane Signet",
        ]

    def test_name_starting_with_digits_is_kept(self, tmp_path: Path) -> None:
        path = tmp_path / "numeric.txt"
        path.write_text(
            "1996 World Champion\n"
            "1 1996 World Champion\n"
            "2x 1996 World Champion\n"
            "12 Relentless Rats\n",
            encoding="utf-8",
        )

        assert read_card_names(path) == [
            "1996 World Champion",
            "1996 World Champion",
            "1996 World Champion",
            "Relentless Rats",
        ]

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.txt"
        path.write_text("", encoding="utf-8")

        assert read_card_names(path) == []


class TestRunPrefetch:
    async def test_logs_progress_and_missing(
        self, catalog: CatalogClient, scryfall, make_card, collection_from, not_found, caplog
    ) -> None:
        scryfall.post("/cards/collection").mock(
            side_effect=collection_from({"Sol Ring": make_card("Sol Ring", usd="1.00")})
        )
        scryfall.get("/cards/search").mock(return_value=not_found())
        scryfall.get("/cards/named").mock(return_value=not_found())

        with caplog.at_level(logging.INFO, logger="commandforge.jobs.prefetch_cards"):
            cards = await run_prefetch(["Sol Ring", "Not A Card"], catalog)

        assert list(cards) == ["Sol Ring"]
        assert "Fetched 2/2" in caplog.text
        assert "Could not resolve 1 names: Not A Card" in caplog.text

    async def test_nothing_missing(self, catalog: CatalogClient, caplog) -> None:
        catalog.cache.put("Sol Ring", CardRecord(name="Sol Ring"))

        with caplog.at_level(logging.INFO, logger="commandforge.jobs.prefetch_cards"):
            cards = await run_prefetch(["Sol Ring"], catalog)

        assert list(cards) == ["Sol Ring"]
        assert "Could not resolve" not in caplog.text


class TestMain:
    def test_main_resolves_file(self, decklist: Path) -> None:
        catalog = MagicMock()
        catalog.__aenter__ = AsyncMock(return_value=catalog)
        catalog.__aexit__ = AsyncMock(return_value=None)
        catalog.resolve_many = AsyncMock(return_value={})

        with (
            patch("sys.argv", ["commandforge-prefetch", str(decklist)]),
            patch("commandforge.jobs.prefetch_cards.CatalogClient", return_value=catalog),
        ):
            main()

        names = catalog.resolve_many.call_args.args[0]
        assert names == [
            "Atraxa, Praetors' Voice",
            "Sol Ring",
            "Lightning Bolt",
            "Arcane Signet",
        ]
