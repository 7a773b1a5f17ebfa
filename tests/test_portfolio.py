from pathlib import Path

from herodeck.ingest import HeroRecord
from herodeck.pool import OwnedCard, expand_portfolio, load_portfolio_csv


def _heroes() -> list[HeroRecord]:
    return [
        HeroRecord(hero_key="ALICE", handle="alice", name="Alice", stars=4),
        HeroRecord(hero_key="BOB", handle="bob", name="", stars=2),
    ]


def test_expand_portfolio_without_owned_cards_uses_catalog():
    cards = expand_portfolio(_heroes(), [])

    assert [card.card_id for card in cards] == ["ALICE", "BOB"]
    assert [card.stars for card in cards] == [4, 2]
    assert cards[1].name == "bob"


def test_expand_portfolio_one_card_per_copy():
    owned = [
        OwnedCard(card_id="101", hero_key="ALICE"),
        OwnedCard(card_id="102", hero_key="alice"),
        OwnedCard(card_id="201", hero_key="BOB"),
        OwnedCard(card_id="201", hero_key="BOB"),
        OwnedCard(card_id="999", hero_key="GHOST"),
    ]

    cards = expand_portfolio(_heroes(), owned)

    assert [(card.card_id, card.hero_key, card.stars) for card in cards] == [
        ("101", "ALICE", 4),
        ("102", "ALICE", 4),
        ("201", "BOB", 2),
    ]


def test_load_portfolio_csv_drops_incomplete_rows(tmp_path: Path):
    path = tmp_path / "portfolio.csv"
    path.write_text("card_id,hero_key\n101,alice\n,bob\n102,\n103, Bob \n", encoding="utf-8")

    owned = load_portfolio_csv(path)

    assert owned == [
        OwnedCard(card_id="101", hero_key="ALICE"),
        OwnedCard(card_id="103", hero_key="BOB"),
    ]


def test_expand_portfolio_catalog_skips_repeated_heroes():
    heroes = _heroes() + [HeroRecord(hero_key="ALICE", handle="alice", name="Alice again", stars=1)]

    cards = expand_portfolio(heroes, [])

    assert [(card.card_id, card.stars) for card in cards] == [("ALICE", 4), ("BOB", 2)]
    assert cards[0].name == "Alice"


def test_expand_portfolio_with_repeated_hero_rows_keeps_unique_copies():
    heroes = _heroes() + [HeroRecord(hero_key="BOB", handle="bob", name="", stars=2)]

    cards = expand_portfolio(heroes, [OwnedCard(card_id="201", hero_key="BOB")])

    assert [card.card_id for card in cards] == ["201"]
