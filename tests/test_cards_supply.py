from __future__ import annotations

import random
from collections import Counter

import pytest

from royalgambit.engine.supply import CardSupply
from royalgambit.engine.types import RANK_VALUES, card_from_id, full_deck


def test_full_deck_has_52_unique_cards() -> None:
    deck = full_deck()
    assert len(deck) == 52
    assert len({c.id for c in deck}) == 52
    assert set(Counter(c.suit for c in deck).values()) == {13}
    assert set(Counter(c.rank for c in deck).values()) == {4}


def test_card_ids_and_parsing() -> None:
    assert card_from_id("H5").suit == "hearts"
    assert card_from_id("SA").is_ace
    assert card_from_id("D10").rank == "10"
    assert card_from_id("cq").id == "CQ"
    for bad in ("", "X9", "H1", "S11", "D"):
        with pytest.raises(ValueError):
            card_from_id(bad)


def test_rank_order_is_ace_high() -> None:
    assert RANK_VALUES["A"] == 14
    assert RANK_VALUES["K"] == 13
    assert RANK_VALUES["J"] == 11
    assert RANK_VALUES["2"] == 2
    assert card_from_id("HK").value == card_from_id("SK").value


def test_deal_more_than_available_returns_all() -> None:
    supply = CardSupply(rng=random.Random(1))
    dealt = supply.deal_cards(60)
    assert len(dealt) == 52
    assert supply.draw_pile_size == 0
    assert supply.deal_cards(3) == []
    assert supply.draw_card() is None


def test_draw_reshuffles_discard_once_empty() -> None:
    events: list[str] = []
    supply = CardSupply(rng=random.Random(2), trace=lambda t, p: events.append(t))
    dealt = supply.deal_cards(52)
    for c in dealt[:4]:
        supply.discard_card(c)

    card = supply.draw_card()
    assert card in dealt[:4]
    assert supply.draw_pile_size == 3
    assert supply.discard_pile_size == 0
    assert "DECK_RESHUFFLED" in events


def test_reset_rebuilds_full_pile() -> None:
    supply = CardSupply(rng=random.Random(3))
    for c in supply.deal_cards(10):
        supply.discard_card(c)
    supply.reset()
    assert supply.draw_pile_size == 52
    assert supply.discard_pile_size == 0


def test_take_pulls_specific_card() -> None:
    supply = CardSupply(rng=random.Random(4))
    card = supply.take("SA")
    assert card is not None and card.id == "SA"
    assert supply.take("SA") is None
    assert supply.draw_pile_size == 51


def test_conservation_under_random_operations() -> None:
    rng = random.Random(99)
    supply = CardSupply(rng=random.Random(5))
    held = supply.deal_cards(16)

    for _ in range(500):
        op = rng.choice(["draw", "deal", "discard"])
        if op == "draw":
            card = supply.draw_card()
            if card is not None:
                held.append(card)
        elif op == "deal":
            held.extend(supply.deal_cards(rng.randint(0, 4)))
        elif held:
            supply.discard_card(held.pop(rng.randrange(len(held))))

        everything = [c.id for c in supply.draw_pile + supply.discard_pile] + [c.id for c in held]
        assert len(everything) == 52
        assert len(set(everything)) == 52
