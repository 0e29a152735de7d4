from __future__ import annotations

import random
from collections import Counter

import pytest

from purgewars.engine.deck import (
    STARTER_DECK_LIMIT,
    create_starter_deck,
    draw_card,
    shuffle_deck,
)
from purgewars.engine.types import Card, CardCatalog
from purgewars.paths import get_paths
from purgewars.services.content import ContentService


def _load_catalog() -> CardCatalog:
    paths = get_paths()
    content = ContentService(paths.data_dir, paths.schema_dir)
    return content.load_catalog()


def _cards(prefix: str, n: int) -> list[Card]:
    return [
        Card(id=f"{prefix}_{i}", name=f"{prefix}_{i}", description="", faction="angel",
             type="creature", rarity="common", cost=1, attack=1)
        for i in range(n)
    ]


def test_starter_deck_shape() -> None:
    catalog = _load_catalog()
    deck = create_starter_deck(catalog, "angel", "mage")

    assert len(deck) <= STARTER_DECK_LIMIT
    # 3 + 3 + 2 + 1 + 2 copies of the faction pool, one class card
    assert len(deck) == 12
    class_cards = [c for c in deck if any(a.effect == "class_mage" for a in c.abilities)]
    assert len(class_cards) == 1
    assert class_cards[0].name == "Mage Special"
    assert deck[-1] == class_cards[0]

    per_name = Counter(c.name for c in deck)
    assert max(per_name.values()) <= 3
    assert per_name["Guardian Angel"] == 3
    assert per_name["Sacred Sword"] == 2
    assert per_name["Seraph"] == 1

    assert len({c.id for c in deck}) == len(deck)
    assert all(c.faction == "angel" for c in deck)


def test_starter_deck_keeps_template_order() -> None:
    catalog = _load_catalog()
    deck = create_starter_deck(catalog, "demon", "warrior")
    names = [c.name for c in deck]
    assert names[:3] == ["Imp", "Imp", "Imp"]
    assert names[3:6] == ["Hellfire", "Hellfire", "Hellfire"]
    assert names[-1] == "Warrior Special"


def test_starter_deck_truncates_in_template_order() -> None:
    catalog = _load_catalog()
    big_pool = tuple(
        Card(id="", name=f"Common {i}", description="", faction="angel",
             type="creature", rarity="common", cost=1, attack=1)
        for i in range(8)
    )
    big = CardCatalog(faction_cards={"angel": big_pool, "demon": big_pool}, classes=catalog.classes)

    deck = create_starter_deck(big, "angel", "shaman")
    assert len(deck) == STARTER_DECK_LIMIT
    # 8 commons * 3 = 24 copies: the first 20 survive, the class card is cut.
    assert [c.name for c in deck[-2:]] == ["Common 6", "Common 6"]
    assert not any(a.effect == "class_shaman" for c in deck for a in c.abilities)


def test_starter_deck_rejects_unknown_class() -> None:
    catalog = _load_catalog()
    with pytest.raises(ValueError):
        create_starter_deck(catalog, "angel", "bard")  # type: ignore[arg-type]


def test_shuffle_is_a_permutation() -> None:
    deck = _cards("c", 20)
    shuffled = shuffle_deck(deck, random.Random(7))
    assert sorted(c.id for c in shuffled) == sorted(c.id for c in deck)
    assert [c.id for c in deck] == [f"c_{i}" for i in range(20)]

    again = shuffle_deck(deck, random.Random(7))
    assert [c.id for c in again] == [c.id for c in shuffled]


def test_draw_takes_front_card() -> None:
    hand = _cards("h", 2)
    deck = _cards("d", 3)
    res = draw_card(hand, deck, [])
    assert res.drawn_card is not None
    assert res.drawn_card.id == "d_0"
    assert [c.id for c in res.hand] == ["h_0", "h_1", "d_0"]
    assert [c.id for c in res.deck] == ["d_1", "d_2"]
    assert not res.recycled
    # inputs untouched
    assert len(hand) == 2 and len(deck) == 3


def test_draw_at_hand_cap_is_a_no_op() -> None:
    hand = _cards("h", 7)
    deck = _cards("d", 3)
    graveyard = _cards("g", 2)
    res = draw_card(hand, deck, graveyard, hand_cap=7)
    assert res.drawn_card is None
    assert not res.recycled
    assert res.hand == hand and res.deck == deck and res.graveyard == graveyard


def test_draw_recycles_graveyard_when_deck_is_empty() -> None:
    hand = _cards("h", 1)
    graveyard = _cards("g", 4)
    res = draw_card(hand, [], graveyard, random.Random(3))
    assert res.recycled
    assert res.drawn_card is not None
    assert res.graveyard == []
    assert len(res.hand) + len(res.deck) == len(hand) + len(graveyard)
    assert sorted(c.id for c in res.hand[1:] + res.deck) == sorted(c.id for c in graveyard)


def test_draw_with_nothing_left() -> None:
    hand = _cards("h", 1)
    res = draw_card(hand, [], [])
    assert res.drawn_card is None
    assert not res.recycled
    assert res.hand == hand


def test_draw_never_creates_cards() -> None:
    rng = random.Random(11)
    hand: list[Card] = []
    deck = _cards("d", 5)
    graveyard: list[Card] = []
    for _ in range(30):
        before = len(hand) + len(deck) + len(graveyard)
        res = draw_card(hand, deck, graveyard, rng, hand_cap=7)
        hand, deck, graveyard = res.hand, res.deck, res.graveyard
        assert len(hand) + len(deck) + len(graveyard) == before
        # discard a card now and then so the graveyard fills up
        if len(hand) >= 3:
            graveyard.append(hand.pop(0))
