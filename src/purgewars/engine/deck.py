from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass

from .types import CLASSES, FACTIONS, Ability, Card, CardCatalog, ClassType, Faction, Rarity

STARTER_DECK_LIMIT = 20
HAND_CAP = 7

COPIES_BY_RARITY: dict[Rarity, int] = {
    "common": 3,
    "rare": 2,
    "epic": 1,
    "legendary": 1,
}


def class_card_template(catalog: CardCatalog, faction: Faction, player_class: ClassType) -> Card:
    info = catalog.class_info(player_class)
    return Card(
        id="",
        name=f"{info.name} Special",
        description=info.special_ability,
        faction=faction,
        type="spell",
        # Single copy per starter deck.
        rarity="epic",
        cost=2,
        abilities=(
            Ability(
                name=info.name,
                description=info.special_ability,
                type="active",
                effect=f"class_{player_class}",
            ),
        ),
    )


def create_starter_deck(catalog: CardCatalog, faction: Faction, player_class: ClassType) -> list[Card]:
    """Build the starter deck for a faction/class pair.

    Faction templates come first in their declared order, the class card last.
    Each template is copied by rarity and the result is cut to
    STARTER_DECK_LIMIT, so template order decides which copies survive.
    """
    if faction not in FACTIONS:
        raise ValueError(f"Unknown faction: {faction}")
    if player_class not in CLASSES:
        raise ValueError(f"Unknown class: {player_class}")

    templates = list(catalog.templates_for(faction))
    templates.append(class_card_template(catalog, faction, player_class))

    deck: list[Card] = []
    for index, template in enumerate(templates):
        copies = COPIES_BY_RARITY.get(template.rarity, 1)
        for copy in range(copies):
            deck.append(template.with_id(f"{faction}_{player_class}_{index}_{copy}"))
    return deck[:STARTER_DECK_LIMIT]


def shuffle_deck(deck: Sequence[Card], rng: random.Random | None = None) -> list[Card]:
    """Return a uniformly shuffled copy of `deck`; the input is left as is."""
    out = list(deck)
    (rng or random.Random()).shuffle(out)
    return out


@dataclass(frozen=True)
class DrawResult:
    hand: list[Card]
    deck: list[Card]
    graveyard: list[Card]
    drawn_card: Card | None
    recycled: bool


def draw_card(
    hand: Sequence[Card],
    deck: Sequence[Card],
    graveyard: Sequence[Card],
    rng: random.Random | None = None,
    hand_cap: int = HAND_CAP,
) -> DrawResult:
    """Draw the front card of `deck` into `hand`.

    An empty deck is refilled from a reshuffled graveyard first. Nothing is
    drawn when the hand is full or both piles are empty.
    """
    new_hand = list(hand)
    new_deck = list(deck)
    new_graveyard = list(graveyard)

    if len(new_hand) >= hand_cap:
        return DrawResult(new_hand, new_deck, new_graveyard, drawn_card=None, recycled=False)

    recycled = False
    if not new_deck and new_graveyard:
        new_deck = shuffle_deck(new_graveyard, rng)
        new_graveyard = []
        recycled = True

    if not new_deck:
        return DrawResult(new_hand, new_deck, new_graveyard, drawn_card=None, recycled=recycled)

    card = new_deck.pop(0)
    new_hand.append(card)
    return DrawResult(new_hand, new_deck, new_graveyard, drawn_card=card, recycled=recycled)
