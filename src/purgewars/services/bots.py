from __future__ import annotations

import random
from dataclasses import dataclass

from purgewars.engine.deck import create_starter_deck
from purgewars.engine.types import CLASSES, FACTIONS, Card, CardCatalog, ClassType, Faction

BOT_NAMES: dict[Faction, tuple[str, ...]] = {
    "angel": ("Gabriel", "Michael", "Raphael", "Uriel", "Zadkiel"),
    "demon": ("Baal", "Malphas", "Belial", "Asmodeus", "Valefor"),
}


@dataclass(frozen=True)
class BotPlayer:
    id: str
    username: str
    faction: Faction
    player_class: ClassType
    level: int
    deck: tuple[Card, ...]
    is_bot: bool = True


def generate_random_bot(
    catalog: CardCatalog,
    rng: random.Random,
    faction: Faction | None = None,
) -> BotPlayer:
    """Cosmetic opponent: flavoured name, random class and level, starter deck."""
    chosen = faction or FACTIONS[rng.randrange(len(FACTIONS))]
    player_class = CLASSES[rng.randrange(len(CLASSES))]
    names = BOT_NAMES[chosen]
    return BotPlayer(
        id=f"bot_{rng.randrange(16**8):08x}",
        username=names[rng.randrange(len(names))],
        faction=chosen,
        player_class=player_class,
        level=rng.randint(1, 10),
        deck=tuple(create_starter_deck(catalog, chosen, player_class)),
    )
