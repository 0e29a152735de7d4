from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Literal

Faction = Literal["angel", "demon"]
CardType = Literal["creature", "spell", "equipment"]
Rarity = Literal["common", "rare", "epic", "legendary"]
AbilityType = Literal["passive", "active", "triggered"]
ClassType = Literal["mage", "warrior", "paladin", "necromancer", "shaman"]
Side = Literal["player", "opponent"]

FACTIONS: tuple[Faction, ...] = ("angel", "demon")
CLASSES: tuple[ClassType, ...] = ("mage", "warrior", "paladin", "necromancer", "shaman")


def other_faction(faction: Faction) -> Faction:
    return "demon" if faction == "angel" else "angel"


@dataclass(frozen=True)
class Ability:
    name: str
    description: str
    type: AbilityType
    effect: str

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "description": self.description,
            "type": self.type,
            "effect": self.effect,
        }

    @staticmethod
    def from_dict(d: Mapping[str, object]) -> "Ability":
        return Ability(
            name=str(d.get("name", "")),
            description=str(d.get("description", "")),
            type=str(d.get("type", "passive")),  # type: ignore[arg-type]
            effect=str(d.get("effect", "")),
        )


@dataclass(frozen=True)
class Card:
    """A single physical card. Copies share everything but `id`."""

    id: str
    name: str
    description: str
    faction: Faction
    type: CardType
    rarity: Rarity
    cost: int
    abilities: tuple[Ability, ...] = ()
    attack: int | None = None
    health: int | None = None

    def with_id(self, card_id: str) -> "Card":
        return Card(
            id=card_id,
            name=self.name,
            description=self.description,
            faction=self.faction,
            type=self.type,
            rarity=self.rarity,
            cost=self.cost,
            abilities=self.abilities,
            attack=self.attack,
            health=self.health,
        )

    def to_dict(self) -> dict[str, object]:
        d: dict[str, object] = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "faction": self.faction,
            "type": self.type,
            "rarity": self.rarity,
            "cost": self.cost,
            "abilities": [a.to_dict() for a in self.abilities],
        }
        if self.attack is not None:
            d["attack"] = self.attack
        if self.health is not None:
            d["health"] = self.health
        return d

    @staticmethod
    def from_dict(d: Mapping[str, object]) -> "Card":
        abilities_raw = d.get("abilities", [])
        abilities: list[Ability] = []
        if isinstance(abilities_raw, list):
            for a in abilities_raw:
                if isinstance(a, dict):
                    abilities.append(Ability.from_dict(a))
        attack = d.get("attack")
        health = d.get("health")
        cost = d.get("cost", 0)
        return Card(
            id=str(d.get("id", "")),
            name=str(d.get("name", "")),
            description=str(d.get("description", "")),
            faction=str(d.get("faction", "angel")),  # type: ignore[arg-type]
            type=str(d.get("type", "creature")),  # type: ignore[arg-type]
            rarity=str(d.get("rarity", "common")),  # type: ignore[arg-type]
            cost=int(cost) if isinstance(cost, int) else 0,
            abilities=tuple(abilities),
            attack=attack if isinstance(attack, int) else None,
            health=health if isinstance(health, int) else None,
        )


@dataclass(frozen=True)
class ClassInfo:
    """Class table entry. Bonuses are declared content; combat does not apply them."""

    id: ClassType
    name: str
    description: str
    health_bonus: int
    mana_bonus: int
    special_ability: str


@dataclass(frozen=True)
class CardCatalog:
    """Immutable starter content used by deck construction."""

    faction_cards: dict[Faction, tuple[Card, ...]]
    classes: dict[ClassType, ClassInfo]

    def templates_for(self, faction: Faction) -> Sequence[Card]:
        return self.faction_cards[faction]

    def class_info(self, player_class: ClassType) -> ClassInfo:
        return self.classes[player_class]
