from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Mapping

from purgewars.engine.deck import create_starter_deck
from purgewars.engine.rewards import PlayerProgress, Settlement
from purgewars.engine.types import CLASSES, FACTIONS, Card, CardCatalog, ClassType, Faction

from .store import JsonStore

PROFILE_KEY = "player"


class ProfileError(RuntimeError):
    pass


@dataclass
class PlayerProfile:
    id: str
    username: str
    faction: Faction
    player_class: ClassType
    deck: list[Card]
    collection: list[Card]
    progress: PlayerProgress = field(default_factory=PlayerProgress)
    reputation: int = 0
    is_converted: bool = False
    created_at: str = ""

    @staticmethod
    def from_dict(d: Mapping[str, object]) -> "PlayerProfile":
        pid = d.get("id")
        username = d.get("username")
        faction = d.get("faction")
        player_class = d.get("class")
        if not isinstance(pid, str) or not isinstance(username, str):
            raise ProfileError("Invalid player profile")
        if faction not in FACTIONS or player_class not in CLASSES:
            raise ProfileError("Invalid faction or class in player profile")

        def _cards(key: str) -> list[Card]:
            raw = d.get(key, [])
            if not isinstance(raw, list):
                return []
            return [Card.from_dict(c) for c in raw if isinstance(c, dict)]

        rep = d.get("reputation", 0)
        created = d.get("created_at", "")
        return PlayerProfile(
            id=pid,
            username=username,
            faction=faction,  # type: ignore[arg-type]
            player_class=player_class,  # type: ignore[arg-type]
            deck=_cards("deck"),
            collection=_cards("collection"),
            progress=PlayerProgress.from_dict(d),
            reputation=int(rep) if isinstance(rep, int) else 0,
            is_converted=bool(d.get("is_converted", False)),
            created_at=created if isinstance(created, str) else "",
        )

    def to_dict(self) -> dict[str, object]:
        d: dict[str, object] = {
            "id": self.id,
            "username": self.username,
            "faction": self.faction,
            "class": self.player_class,
            "deck": [c.to_dict() for c in self.deck],
            "collection": [c.to_dict() for c in self.collection],
            "reputation": self.reputation,
            "is_converted": self.is_converted,
            "created_at": self.created_at,
        }
        d.update(self.progress.to_dict())
        return d


class ProfileService:
    def __init__(self, store: JsonStore, catalog: CardCatalog) -> None:
        self._store = store
        self.catalog = catalog
        self.profile: PlayerProfile | None = self._load()

    def _load(self) -> PlayerProfile | None:
        raw = self._store.get(PROFILE_KEY)
        if raw is None:
            return None
        if not isinstance(raw, dict):
            raise ProfileError("Stored player profile must be an object")
        return PlayerProfile.from_dict(raw)

    def require(self) -> PlayerProfile:
        if self.profile is None:
            raise ProfileError("No player profile exists yet.")
        return self.profile

    def create(
        self,
        username: str,
        faction: Faction,
        player_class: ClassType,
        now: datetime | None = None,
    ) -> PlayerProfile:
        name = username.strip()
        if not name:
            raise ProfileError("Username must not be empty.")
        deck = create_starter_deck(self.catalog, faction, player_class)
        profile = PlayerProfile(
            id=f"player_{uuid.uuid4().hex[:12]}",
            username=name,
            faction=faction,
            player_class=player_class,
            deck=deck,
            collection=list(deck),
            created_at=(now or datetime.now(tz=timezone.utc)).isoformat(),
        )
        self._store.set(PROFILE_KEY, profile.to_dict())
        self.profile = profile
        return profile

    def apply_settlement(self, settlement: Settlement) -> PlayerProfile:
        """Persist the new progression; memory only changes once the write lands."""
        current = self.require()
        updated = replace(current, progress=settlement.progress)
        self._store.set(PROFILE_KEY, updated.to_dict())
        self.profile = updated
        return updated
