from __future__ import annotations

from dataclasses import dataclass

from .types import Side


@dataclass(frozen=True)
class PlayCardAction:
    side: Side
    card_id: str


@dataclass(frozen=True)
class PassAction:
    side: Side = "player"


@dataclass(frozen=True)
class SurrenderAction:
    side: Side = "player"


Action = PlayCardAction | PassAction | SurrenderAction
