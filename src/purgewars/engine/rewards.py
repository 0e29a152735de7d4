from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Mapping

from .match import MatchState
from .types import Faction


@dataclass(frozen=True)
class RewardConfig:
    experience_per_win: int = 100
    experience_per_loss: int = 25
    experience_per_level: int = 1000
    region_points: int = 15
    default_region_id: str = "neutral_plains"


@dataclass(frozen=True)
class PlayerProgress:
    """The persisted progression of the human side."""

    level: int = 1
    experience: int = 0
    wins: int = 0
    losses: int = 0

    @staticmethod
    def from_dict(d: Mapping[str, object]) -> "PlayerProgress":
        def _int(key: str, default: int) -> int:
            v = d.get(key, default)
            return int(v) if isinstance(v, int) else default

        return PlayerProgress(
            level=_int("level", 1),
            experience=_int("experience", 0),
            wins=_int("wins", 0),
            losses=_int("losses", 0),
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "level": self.level,
            "experience": self.experience,
            "wins": self.wins,
            "losses": self.losses,
        }


@dataclass(frozen=True)
class RegionDelta:
    region_id: str
    faction: Faction
    points: int


@dataclass(frozen=True)
class Settlement:
    player_won: bool
    experience_gained: int
    progress: PlayerProgress
    leveled_up: bool
    region_delta: RegionDelta | None


def level_for_experience(experience: int, per_level: int = 1000) -> int:
    return experience // per_level + 1


def settle_match(
    state: MatchState,
    progress: PlayerProgress,
    player_faction: Faction,
    config: RewardConfig | None = None,
) -> Settlement:
    """Compute the end-of-match payout for the human player.

    Only valid once the match is over. A victory also yields a region
    delta for the match's region (or the configured default).
    """
    cfg = config or RewardConfig()
    if not state.is_game_over or state.winner is None:
        raise ValueError("Match is not over yet.")

    won = state.winner == "player"
    gained = cfg.experience_per_win if won else cfg.experience_per_loss
    experience = progress.experience + gained
    level = max(progress.level, level_for_experience(experience, cfg.experience_per_level))
    updated = replace(
        progress,
        experience=experience,
        level=level,
        wins=progress.wins + (1 if won else 0),
        losses=progress.losses + (0 if won else 1),
    )

    delta = None
    if won:
        delta = RegionDelta(
            region_id=state.region_id or cfg.default_region_id,
            faction=player_faction,
            points=cfg.region_points,
        )

    return Settlement(
        player_won=won,
        experience_gained=gained,
        progress=updated,
        leveled_up=level > progress.level,
        region_delta=delta,
    )
