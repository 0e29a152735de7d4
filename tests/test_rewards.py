from __future__ import annotations

import pytest

from purgewars.engine.actions import SurrenderAction
from purgewars.engine.match import MatchState, new_match, step
from purgewars.engine.rewards import (
    PlayerProgress,
    RegionDelta,
    RewardConfig,
    level_for_experience,
    settle_match,
)
from purgewars.engine.types import Card


def _deck(prefix: str) -> list[Card]:
    return [
        Card(id=f"{prefix}_{i}", name="Imp", description="", faction="demon",
             type="creature", rarity="common", cost=1, attack=2)
        for i in range(10)
    ]


def _finished(winner: str, region_id: str | None = None) -> MatchState:
    state = new_match(_deck("p"), _deck("o"), seed=1, region_id=region_id)
    loser = "opponent" if winner == "player" else "player"
    step(state, SurrenderAction(side=loser))  # type: ignore[arg-type]
    return state


def test_level_curve() -> None:
    assert level_for_experience(0) == 1
    assert level_for_experience(999) == 1
    assert level_for_experience(1000) == 2
    assert level_for_experience(2500) == 3


def test_win_payout_and_default_region() -> None:
    s = settle_match(_finished("player"), PlayerProgress(), "demon")
    assert s.player_won
    assert s.experience_gained == 100
    assert s.progress == PlayerProgress(level=1, experience=100, wins=1, losses=0)
    assert not s.leveled_up
    assert s.region_delta == RegionDelta(region_id="neutral_plains", faction="demon", points=15)


def test_win_credits_the_region_fought_over() -> None:
    s = settle_match(_finished("player", region_id="cursed_wasteland"), PlayerProgress(), "angel")
    assert s.region_delta is not None
    assert s.region_delta.region_id == "cursed_wasteland"
    assert s.region_delta.faction == "angel"


def test_loss_payout() -> None:
    progress = PlayerProgress(level=1, experience=40, wins=2, losses=1)
    s = settle_match(_finished("opponent"), progress, "angel")
    assert not s.player_won
    assert s.experience_gained == 25
    assert s.progress.experience == 65
    assert s.progress.losses == 2
    assert s.progress.wins == 2
    assert s.region_delta is None


def test_level_up_on_threshold() -> None:
    s = settle_match(_finished("player"), PlayerProgress(level=1, experience=950), "angel")
    assert s.progress.experience == 1050
    assert s.progress.level == 2
    assert s.leveled_up


def test_level_can_jump_several_tiers() -> None:
    cfg = RewardConfig(experience_per_level=10)
    s = settle_match(_finished("player"), PlayerProgress(), "angel", cfg)
    assert s.progress.level == 11
    assert s.leveled_up


def test_level_never_drops() -> None:
    s = settle_match(_finished("opponent"), PlayerProgress(level=5, experience=0), "angel")
    assert s.progress.level == 5
    assert not s.leveled_up


def test_settle_requires_finished_match() -> None:
    state = new_match(_deck("p"), _deck("o"), seed=2)
    with pytest.raises(ValueError):
        settle_match(state, PlayerProgress(), "angel")
