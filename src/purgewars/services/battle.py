from __future__ import annotations

import random

from purgewars.engine.actions import PassAction, PlayCardAction, SurrenderAction
from purgewars.engine.ai import resolve_opponent_turn
from purgewars.engine.match import MatchConfig, MatchState, StepResult, new_match, step
from purgewars.engine.rewards import RewardConfig, Settlement, settle_match
from purgewars.engine.types import other_faction
from purgewars.engine.world import PurgeResult

from .bots import BotPlayer, generate_random_bot
from .profile import ProfileService
from .telemetry import TelemetryService
from .world import WorldService


class BattleSession:
    """One match between the stored player and a generated bot.

    The caller drives it in two phases: a player action, then
    `resolve_opponent_turn()`. The payout is computed once, when the match
    ends, and then written to the profile and the world.
    """

    def __init__(
        self,
        profiles: ProfileService,
        world: WorldService,
        rng: random.Random,
        region_id: str | None = None,
        match_config: MatchConfig | None = None,
        reward_config: RewardConfig | None = None,
        telemetry: TelemetryService | None = None,
    ) -> None:
        self._profiles = profiles
        self._world = world
        self._rewards = reward_config or RewardConfig()
        self._telemetry = telemetry
        self._profile_saved = False
        self._world_saved = False

        profile = profiles.require()
        self.bot: BotPlayer = generate_random_bot(profiles.catalog, rng, other_faction(profile.faction))
        self.state: MatchState = new_match(
            profile.deck,
            self.bot.deck,
            seed=rng.randrange(2**31),
            config=match_config,
            player_name=profile.username,
            opponent_name=self.bot.username,
            region_id=region_id or self._rewards.default_region_id,
        )
        self.settlement: Settlement | None = None
        self.purge: PurgeResult | None = None

        if telemetry is not None:
            telemetry.log(
                "match_started",
                {
                    "seed": self.state.seed,
                    "region_id": self.state.region_id,
                    "opponent": self.bot.username,
                    "opponent_class": self.bot.player_class,
                },
            )

    def play_card(self, card_id: str) -> StepResult:
        return self._after(step(self.state, PlayCardAction(side="player", card_id=card_id)))

    def pass_turn(self) -> StepResult:
        return self._after(step(self.state, PassAction(side="player")))

    def surrender(self) -> StepResult:
        return self._after(step(self.state, SurrenderAction(side="player")))

    def resolve_opponent_turn(self) -> StepResult:
        return self._after(resolve_opponent_turn(self.state))

    def _after(self, result: StepResult) -> StepResult:
        if result.ok and self.state.is_game_over:
            self.commit()
        return result

    def commit(self) -> Settlement | None:
        """Compute the payout once and persist whatever is still unsaved.

        Raises StoreError if a write fails; calling again retries only the
        missing writes. Telemetry is emitted after the write it describes, so
        a failed log line never causes a second payout.
        """
        if not self.state.is_game_over:
            return None
        profile = self._profiles.require()
        if self.settlement is None:
            self.settlement = settle_match(self.state, profile.progress, profile.faction, self._rewards)
            if self._telemetry is not None:
                self._telemetry.log(
                    "match_ended",
                    {
                        "winner": self.state.winner,
                        "turns": self.state.turn_number,
                        "experience_gained": self.settlement.experience_gained,
                        "level": self.settlement.progress.level,
                    },
                )

        if not self._profile_saved:
            self._profiles.apply_settlement(self.settlement)
            self._profile_saved = True

        delta = self.settlement.region_delta
        if delta is not None and not self._world_saved:
            self.purge = self._world.apply_victory(delta.region_id, delta.faction, delta.points)
            self._world_saved = True
            self._world.record_victory(delta.region_id, delta.faction, delta.points, self.purge)
        self._world_saved = True
        return self.settlement
