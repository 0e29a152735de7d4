from __future__ import annotations

from .actions import PassAction, PlayCardAction
from .match import MatchState, StepResult, playable_cards, step


def choose_card_id(state: MatchState) -> str | None:
    """Pick uniformly among the opponent's affordable cards, or None."""
    options = playable_cards(state, "opponent")
    if not options:
        return None
    return options[state.ai_rng.randrange(len(options))].id


def resolve_opponent_turn(state: MatchState) -> StepResult:
    """Run the scripted opponent's turn: one affordable card, or nothing.

    Uses the match's AI RNG so a given seed replays the same choices.
    """
    if state.is_game_over or state.turn != "opponent":
        return step(state, PassAction(side="opponent"))
    card_id = choose_card_id(state)
    if card_id is None:
        return step(state, PassAction(side="opponent"))
    return step(state, PlayCardAction(side="opponent", card_id=card_id))
