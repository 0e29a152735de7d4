from __future__ import annotations


from .actions import Action, PassAction, PlayCardAction, SurrenderAction
from .match import CombatantState, MatchState


def action_to_dict(a: Action) -> dict[str, object]:
    if isinstance(a, PlayCardAction):
        return {"type": "play", "side": a.side, "card_id": a.card_id}
    if isinstance(a, PassAction):
        return {"type": "pass", "side": a.side}
    if isinstance(a, SurrenderAction):
        return {"type": "surrender", "side": a.side}
    # should be unreachable
    return {"type": "unknown"}


def action_from_dict(d: dict[str, object]) -> Action:
    kind = d.get("type")
    side = d.get("side", "player")
    if side not in ("player", "opponent"):
        raise ValueError(f"Invalid side: {side}")
    if kind == "play":
        card_id = d.get("card_id")
        if not isinstance(card_id, str):
            raise ValueError("play action needs a card_id")
        return PlayCardAction(side=side, card_id=card_id)  # type: ignore[arg-type]
    if kind == "pass":
        return PassAction(side=side)  # type: ignore[arg-type]
    if kind == "surrender":
        return SurrenderAction(side=side)  # type: ignore[arg-type]
    raise ValueError(f"Unknown action type: {kind}")


def _combatant_to_dict(c: CombatantState) -> dict[str, object]:
    return {
        "name": c.name,
        "health": c.health,
        "mana": c.mana,
        "hand": [card.id for card in c.hand],
        "deck": [card.id for card in c.deck],
        "graveyard": [card.id for card in c.graveyard],
    }


def snapshot(state: MatchState) -> dict[str, object]:
    """Return a JSON-serializable canonical snapshot of the current match state."""
    return {
        "seed": state.seed,
        "region_id": state.region_id,
        "turn": state.turn,
        "turn_number": state.turn_number,
        "is_game_over": state.is_game_over,
        "winner": state.winner,
        "player": _combatant_to_dict(state.player),
        "opponent": _combatant_to_dict(state.opponent),
        "battle_log": list(state.battle_log),
        "action_log": [action_to_dict(a) for a in state.action_log],
    }
