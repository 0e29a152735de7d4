from __future__ import annotations

import random
import re
from dataclasses import dataclass, field
from typing import Iterable, Literal, Sequence

from .actions import Action, PassAction, PlayCardAction, SurrenderAction
from .deck import draw_card, shuffle_deck
from .types import Card, Side

Event = dict[str, object]
ErrorCode = Literal["invalid_action", "insufficient_mana"]
Phase = Literal["player-turn", "opponent-turn", "game-over"]

DEFAULT_EFFECT_AMOUNT = 3

_LEADING_INT = re.compile(r"\s*[-+]?\d+")


@dataclass(frozen=True)
class MatchConfig:
    starting_health: int = 30
    starting_mana: int = 1
    max_mana: int = 10
    hand_cap: int = 7
    starting_hand: int = 4


@dataclass
class CombatantState:
    name: str
    health: int
    mana: int
    hand: list[Card]
    deck: list[Card]
    graveyard: list[Card] = field(default_factory=list)

    def find_in_hand(self, card_id: str) -> Card | None:
        for card in self.hand:
            if card.id == card_id:
                return card
        return None

    def card_count(self) -> int:
        return len(self.hand) + len(self.deck) + len(self.graveyard)


@dataclass
class StepResult:
    ok: bool
    events: list[Event]
    error: str | None = None
    code: ErrorCode | None = None
    details: dict[str, object] = field(default_factory=dict)


@dataclass
class MatchState:
    config: MatchConfig
    seed: int
    rng: random.Random
    ai_rng: random.Random
    player: CombatantState
    opponent: CombatantState
    region_id: str | None = None
    turn: Side = "player"
    turn_number: int = 1
    winner: Side | None = None
    is_game_over: bool = False
    battle_log: list[str] = field(default_factory=list)
    event_log: list[Event] = field(default_factory=list)
    action_log: list[Action] = field(default_factory=list)

    def combatant(self, side: Side) -> CombatantState:
        return self.player if side == "player" else self.opponent

    def opposing(self, side: Side) -> Side:
        return "opponent" if side == "player" else "player"

    @property
    def phase(self) -> Phase:
        if self.is_game_over:
            return "game-over"
        return "player-turn" if self.turn == "player" else "opponent-turn"


@dataclass(frozen=True)
class CardEffect:
    damage: int
    healing: int
    message: str


def _effect_amount(tag: str) -> int:
    # Amount is the segment after the first "_"; "damage_all_2" falls back to the default.
    parts = tag.split("_")
    if len(parts) < 2:
        return DEFAULT_EFFECT_AMOUNT
    m = _LEADING_INT.match(parts[1])
    amount = int(m.group()) if m else 0
    return amount or DEFAULT_EFFECT_AMOUNT


def apply_card_effect(card: Card, caster: str) -> CardEffect:
    """Compute the one-shot damage/healing of playing `card`.

    Creatures and equipment hit for their attack. Spells read the first
    ability's effect tag, and only when that ability is active. Passive
    abilities and equipment persistence are not modelled. Negative amounts
    parse but have no effect.
    """
    damage = 0
    healing = 0
    message = f"{caster} plays {card.name}"

    if card.type == "creature":
        damage = card.attack or 0
        message += f" and attacks for {damage} damage!"
    elif card.type == "spell":
        ability = card.abilities[0] if card.abilities else None
        if ability is not None and ability.type == "active":
            if "damage" in ability.effect:
                damage = _effect_amount(ability.effect)
                message += f" and deals {damage} damage!"
            elif "heal" in ability.effect:
                healing = _effect_amount(ability.effect)
                message += f" and heals {healing} health!"
            else:
                message += "."
        else:
            message += "."
    elif card.type == "equipment":
        damage = card.attack or 0
        message += f" and equips a weapon (+{damage} attack)!"

    return CardEffect(damage=damage, healing=healing, message=message)


def _reject(error: str, code: ErrorCode = "invalid_action", **details: object) -> StepResult:
    return StepResult(ok=False, events=[], error=error, code=code, details=dict(details))


def _log(state: MatchState, line: str) -> None:
    state.battle_log.append(line)


def _end_game(state: MatchState, winner: Side, reason: str) -> None:
    if state.is_game_over:
        return
    state.is_game_over = True
    state.winner = winner
    _log(state, f"{state.combatant(winner).name} wins!")
    state.event_log.append({"type": "GAME_ENDED", "winner": winner, "reason": reason})


def _draw_for(state: MatchState, side: Side) -> None:
    cs = state.combatant(side)
    res = draw_card(cs.hand, cs.deck, cs.graveyard, state.rng, state.config.hand_cap)
    cs.hand, cs.deck, cs.graveyard = res.hand, res.deck, res.graveyard
    if res.recycled:
        _log(state, f"{cs.name} reshuffles the graveyard into a new deck.")
        state.event_log.append({"type": "DECK_RECYCLED", "side": side, "deck_size": len(cs.deck)})
    if res.drawn_card is not None:
        state.event_log.append({"type": "CARD_DRAWN", "side": side, "card_id": res.drawn_card.id})


def _advance_turn(state: MatchState) -> None:
    if state.player.health <= 0:
        _end_game(state, "opponent", "health_0")
        return
    if state.opponent.health <= 0:
        _end_game(state, "player", "health_0")
        return

    state.turn = "player"
    state.turn_number += 1
    mana = min(state.config.max_mana, state.turn_number)
    state.player.mana = mana
    state.opponent.mana = mana
    _draw_for(state, "player")
    _draw_for(state, "opponent")
    state.event_log.append({"type": "TURN_STARTED", "turn": state.turn_number, "mana": mana})


def _play_card(state: MatchState, action: PlayCardAction) -> StepResult:
    if action.side != state.turn:
        return _reject("Not your turn.")
    cs = state.combatant(action.side)
    card = cs.find_in_hand(action.card_id)
    if card is None:
        return _reject("Card is not in hand.")
    if card.cost > cs.mana:
        return _reject(
            f"Not enough mana: {card.name} costs {card.cost}, {cs.mana} available.",
            code="insufficient_mana",
            required=card.cost,
            available=cs.mana,
        )

    start = len(state.event_log)
    enemy_side = state.opposing(action.side)
    enemy = state.combatant(enemy_side)

    cs.hand = [c for c in cs.hand if c.id != card.id]
    cs.mana -= card.cost
    cs.graveyard.append(card)

    effect = apply_card_effect(card, cs.name)
    _log(state, effect.message)
    state.event_log.append({"type": "CARD_PLAYED", "side": action.side, "card_id": card.id})
    if effect.damage > 0:
        enemy.health = max(0, enemy.health - effect.damage)
        state.event_log.append({"type": "DAMAGE", "side": enemy_side, "amount": effect.damage})
    if effect.healing > 0:
        before = cs.health
        cs.health = min(state.config.starting_health, cs.health + effect.healing)
        state.event_log.append({"type": "HEAL", "side": action.side, "amount": cs.health - before})

    if enemy.health <= 0:
        _end_game(state, action.side, "health_0")
    elif action.side == "player":
        state.turn = "opponent"
    else:
        _advance_turn(state)

    state.action_log.append(action)
    return StepResult(ok=True, events=state.event_log[start:])


def _pass(state: MatchState, action: PassAction) -> StepResult:
    if action.side != state.turn:
        return _reject("Not your turn.")
    start = len(state.event_log)
    cs = state.combatant(action.side)
    state.event_log.append({"type": "TURN_PASSED", "side": action.side})
    if action.side == "player":
        _log(state, f"{cs.name} passes the turn.")
        state.turn = "opponent"
    else:
        # The automated side had nothing affordable.
        _log(state, f"{cs.name} has no playable card.")
        _advance_turn(state)
    state.action_log.append(action)
    return StepResult(ok=True, events=state.event_log[start:])


def _surrender(state: MatchState, action: SurrenderAction) -> StepResult:
    start = len(state.event_log)
    _log(state, f"{state.combatant(action.side).name} surrenders.")
    state.event_log.append({"type": "SURRENDER", "side": action.side})
    _end_game(state, state.opposing(action.side), "surrender")
    state.action_log.append(action)
    return StepResult(ok=True, events=state.event_log[start:])


def step(state: MatchState, action: Action) -> StepResult:
    """Apply a single action to the match state.

    Accepted actions mutate `state` in place and are appended to
    `action_log`; rejected ones leave it untouched. A human play or pass
    hands the turn to the opponent, whose reply the caller triggers next
    via `ai.resolve_opponent_turn`.
    """
    if state.is_game_over:
        return _reject("Match already ended.")

    if isinstance(action, PlayCardAction):
        return _play_card(state, action)
    if isinstance(action, PassAction):
        return _pass(state, action)
    if isinstance(action, SurrenderAction):
        return _surrender(state, action)
    return _reject("Unknown action.")


def playable_cards(state: MatchState, side: Side) -> list[Card]:
    cs = state.combatant(side)
    return [c for c in cs.hand if c.cost <= cs.mana]


def new_match(
    player_deck: Sequence[Card],
    opponent_deck: Sequence[Card],
    seed: int,
    config: MatchConfig | None = None,
    player_name: str = "Player",
    opponent_name: str = "Opponent",
    region_id: str | None = None,
) -> MatchState:
    cfg = config or MatchConfig()
    if not player_deck or not opponent_deck:
        raise ValueError("Both decks must contain at least one card.")

    rng = random.Random(seed)
    shuffled_player = shuffle_deck(player_deck, rng)
    shuffled_opponent = shuffle_deck(opponent_deck, rng)
    n = cfg.starting_hand

    player = CombatantState(
        name=player_name,
        health=cfg.starting_health,
        mana=cfg.starting_mana,
        hand=shuffled_player[:n],
        deck=shuffled_player[n:],
    )
    opponent = CombatantState(
        name=opponent_name,
        health=cfg.starting_health,
        mana=cfg.starting_mana,
        hand=shuffled_opponent[:n],
        deck=shuffled_opponent[n:],
    )

    state = MatchState(
        config=cfg,
        seed=seed,
        rng=rng,
        # Separate stream so bot choices never shift deck shuffles on replay.
        ai_rng=random.Random(f"{seed}:ai"),
        player=player,
        opponent=opponent,
        region_id=region_id,
    )
    _log(state, f"The battle begins! {player_name} vs {opponent_name}")
    state.event_log.append({"type": "TURN_STARTED", "turn": 1, "mana": cfg.starting_mana})
    return state


def replay(
    player_deck: Sequence[Card],
    opponent_deck: Sequence[Card],
    seed: int,
    actions: Iterable[Action],
    config: MatchConfig | None = None,
    player_name: str = "Player",
    opponent_name: str = "Opponent",
    region_id: str | None = None,
) -> MatchState:
    state = new_match(
        player_deck,
        opponent_deck,
        seed=seed,
        config=config,
        player_name=player_name,
        opponent_name=opponent_name,
        region_id=region_id,
    )
    for a in actions:
        step(state, a)
        if state.is_game_over:
            break
    return state
