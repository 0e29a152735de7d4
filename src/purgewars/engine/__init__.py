"""Deterministic, headless rules core for Purge Wars.

IMPORTANT: This package must never import purgewars.services.
"""

from .actions import PassAction, PlayCardAction, SurrenderAction
from .ai import resolve_opponent_turn
from .deck import create_starter_deck, draw_card, shuffle_deck
from .match import MatchConfig, MatchState, apply_card_effect, new_match, step
from .rewards import PlayerProgress, RewardConfig, settle_match
from .types import Card, CardCatalog, CardType, ClassType, Faction, Rarity
from .world import Region, WorldStats, check_purge_condition, trigger_purge, update_region_control

__all__ = [
    "Card",
    "CardCatalog",
    "CardType",
    "ClassType",
    "Faction",
    "MatchConfig",
    "MatchState",
    "PassAction",
    "PlayCardAction",
    "PlayerProgress",
    "Rarity",
    "Region",
    "RewardConfig",
    "SurrenderAction",
    "WorldStats",
    "apply_card_effect",
    "check_purge_condition",
    "create_starter_deck",
    "draw_card",
    "new_match",
    "resolve_opponent_turn",
    "settle_match",
    "shuffle_deck",
    "step",
    "trigger_purge",
    "update_region_control",
]
