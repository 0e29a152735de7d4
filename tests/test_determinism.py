from __future__ import annotations

from purgewars.engine.actions import PassAction, PlayCardAction
from purgewars.engine.ai import resolve_opponent_turn
from purgewars.engine.deck import create_starter_deck
from purgewars.engine.match import MatchState, new_match, playable_cards, replay, step
from purgewars.engine.serialize import action_from_dict, action_to_dict, snapshot
from purgewars.paths import get_paths
from purgewars.services.content import ContentService


def _load_catalog():
    paths = get_paths()
    content = ContentService(paths.data_dir, paths.schema_dir)
    return content.load_catalog()


def _choose_action(state: MatchState) -> object:
    # Deterministic: cheapest affordable card, else pass.
    options = sorted(playable_cards(state, "player"), key=lambda c: (c.cost, c.id))
    if options:
        return PlayCardAction(side="player", card_id=options[0].id)
    return PassAction()


def _play_out(seed: int) -> MatchState:
    catalog = _load_catalog()
    deck0 = create_starter_deck(catalog, "angel", "paladin")
    deck1 = create_starter_deck(catalog, "demon", "necromancer")
    state = new_match(deck0, deck1, seed=seed, region_id="ethereal_forest")
    for _ in range(60):
        if state.is_game_over:
            break
        step(state, _choose_action(state))
        resolve_opponent_turn(state)
    return state


def test_engine_determinism_replay() -> None:
    catalog = _load_catalog()
    deck0 = create_starter_deck(catalog, "angel", "paladin")
    deck1 = create_starter_deck(catalog, "demon", "necromancer")

    seed = 424242
    state1 = _play_out(seed)
    snap1 = snapshot(state1)

    state2 = replay(deck0, deck1, seed=seed, actions=state1.action_log, region_id="ethereal_forest")
    snap2 = snapshot(state2)

    assert snap1 == snap2


def test_same_seed_same_match() -> None:
    assert snapshot(_play_out(99)) == snapshot(_play_out(99))


def test_cards_are_conserved_through_a_match() -> None:
    state = _play_out(7)
    assert state.player.card_count() == 12
    assert state.opponent.card_count() == 12


def test_action_dicts_round_trip_through_replay_log() -> None:
    state = _play_out(5)
    raw = [action_to_dict(a) for a in state.action_log]
    assert [action_from_dict(d) for d in raw] == state.action_log
