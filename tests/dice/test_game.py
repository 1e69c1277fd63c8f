"""Unit tests for src/dice/game.py"""

from dataclasses import replace

import pytest

from src.core.models import GameModel
from src.core.shared_types import Role
from src.dice.game import (
    JUNK_MESSAGE,
    POINT_SET_MESSAGE,
    WASH_MESSAGE,
    GameState,
    PendingTarget,
    claim_banker,
    is_over,
    may_roll,
    new_game,
    resolve,
    role_of,
    winner,
)
from src.dice.rolls import evaluate

FIRST = Role.FIRST_PLAYER
SECOND = Role.SECOND_PLAYER


@pytest.fixture
def started() -> GameState:
    return claim_banker(new_game(), "banker")


@pytest.fixture
def point_four_set(started: GameState) -> GameState:
    """Banker rolled POINT 4, the challenger is up."""
    return resolve(started, evaluate([1, 1, 4]), FIRST)


# --- LIFECYCLE ---
def test_new_game_defaults() -> None:
    state = new_game()
    assert state.first_player_id == ""
    assert (state.score_a, state.score_b) == (0, 0)
    assert state.turn == FIRST
    assert state.pending_target is None
    assert state.last_dice == (4, 5, 6)
    assert state.status_message == "RACE TO 5"


def test_claim_banker_only_once() -> None:
    claimed = claim_banker(new_game(), "alice")
    assert claimed.first_player_id == "alice"
    assert claim_banker(claimed, "bob") is claimed


def test_claim_banker_needs_an_identity() -> None:
    state = new_game()
    assert claim_banker(state, "") is state


def test_roles(started: GameState) -> None:
    assert role_of(started, "banker") == FIRST
    assert role_of(started, "someone else") == SECOND
    # nobody is the banker before the seat is claimed
    assert role_of(new_game(), "") == SECOND


def test_may_roll_follows_turn(started: GameState, point_four_set: GameState) -> None:
    assert may_roll(started, FIRST)
    assert not may_roll(started, SECOND)
    assert may_roll(point_four_set, SECOND)
    assert not may_roll(point_four_set, FIRST)


def test_model_roundtrip(point_four_set: GameState) -> None:
    model = point_four_set.to_model()
    assert isinstance(model, GameModel)
    assert model.turn == "p2"
    assert model.pending_target == {"value": 4, "label": "POINT 4"}
    assert GameState.from_model(model) == point_four_set


# --- BANKER ROLLS ---
def test_banker_sets_point(started: GameState) -> None:
    state = resolve(started, evaluate([4, 2, 2]), FIRST)
    assert state.turn == SECOND
    assert state.pending_target == PendingTarget(strength=4, label="POINT 4")
    assert (state.score_a, state.score_b) == (0, 0)
    assert state.last_dice == (4, 2, 2)
    assert state.status_message == POINT_SET_MESSAGE


def test_banker_sets_triple(started: GameState) -> None:
    state = resolve(started, evaluate([6, 6, 6]), FIRST)
    assert state.turn == SECOND
    assert state.pending_target == PendingTarget(strength=26, label="TRIP 6s")


def test_banker_auto_win(started: GameState) -> None:
    state = resolve(started, evaluate([6, 4, 5]), FIRST)
    assert (state.score_a, state.score_b) == (1, 0)
    assert state.turn == FIRST
    assert state.pending_target is None
    assert state.round_winner == FIRST
    assert state.status_message == "BANKER WON! (4-5-6)"


def test_banker_auto_loss(started: GameState) -> None:
    state = resolve(started, evaluate([3, 2, 1]), FIRST)
    assert (state.score_a, state.score_b) == (0, 1)
    assert state.turn == FIRST
    assert state.round_winner == SECOND
    assert state.status_message == "BANKER LOST! (1-2-3)"


def test_banker_junk_rerolls(started: GameState) -> None:
    state = resolve(started, evaluate([1, 4, 6]), FIRST)
    assert state.turn == FIRST
    assert state.pending_target is None
    assert (state.score_a, state.score_b) == (0, 0)
    assert state.last_dice == (1, 4, 6)
    assert state.status_message == JUNK_MESSAGE


# --- CHALLENGER ROLLS ---
def test_challenger_beats_point(point_four_set: GameState) -> None:
    state = resolve(point_four_set, evaluate([6, 3, 3]), SECOND)
    assert (state.score_a, state.score_b) == (0, 1)
    assert state.pending_target is None
    assert state.turn == FIRST
    assert state.round_winner == SECOND
    assert state.status_message == "CHALLENGER WON! (POINT 6 vs POINT 4)"


def test_challenger_loses_to_point(point_four_set: GameState) -> None:
    state = resolve(point_four_set, evaluate([2, 5, 5]), SECOND)
    assert (state.score_a, state.score_b) == (1, 0)
    assert state.pending_target is None
    assert state.turn == FIRST
    assert state.round_winner == FIRST
    assert state.status_message == "BANKER WON! (POINT 4 vs POINT 2)"


def test_wash(point_four_set: GameState) -> None:
    """Equal strength voids the round and hands the dice back to the banker."""
    state = resolve(point_four_set, evaluate([4, 6, 6]), SECOND)
    assert (state.score_a, state.score_b) == (0, 0)
    assert state.pending_target is None
    assert state.turn == FIRST
    assert state.round_winner is None
    assert state.status_message == WASH_MESSAGE


def test_challenger_triple_beats_point(point_four_set: GameState) -> None:
    state = resolve(point_four_set, evaluate([1, 1, 1]), SECOND)
    assert (state.score_a, state.score_b) == (0, 1)


def test_challenger_point_loses_to_triple(started: GameState) -> None:
    triple_set = resolve(started, evaluate([2, 2, 2]), FIRST)
    state = resolve(triple_set, evaluate([6, 5, 5]), SECOND)
    assert (state.score_a, state.score_b) == (1, 0)


def test_challenger_auto_win(point_four_set: GameState) -> None:
    state = resolve(point_four_set, evaluate([5, 4, 6]), SECOND)
    assert (state.score_a, state.score_b) == (0, 1)
    assert state.pending_target is None
    assert state.turn == FIRST
    assert state.status_message == "CHALLENGER WON! (4-5-6)"


def test_challenger_auto_loss(point_four_set: GameState) -> None:
    state = resolve(point_four_set, evaluate([2, 1, 3]), SECOND)
    assert (state.score_a, state.score_b) == (1, 0)
    assert state.pending_target is None
    assert state.turn == FIRST
    assert state.status_message == "CHALLENGER LOST! (1-2-3)"


def test_challenger_junk_rerolls(point_four_set: GameState) -> None:
    state = resolve(point_four_set, evaluate([2, 3, 5]), SECOND)
    assert state.turn == SECOND
    assert state.pending_target == point_four_set.pending_target
    assert (state.score_a, state.score_b) == (0, 0)
    assert state.last_dice == (2, 3, 5)


# --- END OF MATCH ---
@pytest.mark.parametrize("scores", [(5, 0), (2, 5), (5, 4)])
def test_resolve_on_terminal_state_is_noop(started: GameState, scores: tuple[int, int]) -> None:
    finished = replace(started, score_a=scores[0], score_b=scores[1])
    for dice in ([4, 5, 6], [1, 2, 3], [3, 3, 3], [2, 2, 5], [1, 4, 6]):
        for roller in (FIRST, SECOND):
            assert resolve(finished, evaluate(dice), roller) is finished


def test_match_ends_at_five(started: GameState) -> None:
    state = replace(started, score_a=4, score_b=3)
    assert not is_over(state)
    assert winner(state) is None

    state = resolve(state, evaluate([4, 5, 6]), FIRST)
    assert state.score_a == 5
    assert is_over(state)
    assert winner(state) == FIRST
    assert not may_roll(state, FIRST)
    assert not may_roll(state, SECOND)


def test_custom_win_score(started: GameState) -> None:
    state = resolve(started, evaluate([4, 5, 6]), FIRST, win_score=1)
    assert is_over(state, win_score=1)
    assert resolve(state, evaluate([4, 5, 6]), FIRST, win_score=1) is state


def test_turn_and_target_stay_consistent(started: GameState) -> None:
    """Play a long deterministic sequence and check the turn/target invariant after every roll."""
    throws = [
        [2, 2, 3], [6, 6, 5], [1, 4, 6], [3, 3, 1], [3, 3, 1],
        [5, 5, 5], [2, 2, 6], [4, 5, 6], [1, 2, 3], [6, 6, 6],
        [4, 5, 6], [3, 3, 2], [1, 2, 3], [1, 1, 6], [2, 2, 6],
    ]
    state = started
    for dice in throws:
        state = resolve(state, evaluate(dice), state.turn)
        assert (state.turn == FIRST) == (state.pending_target is None)
        assert state.score_a < 5 and state.score_b < 5
