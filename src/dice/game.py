"""
The turn state machine of a Street Dice match.

GameState is an immutable value: every roll produces a full replacement, which the Sync Adapter writes back over the previous one.
resolve() is the only place the rules of the game live. It is a pure function and never looks at who is calling it,
gating on identity is done before it is ever called (see may_roll()).
"""

import logging
from dataclasses import dataclass, replace
from typing import Optional, Self

from src.core.models import DEFAULT_DICE, DEFAULT_MESSAGE, GameModel
from src.core.shared_types import Role, RollKind
from src.dice.rolls import Dice, RollOutcome

logger = logging.getLogger(__name__)

WIN_SCORE = 5

JUNK_MESSAGE = "TRASH. ROLL AGAIN."
POINT_SET_MESSAGE = "POINT SET."
WASH_MESSAGE = "WASH! RE-ROLL ROUND."


@dataclass(frozen=True)
class PendingTarget:
    """The banker's point/triple the challenger has to beat."""

    strength: int
    label: str


@dataclass(frozen=True)
class GameState:
    first_player_id: str = ""
    score_a: int = 0
    score_b: int = 0
    turn: Role = Role.FIRST_PLAYER
    pending_target: Optional[PendingTarget] = None
    last_dice: Dice = (4, 5, 6)
    status_message: str = DEFAULT_MESSAGE
    round_winner: Optional[Role] = None

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Build the domain value from the (already validated) transport model."""
        target = (
            PendingTarget(
                strength=int(model.pending_target["value"]),
                label=str(model.pending_target["label"]),
            )
            if model.pending_target is not None
            else None
        )
        dice = model.last_dice if len(model.last_dice) == 3 else DEFAULT_DICE
        return cls(
            first_player_id=model.first_player_id,
            score_a=model.score_a,
            score_b=model.score_b,
            turn=Role(model.turn),
            pending_target=target,
            last_dice=(dice[0], dice[1], dice[2]),
            status_message=model.status_message,
            round_winner=Role(model.round_winner) if model.round_winner else None,
        )

    def to_model(self) -> GameModel:
        return GameModel(
            first_player_id=self.first_player_id,
            score_a=self.score_a,
            score_b=self.score_b,
            turn=self.turn.value,
            pending_target=(
                {"value": self.pending_target.strength, "label": self.pending_target.label}
                if self.pending_target
                else None
            ),
            last_dice=list(self.last_dice),
            status_message=self.status_message,
            round_winner=self.round_winner.value if self.round_winner else None,
        )

    def score_of(self, role: Role) -> int:
        return self.score_a if role == Role.FIRST_PLAYER else self.score_b


# --- LIFECYCLE ---
def new_game() -> GameState:
    """State of a game message nobody has opened yet."""
    return GameState()


def claim_banker(state: GameState, player_id: str) -> GameState:
    """
    The first client to render the game becomes the banker.
    ----
    A claim on an already claimed game changes nothing. Two near-simultaneous claims are settled by whichever write lands last.
    """
    if state.first_player_id or not player_id:
        return state
    return replace(state, first_player_id=player_id)


def role_of(state: GameState, player_id: str) -> Role:
    """Anyone who is not the banker is treated as the challenger."""
    if state.first_player_id and state.first_player_id == player_id:
        return Role.FIRST_PLAYER
    return Role.SECOND_PLAYER


def is_over(state: GameState, win_score: int = WIN_SCORE) -> bool:
    return state.score_a >= win_score or state.score_b >= win_score


def winner(state: GameState, win_score: int = WIN_SCORE) -> Optional[Role]:
    if state.score_a >= win_score:
        return Role.FIRST_PLAYER
    if state.score_b >= win_score:
        return Role.SECOND_PLAYER
    return None


def may_roll(state: GameState, role: Role, win_score: int = WIN_SCORE) -> bool:
    """Only the player whose turn it is may roll, and only while the match is in progress."""
    return not is_over(state, win_score) and state.turn == role


# --- TRANSITIONS ---
def resolve(
    state: GameState, outcome: RollOutcome, roller: Role, win_score: int = WIN_SCORE
) -> GameState:
    """
    Apply a freshly evaluated roll and return the next state.
    ----

    - terminal state: returned unchanged
    - junk: only the dice (and the display message) change, same player rolls again
    - banker: 4-5-6 / 1-2-3 settle the round on the spot (banker keeps the dice), a point or triple sets the target
    - challenger: 4-5-6 / 1-2-3 settle the round, a point or triple is compared against the target (equal is a wash)

    In every settled round the target is cleared and the dice go back to the banker.
    """
    if is_over(state, win_score):
        return state

    if outcome.kind == RollKind.JUNK:
        return replace(
            state,
            last_dice=outcome.dice,
            status_message=JUNK_MESSAGE,
            round_winner=None,
        )

    if roller == Role.FIRST_PLAYER:
        next_state = _resolve_banker_roll(state, outcome)
    else:
        if state.pending_target is None:
            # nothing to compare against, leave it alone
            logger.debug("Challenger roll ignored, no pending target to beat.")
            return state
        next_state = _resolve_challenger_roll(state, outcome, state.pending_target)

    if is_over(next_state, win_score):
        logger.info(
            "Match over: %s-%s, %s wins.",
            next_state.score_a,
            next_state.score_b,
            winner(next_state, win_score),
        )
    return next_state


def _resolve_banker_roll(state: GameState, outcome: RollOutcome) -> GameState:
    if outcome.kind == RollKind.AUTO_WIN:
        return _settle_round(state, outcome, Role.FIRST_PLAYER, "BANKER WON! (4-5-6)")
    if outcome.kind == RollKind.AUTO_LOSS:
        return _settle_round(state, outcome, Role.SECOND_PLAYER, "BANKER LOST! (1-2-3)")

    # triple or point: the challenger has to beat it
    return replace(
        state,
        turn=Role.SECOND_PLAYER,
        pending_target=PendingTarget(strength=outcome.strength, label=outcome.label),
        last_dice=outcome.dice,
        status_message=POINT_SET_MESSAGE,
        round_winner=None,
    )


def _resolve_challenger_roll(
    state: GameState, outcome: RollOutcome, target: PendingTarget
) -> GameState:
    if outcome.kind == RollKind.AUTO_WIN:
        return _settle_round(state, outcome, Role.SECOND_PLAYER, "CHALLENGER WON! (4-5-6)")
    if outcome.kind == RollKind.AUTO_LOSS:
        return _settle_round(state, outcome, Role.FIRST_PLAYER, "CHALLENGER LOST! (1-2-3)")

    if outcome.strength > target.strength:
        return _settle_round(
            state,
            outcome,
            Role.SECOND_PLAYER,
            f"CHALLENGER WON! ({outcome.label} vs {target.label})",
        )
    if outcome.strength < target.strength:
        return _settle_round(
            state,
            outcome,
            Role.FIRST_PLAYER,
            f"BANKER WON! ({target.label} vs {outcome.label})",
        )
    return _settle_round(state, outcome, None, WASH_MESSAGE)


def _settle_round(
    state: GameState, outcome: RollOutcome, round_winner: Optional[Role], message: str
) -> GameState:
    """Score the round (no one scores on a wash), clear the target and hand the dice back to the banker."""
    score_a = state.score_a + (1 if round_winner == Role.FIRST_PLAYER else 0)
    score_b = state.score_b + (1 if round_winner == Role.SECOND_PLAYER else 0)
    logger.info("Round settled: %s (%s-%s)", message, score_a, score_b)
    return replace(
        state,
        score_a=score_a,
        score_b=score_b,
        turn=Role.FIRST_PLAYER,
        pending_target=None,
        last_dice=outcome.dice,
        status_message=message,
        round_winner=round_winner,
    )
