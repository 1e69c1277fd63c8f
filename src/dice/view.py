"""
Role-relative texts for rendering a table.

Kept apart from the rules so a different front end can swap it out; nothing in here changes the game.
"""

from src.core.shared_types import Phase, Role
from src.dice.game import WIN_SCORE, GameState, is_over, may_roll


def opponent_of(role: Role) -> Role:
    return Role.SECOND_PLAYER if role == Role.FIRST_PLAYER else Role.FIRST_PLAYER


def header_text(
    state: GameState, my_role: Role, opponent_name: str, win_score: int = WIN_SCORE
) -> str:
    """Big line above the dice: who won the last round, or whose roll it is."""
    opponent = opponent_name.upper()
    if state.round_winner is not None:
        return "YOU WON!" if state.round_winner == my_role else f"{opponent} WON!"

    my_turn = may_roll(state, my_role, win_score)
    if state.pending_target is not None:
        if my_turn:
            return f"BEAT {opponent}'s {state.pending_target.label}!"
        return f"WAITING FOR {opponent}..."
    if my_turn:
        return "YOUR ROLL"
    return f"{opponent} IS ROLLING..."


def button_label(
    state: GameState,
    my_role: Role,
    phase: Phase,
    opponent_name: str,
    win_score: int = WIN_SCORE,
) -> str:
    if phase == Phase.ROLLING:
        return "..."
    if phase == Phase.CHARGING:
        return "RELEASE TO ROLL"
    if may_roll(state, my_role, win_score):
        return "HOLD TO SHAKE"
    return f"WAITING FOR {opponent_name.upper()}..."


def final_banner(state: GameState, my_role: Role, win_score: int = WIN_SCORE) -> str | None:
    """Shown instead of the button once the match is over."""
    if not is_over(state, win_score):
        return None
    if state.score_of(my_role) >= win_score:
        return "YOU WON THE BAG"
    return "PAY THE MAN"
