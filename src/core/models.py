"""
Boundary layer data model(s).

These objects are used to communicate with the Service.
The codec (text <-> GameModel) and the domain (GameModel <-> GameState) both talk in terms of this model,
which decouples the wire format stored inside a chat message from the domain representation.
"""

from dataclasses import dataclass, field
from typing import Optional

DEFAULT_DICE = [4, 5, 6]
DEFAULT_MESSAGE = "RACE TO 5"


@dataclass
class GameModel:
    """Transport-safe representation of one Street Dice match."""

    first_player_id: str = ""
    score_a: int = 0
    score_b: int = 0
    turn: str = "p1"
    pending_target: Optional[dict[str, int | str]] = None
    last_dice: list[int] = field(default_factory=lambda: list(DEFAULT_DICE))
    status_message: str = DEFAULT_MESSAGE
    round_winner: Optional[str] = None
