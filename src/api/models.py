"""Requests, Response and wire models"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from src.core.exceptions import InvalidRequestError
from src.core.models import DEFAULT_DICE, DEFAULT_MESSAGE
from src.core.shared_types import Phase, Role

MessageId = str
PlayerId = str


# --- WIRE MODELS ---
# Key names are the ones already stored in in-flight game messages. Do not rename the aliases.
class PendingTargetBlob(BaseModel):
    model_config = ConfigDict(extra="ignore")

    value: int
    label: str


class GameBlob(BaseModel):
    """What lives (as JSON) inside a game message. Missing keys default, unknown keys are dropped."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    first_player_id: str = Field(default="", alias="p1Id")
    score_a: int = Field(default=0, ge=0, alias="p1Score")
    score_b: int = Field(default=0, ge=0, alias="p2Score")
    turn: Role = Role.FIRST_PLAYER
    pending_target: Optional[PendingTargetBlob] = Field(default=None, alias="p1Roll")
    last_dice: list[int] = Field(default_factory=lambda: list(DEFAULT_DICE), alias="dice")
    status_message: str = Field(default=DEFAULT_MESSAGE, alias="message")
    round_winner: Optional[Role] = Field(default=None, alias="roundWinner")

    @field_validator("first_player_id", mode="before")
    @classmethod
    def empty_if_null(cls, value: Optional[str]) -> str:
        return value or ""

    @field_validator("last_dice")
    @classmethod
    def validate_dice(cls, value: list[int]) -> list[int]:
        if len(value) != 3 or any(face < 1 or face > 6 for face in value):
            raise ValueError(f"dice must be three faces from 1 to 6, got {value!r}")
        return value

    @model_validator(mode="after")
    def validate_turn_matches_target(self) -> "GameBlob":
        """The challenger is up exactly when the banker has set a target."""
        if (self.turn == Role.SECOND_PLAYER) != (self.pending_target is not None):
            raise ValueError(
                f"turn {self.turn.value!r} does not match pending target {self.pending_target!r}"
            )
        return self


# --- REQUEST MODELS ---
class OpenGameRequest(BaseModel):
    message_id: MessageId
    player_id: PlayerId
    opponent_name: str = "OPPONENT"

    @field_validator("player_id")
    @classmethod
    def validate_player_id(cls, value: str) -> str:
        if not value.strip():
            raise InvalidRequestError("player_id must not be empty.")
        return value


class GetTableRequest(BaseModel):
    message_id: MessageId
    player_id: PlayerId
    opponent_name: str = "OPPONENT"
    phase: Phase = Phase.IDLE


class RollRequest(BaseModel):
    message_id: MessageId
    player_id: PlayerId
    dice: tuple[int, int, int]
    opponent_name: str = "OPPONENT"

    @field_validator("dice")
    @classmethod
    def validate_dice(cls, value: tuple[int, int, int]) -> tuple[int, int, int]:
        if any(face < 1 or face > 6 for face in value):
            raise InvalidRequestError(f"Cannot roll {value!r}: faces must be from 1 to 6.")
        return value


# --- RESPONSE MODELS ---
class TableResponse(BaseModel):
    """Everything one player's client needs to draw the game message."""

    message_id: MessageId
    my_role: Role
    is_my_turn: bool
    my_score: int
    opponent_score: int
    pending_label: Optional[str]
    dice: list[int]
    status_message: str
    header: str
    button_label: str
    is_over: bool
    final_banner: Optional[str]
