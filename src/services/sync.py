"""
Text <-> GameModel codec for game messages.

The host flags a game message by prefixing its text with a fixed marker, followed by the JSON blob.
Reading never fails: anything that cannot be understood decodes to a fresh game.
"""

import json
import logging
from typing import Optional

from pydantic import ValidationError

from src.api.models import GameBlob, PendingTargetBlob
from src.core.models import GameModel

logger = logging.getLogger(__name__)

GAME_MARKER = "[[STREET_DICE]]"


def is_game_text(text: Optional[str], marker: str = GAME_MARKER) -> bool:
    return bool(text) and text.startswith(marker)


def wrap_game_text(blob: str, marker: str = GAME_MARKER) -> str:
    return f"{marker}{blob}"


def unwrap_game_text(text: str, marker: str = GAME_MARKER) -> str:
    """Strip the marker if it is there. Bare JSON is accepted as well."""
    return text[len(marker) :] if text.startswith(marker) else text


def decode_game(text: Optional[str], marker: str = GAME_MARKER) -> GameModel:
    """Parse and validate a stored blob. Empty, malformed or invalid content yields the default GameModel."""
    if not text or not text.strip():
        return GameModel()

    payload = unwrap_game_text(text.strip(), marker)
    try:
        raw = json.loads(payload)
    except json.JSONDecodeError:
        logger.debug("Game blob is not JSON, starting from defaults: %r", payload[:80])
        return GameModel()

    if not isinstance(raw, dict):
        logger.debug("Game blob is not a JSON object, starting from defaults.")
        return GameModel()

    try:
        blob = GameBlob.model_validate(raw)
    except ValidationError as exc:
        logger.debug("Game blob failed validation, starting from defaults: %s", exc)
        return GameModel()

    return _blob_to_model(blob)


def encode_game(model: GameModel) -> str:
    """Serialize with the stable (aliased) key names."""
    blob = GameBlob(
        first_player_id=model.first_player_id,
        score_a=model.score_a,
        score_b=model.score_b,
        turn=model.turn,
        pending_target=(
            PendingTargetBlob.model_validate(model.pending_target)
            if model.pending_target is not None
            else None
        ),
        last_dice=model.last_dice,
        status_message=model.status_message,
        round_winner=model.round_winner,
    )
    return blob.model_dump_json(by_alias=True)


def _blob_to_model(blob: GameBlob) -> GameModel:
    return GameModel(
        first_player_id=blob.first_player_id,
        score_a=blob.score_a,
        score_b=blob.score_b,
        turn=blob.turn.value,
        pending_target=(
            {"value": blob.pending_target.value, "label": blob.pending_target.label}
            if blob.pending_target is not None
            else None
        ),
        last_dice=list(blob.last_dice),
        status_message=blob.status_message,
        round_winner=blob.round_winner.value if blob.round_winner else None,
    )
