"""Orchestration between the host's message store and the Street Dice rules (and the reverse direction)."""

import logging
import random
from typing import Callable, Optional

from src.api.models import (
    GetTableRequest,
    OpenGameRequest,
    RollRequest,
    TableResponse,
)
from src.core.config import Settings
from src.core.exceptions import RepositoryError, StoreWriteError
from src.core.shared_types import Phase
from src.db.repository import MessageStore, Unsubscribe
from src.dice.controller import RollController, Scheduler
from src.dice.game import (
    GameState,
    claim_banker,
    is_over,
    may_roll,
    new_game,
    resolve,
    role_of,
)
from src.dice.rolls import Dice, evaluate
from src.dice.view import button_label, final_banner, header_text, opponent_of
from src.services.sync import decode_game, encode_game, wrap_game_text

logger = logging.getLogger(__name__)


class StreetDiceService:
    """
    Sync Adapter for game messages.
    ----
    Every operation is a plain read, a local computation and (at most) one whole-value write.
    There is no lock and no re-check before writing: if the peer wrote in between, the last write wins.
    """

    def __init__(self, store: MessageStore, settings: Optional[Settings] = None) -> None:
        self.store = store
        self.settings = settings or Settings()

    # -- Host operations ---
    def open_game(self, request: OpenGameRequest) -> TableResponse:
        """A player renders the game message. The first one to do so claims the banker seat."""
        state = self._read_state(request.message_id)
        if state is None:
            state = new_game()
        elif not state.first_player_id:
            claimed = claim_banker(state, request.player_id)
            if self._write(request.message_id, claimed):
                logger.info(
                    "Player %s claimed banker on message %s.",
                    request.player_id,
                    request.message_id,
                )
                state = claimed

        return self._create_table_response(
            request.message_id, state, request.player_id, request.opponent_name
        )

    def get_table(self, request: GetTableRequest) -> TableResponse:
        state = self._read_state(request.message_id) or new_game()
        return self._create_table_response(
            request.message_id,
            state,
            request.player_id,
            request.opponent_name,
            request.phase,
        )

    def roll(self, request: RollRequest) -> TableResponse:
        """
        Read-modify-write for one completed roll.
        ----
        Out-of-turn and finished-match rolls are dropped silently. A failed write is not retried,
        the response shows the state as it was read and the next push from the store is authoritative.
        """
        state = self._read_state(request.message_id)
        if state is None:
            # unknown state, never write over it
            state = new_game()
            return self._create_table_response(
                request.message_id, state, request.player_id, request.opponent_name
            )

        role = role_of(state, request.player_id)
        if not may_roll(state, role, self.settings.win_score):
            logger.debug(
                "Roll by %s on message %s rejected (turn: %s).",
                request.player_id,
                request.message_id,
                state.turn,
            )
        else:
            outcome = evaluate(request.dice)
            next_state = resolve(state, outcome, role, self.settings.win_score)
            if next_state is not state and self._write(request.message_id, next_state):
                state = next_state

        return self._create_table_response(
            request.message_id, state, request.player_id, request.opponent_name
        )

    def current_state(self, message_id: str) -> GameState:
        """
        Decode whatever the store holds right now.
        Never raises on bad content, raises RepositoryError when the store itself cannot be read.
        """
        text = self.store.read_game_blob(message_id)
        return GameState.from_model(decode_game(text, self.settings.game_marker))

    def subscribe(
        self, message_id: str, listener: Callable[[GameState], None]
    ) -> Unsubscribe:
        """Realtime updates of a game message, already decoded."""

        def on_blob(text: str) -> None:
            listener(GameState.from_model(decode_game(text, self.settings.game_marker)))

        return self.store.subscribe(message_id, on_blob)

    def create_controller(
        self,
        message_id: str,
        player_id: str,
        scheduler: Scheduler,
        rng: Optional[random.Random] = None,
        on_frame: Optional[Callable[[Dice], None]] = None,
        on_result: Optional[Callable[[TableResponse], None]] = None,
        opponent_name: str = "OPPONENT",
    ) -> RollController:
        """Roll button for one player on one game message."""

        def can_act() -> bool:
            state = self._read_state(message_id)
            if state is None:
                return False
            return may_roll(state, role_of(state, player_id), self.settings.win_score)

        def on_roll(dice: Dice) -> None:
            response = self.roll(
                RollRequest(
                    message_id=message_id,
                    player_id=player_id,
                    dice=dice,
                    opponent_name=opponent_name,
                )
            )
            if on_result:
                on_result(response)

        return RollController(
            may_roll=can_act,
            on_roll=on_roll,
            scheduler=scheduler,
            rng=rng,
            on_frame=on_frame,
            charge_seconds=self.settings.charge_seconds,
            roll_seconds=self.settings.roll_seconds,
            frame_seconds=self.settings.frame_seconds,
        )

    # -- Internal helpers --
    def _read_state(self, message_id: str) -> Optional[GameState]:
        """None (after logging) when the store could not be read."""
        try:
            return self.current_state(message_id)
        except RepositoryError as exc:
            logger.warning("Cannot read game message %s: %s", message_id, exc)
            return None

    def _write(self, message_id: str, state: GameState) -> bool:
        """Fire-and-forget replace. Returns False (after logging) when the store refused the write."""
        text = wrap_game_text(encode_game(state.to_model()), self.settings.game_marker)
        try:
            self.store.write_game_blob(message_id, text)
        except StoreWriteError as exc:
            logger.warning("Dropping local game state for message %s: %s", message_id, exc)
            return False
        return True

    def _create_table_response(
        self,
        message_id: str,
        state: GameState,
        player_id: str,
        opponent_name: str,
        phase: Phase = Phase.IDLE,
    ) -> TableResponse:
        """Convert a GameState into the view of one of its players."""
        win_score = self.settings.win_score
        my_role = role_of(state, player_id)
        return TableResponse(
            message_id=message_id,
            my_role=my_role,
            is_my_turn=may_roll(state, my_role, win_score),
            my_score=state.score_of(my_role),
            opponent_score=state.score_of(opponent_of(my_role)),
            pending_label=state.pending_target.label if state.pending_target else None,
            dice=list(state.last_dice),
            status_message=state.status_message,
            header=header_text(state, my_role, opponent_name, win_score),
            button_label=button_label(state, my_role, phase, opponent_name, win_score),
            is_over=is_over(state, win_score),
            final_banner=final_banner(state, my_role, win_score),
        )
