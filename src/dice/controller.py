"""
Local (per client) handling of the press-and-hold roll button.

IDLE --press()--> CHARGING --release() or charge timeout--> ROLLING --animation done--> IDLE (+ on_roll(dice))

The controller owns no game state. It asks `may_roll` whether the local player is allowed to act,
and hands the final faces to `on_roll`. All waiting goes through a Scheduler so the timers live and die with the controller.
"""

import asyncio
import logging
import random
from typing import Callable, Optional, Protocol

from src.core.shared_types import Phase
from src.dice.rolls import Dice, roll_dice

logger = logging.getLogger(__name__)

CHARGE_SECONDS = 2.5
ROLL_SECONDS = 0.65
FRAME_SECONDS = 0.08


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything that can run a callback once after a delay (in seconds) and cancel it again."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class AsyncioScheduler:
    """Scheduler backed by an asyncio event loop (the running one, unless given)."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)


class RollController:
    """Turns a press-and-hold gesture into exactly one roll."""

    def __init__(
        self,
        may_roll: Callable[[], bool],
        on_roll: Callable[[Dice], None],
        scheduler: Scheduler,
        rng: Optional[random.Random] = None,
        on_frame: Optional[Callable[[Dice], None]] = None,
        charge_seconds: float = CHARGE_SECONDS,
        roll_seconds: float = ROLL_SECONDS,
        frame_seconds: float = FRAME_SECONDS,
    ) -> None:
        self._may_roll = may_roll
        self._on_roll = on_roll
        self._scheduler = scheduler
        self._rng = rng or random.Random()
        self._on_frame = on_frame
        self.charge_seconds = charge_seconds
        self.frame_seconds = frame_seconds
        # animation ticks, the last one lands the real roll
        self.frames = max(1, round(roll_seconds / frame_seconds))

        self._phase = Phase.IDLE
        self._timer: Optional[TimerHandle] = None
        self._frames_left = 0

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def is_busy(self) -> bool:
        return self._phase != Phase.IDLE

    def can_press(self) -> bool:
        """Whether the button should be enabled."""
        return self._phase == Phase.IDLE and self._may_roll()

    # --- GESTURE ---
    def press(self) -> bool:
        """Start charging. Returns False (and does nothing) when the local player may not act right now."""
        if not self.can_press():
            logger.debug("Press ignored in phase %s.", self._phase)
            return False
        self._phase = Phase.CHARGING
        self._timer = self._scheduler.call_later(self.charge_seconds, self.release)
        return True

    def release(self) -> None:
        """End of the hold, by the player or by the charge timeout. Both start the roll the same way."""
        if self._phase != Phase.CHARGING:
            return
        self._cancel_timer()
        self._phase = Phase.ROLLING
        self._frames_left = self.frames
        self._timer = self._scheduler.call_later(self.frame_seconds, self._tick)

    def cancel(self) -> None:
        """Abandon a hold. Nothing gets rolled."""
        if self._phase != Phase.CHARGING:
            return
        self._cancel_timer()
        self._phase = Phase.IDLE

    def close(self) -> None:
        """Stop all timers (the view is going away). A roll that has not landed yet is dropped."""
        self._cancel_timer()
        self._phase = Phase.IDLE
        self._frames_left = 0

    # --- ANIMATION ---
    def _tick(self) -> None:
        self._timer = None
        if self._phase != Phase.ROLLING:
            return
        self._frames_left -= 1
        if self._frames_left > 0:
            if self._on_frame:
                self._on_frame(roll_dice(self._rng))
            self._timer = self._scheduler.call_later(self.frame_seconds, self._tick)
            return
        self._finish()

    def _finish(self) -> None:
        dice = roll_dice(self._rng)
        self._phase = Phase.IDLE
        logger.debug("Dice landed: %s", dice)
        self._on_roll(dice)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
