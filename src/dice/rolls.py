"""
Classification of a throw of three dice.

Everything in here is pure: the same faces always give the same RollOutcome, regardless of the order they landed in.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional

from src.core.exceptions import InvalidRollError
from src.core.shared_types import RollKind

DICE_PER_ROLL = 3
FACES = range(1, 7)

Dice = tuple[int, int, int]

AUTO_WIN_FACES: Dice = (4, 5, 6)
AUTO_LOSS_FACES: Dice = (1, 2, 3)

# Triples always beat any point
TRIPLE_BASE_STRENGTH = 20

FIXED_LABELS: dict[RollKind, str] = {
    RollKind.AUTO_WIN: "4-5-6",
    RollKind.AUTO_LOSS: "1-2-3",
    RollKind.JUNK: "TRASH",
}


@dataclass(frozen=True)
class RollOutcome:
    """
    Tagged result of a roll.
    ----
    `face` is only meaningful for TRIPLE (the repeated face) and POINT (the odd die out).
    `dice` keeps the faces in the order they were rolled, for display.
    """

    kind: RollKind
    dice: Dice
    face: Optional[int] = None

    @property
    def strength(self) -> Optional[int]:
        """Comparable value for triples and points. None for everything that cannot set or chase a target."""
        if self.kind == RollKind.TRIPLE:
            return TRIPLE_BASE_STRENGTH + self.face
        if self.kind == RollKind.POINT:
            return self.face
        return None

    @property
    def label(self) -> str:
        if self.kind in FIXED_LABELS:
            return FIXED_LABELS[self.kind]
        if self.kind == RollKind.TRIPLE:
            return f"TRIP {self.face}s"
        return f"POINT {self.face}"

    @property
    def is_comparable(self) -> bool:
        return self.strength is not None


def evaluate(dice: list[int] | tuple[int, ...]) -> RollOutcome:
    """
    Classify three faces.
    ----

    Priority: 4-5-6 > 1-2-3 > triple > point > junk.
    """
    faces = _validate_dice(dice)
    low, mid, high = sorted(faces)

    if (low, mid, high) == AUTO_WIN_FACES:
        return RollOutcome(RollKind.AUTO_WIN, faces)
    if (low, mid, high) == AUTO_LOSS_FACES:
        return RollOutcome(RollKind.AUTO_LOSS, faces)
    if low == high:
        return RollOutcome(RollKind.TRIPLE, faces, face=low)

    # sorted, so a pair is always adjacent
    if low == mid:
        return RollOutcome(RollKind.POINT, faces, face=high)
    if mid == high:
        return RollOutcome(RollKind.POINT, faces, face=low)

    return RollOutcome(RollKind.JUNK, faces)


def roll_dice(rng: Optional[random.Random] = None) -> Dice:
    """Three independent, uniformly drawn faces."""
    source = rng or random
    return (source.randint(1, 6), source.randint(1, 6), source.randint(1, 6))


def _validate_dice(dice: list[int] | tuple[int, ...]) -> Dice:
    if len(dice) != DICE_PER_ROLL:
        raise InvalidRollError(f"Expected {DICE_PER_ROLL} dice, got {len(dice)}: {dice!r}")
    for face in dice:
        if isinstance(face, bool) or not isinstance(face, int) or face not in FACES:
            raise InvalidRollError(f"Die face must be an integer from 1 to 6, got {face!r}")
    return (dice[0], dice[1], dice[2])
