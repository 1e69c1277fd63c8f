"""
Type definitions used across layers
"""

from enum import StrEnum


class Role(StrEnum):
    """Seat at the table. Values are the ones stored in the message blob."""

    FIRST_PLAYER = "p1"
    SECOND_PLAYER = "p2"


class RollKind(StrEnum):
    AUTO_WIN = "auto_win"
    AUTO_LOSS = "auto_loss"
    TRIPLE = "triple"
    POINT = "point"
    JUNK = "junk"


class Phase(StrEnum):
    """Local (per client) phase of the roll button."""

    IDLE = "idle"
    CHARGING = "charging"
    ROLLING = "rolling"
