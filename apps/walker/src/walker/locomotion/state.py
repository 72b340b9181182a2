from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class LocomotionPhase(str, Enum):
    FORWARD = "forward"
    REVERSE_TO_FORWARD = "reverse_to_forward"
    BACKWARD = "backward"
    REVERSE_TO_BACKWARD = "reverse_to_backward"
    COAST = "coast"
    REST = "rest"


class MoveDirection(int, Enum):
    BACKWARD = -1
    NONE = 0
    FORWARD = 1


@dataclass
class LocomotionState:
    base_speed: float
    level: float = 0.0
    last_level: float = 0.0
    # Non-negative commitment magnitude in the direction of `last_level`.
    multiplier: float = 0.0


@dataclass(frozen=True)
class LocomotionStep:
    """What one tick did: the branch taken and the commands sent to the sink."""

    phase: LocomotionPhase
    direction: MoveDirection
    level: float
    last_level: float
    multiplier: float
    # None when the tick did not touch the sink's max speed.
    max_speed: float | None

    @property
    def moved(self) -> bool:
        return self.direction is not MoveDirection.NONE
