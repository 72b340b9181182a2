"""Level-driven momentum locomotion: tuning, state, sink contract and the per-tick controller."""

from walker.locomotion.config import LocomotionTuning
from walker.locomotion.controller import LocomotionController
from walker.locomotion.sink import MovementSink
from walker.locomotion.state import LocomotionPhase, LocomotionState, LocomotionStep, MoveDirection

__all__ = [
    "LocomotionController",
    "LocomotionPhase",
    "LocomotionState",
    "LocomotionStep",
    "LocomotionTuning",
    "MoveDirection",
    "MovementSink",
]
