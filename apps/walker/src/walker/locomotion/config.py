from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class LocomotionTuning:
    """Step constants for the level -> multiplier state machine."""

    # Highest |level| reachable through increase/decrease or the extreme commands.
    max_level: int = 4
    # Per-tick ramp, scaled by |level| (level 4 -> 0.04 per tick).
    acceleration_step: float = 0.01
    # Flat per-tick decay used for overshoot correction and coasting.
    decay_step: float = 0.01
    # Distance at which the multiplier counts as having reached its target.
    settle_tolerance: float = 1e-6

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if int(self.max_level) != self.max_level or int(self.max_level) < 1:
            raise ValueError("max_level must be an integer >= 1")
        for name in ("acceleration_step", "decay_step"):
            value = float(getattr(self, name))
            if not math.isfinite(value) or value <= 0.0:
                raise ValueError(f"{name} must be finite and > 0")
        tol = float(self.settle_tolerance)
        if not math.isfinite(tol) or tol < 0.0:
            raise ValueError("settle_tolerance must be finite and >= 0")
