from __future__ import annotations

import logging

from walker.locomotion.config import LocomotionTuning
from walker.locomotion.sink import MovementSink
from walker.locomotion.state import LocomotionPhase, LocomotionState, LocomotionStep, MoveDirection

logger = logging.getLogger(__name__)

# (phase, direction issued, max speed written or None)
_Outcome = tuple[LocomotionPhase, MoveDirection, "float | None"]


class LocomotionController:
    """
    Level-driven momentum locomotion.

    Input commands move `level` in integer steps within [-max_level, max_level].
    Once per frame `tick()` eases `multiplier` toward |level| and drives the sink:
    - ramp-up is `acceleration_step * |level|` per tick, overshoot decays by a flat `decay_step`
    - a sign flip of `level` first unwinds the old commitment while still moving the old way
    - level 0 coasts in the last direction, losing `decay_step` per tick

    `multiplier` is kept as a non-negative magnitude in the direction of `last_level`;
    unwinding and coasting never take it below zero.
    """

    def __init__(self, *, sink: MovementSink, tuning: LocomotionTuning | None = None) -> None:
        self._sink = sink
        self._tuning = tuning if tuning is not None else LocomotionTuning()
        self._state = LocomotionState(base_speed=float(sink.max_speed))
        self._last_phase = LocomotionPhase.REST

    @property
    def tuning(self) -> LocomotionTuning:
        return self._tuning

    @property
    def state(self) -> LocomotionState:
        return self._state

    @property
    def level(self) -> float:
        return float(self._state.level)

    @property
    def last_level(self) -> float:
        return float(self._state.last_level)

    @property
    def multiplier(self) -> float:
        return float(self._state.multiplier)

    @property
    def base_speed(self) -> float:
        return float(self._state.base_speed)

    # Level commands.

    def increase(self) -> None:
        if self._state.level < self._tuning.max_level:
            self._state.level += 1.0

    def decrease(self) -> None:
        if self._state.level > -self._tuning.max_level:
            self._state.level -= 1.0

    def stop(self) -> None:
        self._state.level = 0.0

    def set_max_forward(self) -> None:
        self._state.level = float(self._tuning.max_level)

    def set_max_backward(self) -> None:
        self._state.level = -float(self._tuning.max_level)

    def reset(self) -> None:
        self._state.level = 0.0
        self._state.last_level = 0.0
        self._state.multiplier = 0.0
        self._last_phase = LocomotionPhase.REST
        self._sink.set_max_speed(self._state.base_speed)

    # Per-frame update.

    def tick(self) -> LocomotionStep:
        level = float(self._state.level)
        last = float(self._state.last_level)

        if level > 0.0 and last >= 0.0:
            self._ramp_toward(level)
            outcome = self._drive(LocomotionPhase.FORWARD, MoveDirection.FORWARD)
            self._state.last_level = level
        elif level > 0.0:
            outcome = self._unwind_or_flip(LocomotionPhase.REVERSE_TO_FORWARD, MoveDirection.BACKWARD, level)
        elif level < 0.0 and last <= 0.0:
            self._ramp_toward(-level)
            outcome = self._drive(LocomotionPhase.BACKWARD, MoveDirection.BACKWARD)
            self._state.last_level = level
        elif level < 0.0:
            outcome = self._unwind_or_flip(LocomotionPhase.REVERSE_TO_BACKWARD, MoveDirection.FORWARD, level)
        else:
            outcome = self._coast(last)

        phase, direction, max_speed = outcome
        if phase is not self._last_phase:
            logger.debug(
                "locomotion %s -> %s (level=%+.0f multiplier=%.3f)",
                self._last_phase.value,
                phase.value,
                level,
                self._state.multiplier,
            )
            self._last_phase = phase
        return LocomotionStep(
            phase=phase,
            direction=direction,
            level=level,
            last_level=float(self._state.last_level),
            multiplier=float(self._state.multiplier),
            max_speed=max_speed,
        )

    def _committed(self) -> bool:
        return self._state.multiplier > self._tuning.settle_tolerance

    def _ramp_toward(self, target: float) -> None:
        m = float(self._state.multiplier)
        if abs(m - target) <= self._tuning.settle_tolerance:
            return
        if m < target:
            m += self._tuning.acceleration_step * target
        else:
            m -= self._tuning.decay_step
        self._state.multiplier = m

    def _unwind_or_flip(self, phase: LocomotionPhase, old_direction: MoveDirection, level: float) -> _Outcome:
        if self._committed():
            unwind = self._tuning.acceleration_step * abs(level)
            self._state.multiplier = max(0.0, self._state.multiplier - unwind)
            return self._drive(phase, old_direction)
        # Old commitment is spent; the new direction takes over next tick.
        self._state.multiplier = 0.0
        self._state.last_level = level
        logger.debug("locomotion reversal complete (level=%+.0f)", level)
        return (phase, MoveDirection.NONE, None)

    def _coast(self, last: float) -> _Outcome:
        if self._committed():
            self._state.multiplier = max(0.0, self._state.multiplier - self._tuning.decay_step)
            if last > 0.0:
                direction = MoveDirection.FORWARD
            elif last < 0.0:
                direction = MoveDirection.BACKWARD
            else:
                direction = MoveDirection.NONE
            return self._drive(LocomotionPhase.COAST, direction)
        self._state.multiplier = 0.0
        self._state.last_level = 0.0
        return (LocomotionPhase.REST, MoveDirection.NONE, None)

    def _drive(self, phase: LocomotionPhase, direction: MoveDirection) -> _Outcome:
        speed = self._state.base_speed * self._state.multiplier
        self._sink.set_max_speed(speed)
        if direction is not MoveDirection.NONE:
            self._sink.add_movement_input(self._sink.forward_vector(), float(direction.value))
        return (phase, direction, speed)
