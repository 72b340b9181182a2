from __future__ import annotations

from typing import Callable

from panda3d.core import LVector3f, NodePath

from walker.common.error_log import ErrorLog
from walker.engine.character import CharacterMovement, CharacterRig
from walker.input.bindings import InputAdapter
from walker.locomotion.controller import LocomotionController
from walker.locomotion.state import LocomotionStep
from walker.settings import Tuning
from walker.telemetry import LocomotionRecorder


class CharacterDriver:
    """
    One character's locomotion stack on a Panda3D node, advanced one frame at a time.

    Shared by the live app and headless script runs so both go through the same
    input -> tick -> movement -> telemetry order.
    """

    def __init__(
        self,
        *,
        node: NodePath,
        tuning: Tuning,
        recorder: LocomotionRecorder | None = None,
        errors: ErrorLog | None = None,
    ) -> None:
        self.node = node
        self.movement = CharacterMovement(node=node, max_walk_speed=tuning.base_walk_speed)
        self.locomotion = LocomotionController(sink=self.movement, tuning=tuning.locomotion())
        self.rig = CharacterRig(node=node)
        self.input = InputAdapter.from_tuning(tuning=tuning, locomotion=self.locomotion, look=self.rig)
        self.recorder = recorder
        self.errors = errors
        # Index of the frame most recently started; None before the first frame.
        self.tick: int | None = None
        self.last_step: LocomotionStep | None = None

    def frame(self, dt: float, *, turn_axis: float = 0.0, rate_axis: float = 0.0) -> LocomotionStep:
        self.tick = 0 if self.tick is None else self.tick + 1
        # Body turn is an actor rotation; the locomotion core reads the resulting forward vector.
        self.input.move_right(turn_axis)
        if rate_axis != 0.0:
            self.input.turn_at_rate(rate_axis, dt=dt)

        step = self.locomotion.tick()
        self.movement.update(dt)
        self.last_step = step
        if self.recorder is not None:
            self.recorder.record(step=step, x=float(self.node.getX()), y=float(self.node.getY()))
        return step

    def guard(self, context: str, fn: Callable[[], object]) -> bool:
        """
        Run `fn`, recording a failure against the current frame instead of raising.

        Without an error log the exception propagates.
        """

        try:
            fn()
        except Exception as e:
            if self.errors is None:
                raise
            self.errors.record(context=context, exc=e, tick=self.tick, step=self.last_step)
            return False
        return True

    def reset(self, *, spawn: LVector3f) -> None:
        self.locomotion.reset()
        self.input.double_click.clear()
        self.node.setPos(spawn)
        self.node.setH(0.0)
