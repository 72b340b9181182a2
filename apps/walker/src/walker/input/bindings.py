from __future__ import annotations

from enum import Enum
from typing import Protocol

from walker.locomotion.controller import LocomotionController
from walker.settings import Tuning


class InputAction(str, Enum):
    FORWARD = "ForwardMovement"
    BACKWARD = "BackwardMovement"
    STOP = "StopMovement"


class LookSink(Protocol):
    """Rotation targets fed by the turn/look pass-through (degrees)."""

    def add_yaw_input(self, delta_deg: float) -> None: ...

    def add_pitch_input(self, delta_deg: float) -> None: ...

    def add_actor_yaw(self, delta_deg: float) -> None: ...


class DoubleClickDetector:
    """
    Edge-based double-click detection per action.

    A press within `window` seconds of the previous press of the same action fires once;
    the detector then forgets that action so a third quick press starts a new pair.
    """

    def __init__(self, *, window: float) -> None:
        self._window = max(0.0, float(window))
        self._last_press: dict[str, float] = {}

    @property
    def window(self) -> float:
        return self._window

    def press(self, action: str, *, now: float) -> bool:
        key = str(action)
        prev = self._last_press.get(key)
        if prev is not None and 0.0 <= float(now) - prev <= self._window:
            del self._last_press[key]
            return True
        self._last_press[key] = float(now)
        return False

    def clear(self) -> None:
        self._last_press.clear()


class InputAdapter:
    """Maps engine input events onto locomotion level commands and rotation pass-through."""

    def __init__(
        self,
        *,
        locomotion: LocomotionController,
        look: LookSink,
        base_turn_rate: float = 45.0,
        base_look_up_rate: float = 45.0,
        actor_turn_step: float = 2.0,
        double_click_time: float = 0.3,
    ) -> None:
        self.locomotion = locomotion
        self.look = look
        self.base_turn_rate = float(base_turn_rate)
        self.base_look_up_rate = float(base_look_up_rate)
        self.actor_turn_step = float(actor_turn_step)
        self.double_click = DoubleClickDetector(window=double_click_time)
        # Mirrors "is this pawn possessed": actor turning is ignored without a controller.
        self.controller_attached = True

    @classmethod
    def from_tuning(cls, *, tuning: Tuning, locomotion: LocomotionController, look: LookSink) -> "InputAdapter":
        return cls(
            locomotion=locomotion,
            look=look,
            base_turn_rate=tuning.base_turn_rate,
            base_look_up_rate=tuning.base_look_up_rate,
            actor_turn_step=tuning.actor_turn_step,
            double_click_time=tuning.double_click_time,
        )

    def press(self, action: InputAction | str, *, now: float) -> None:
        act = InputAction(action)
        self.on_pressed(act)
        if act is not InputAction.STOP and self.double_click.press(act.value, now=now):
            self.on_double_click(act)

    def on_pressed(self, action: InputAction) -> None:
        if action is InputAction.FORWARD:
            self.locomotion.increase()
        elif action is InputAction.BACKWARD:
            self.locomotion.decrease()
        elif action is InputAction.STOP:
            self.locomotion.stop()

    def on_double_click(self, action: InputAction) -> None:
        if action is InputAction.FORWARD:
            self.locomotion.set_max_forward()
        elif action is InputAction.BACKWARD:
            self.locomotion.set_max_backward()

    # Axis pass-through.

    def turn(self, value: float) -> None:
        self.look.add_yaw_input(float(value))

    def turn_at_rate(self, rate: float, *, dt: float) -> None:
        self.look.add_yaw_input(float(rate) * self.base_turn_rate * max(0.0, float(dt)))

    def look_up(self, value: float) -> None:
        self.look.add_pitch_input(float(value))

    def look_up_at_rate(self, rate: float, *, dt: float) -> None:
        self.look.add_pitch_input(float(rate) * self.base_look_up_rate * max(0.0, float(dt)))

    def move_right(self, value: float) -> None:
        if not self.controller_attached or float(value) == 0.0:
            return
        self.look.add_actor_yaw(self.actor_turn_step * float(value))
