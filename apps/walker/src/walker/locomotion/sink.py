from __future__ import annotations

from typing import Protocol

from panda3d.core import LVector3f


class MovementSink(Protocol):
    """Narrow view of the engine's movement component used by the locomotion core."""

    @property
    def max_speed(self) -> float: ...

    def set_max_speed(self, speed: float) -> None: ...

    def forward_vector(self) -> LVector3f: ...

    def add_movement_input(self, direction: LVector3f, scale: float) -> None: ...
