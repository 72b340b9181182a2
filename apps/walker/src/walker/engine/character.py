from __future__ import annotations

from panda3d.core import LQuaternionf, LVecBase3f, LVector3f, NodePath


class CharacterMovement:
    """
    Minimal walking component behind the locomotion sink contract.

    Movement input accumulates between frames; `update()` turns it into a velocity at the
    current max walk speed (input longer than 1 is clamped to unit length) and moves the node.
    """

    def __init__(self, *, node: NodePath, max_walk_speed: float) -> None:
        self.node = node
        self._max_walk_speed = float(max_walk_speed)
        self._pending = LVector3f(0, 0, 0)
        self.velocity = LVector3f(0, 0, 0)

    @property
    def max_speed(self) -> float:
        return float(self._max_walk_speed)

    def set_max_speed(self, speed: float) -> None:
        self._max_walk_speed = float(speed)

    def forward_vector(self) -> LVector3f:
        fwd = LVector3f(self.node.getQuat().getForward())
        fwd.z = 0.0
        if fwd.lengthSquared() > 1e-12:
            fwd.normalize()
        return fwd

    def add_movement_input(self, direction: LVector3f, scale: float) -> None:
        self._pending += LVector3f(direction) * float(scale)

    def pending_input(self) -> LVector3f:
        return LVector3f(self._pending)

    def update(self, dt: float) -> LVector3f:
        wish = LVector3f(self._pending)
        self._pending = LVector3f(0, 0, 0)
        if wish.lengthSquared() > 1.0:
            wish.normalize()
        self.velocity = wish * self._max_walk_speed
        step = max(0.0, float(dt))
        if step > 0.0 and self.velocity.lengthSquared() > 0.0:
            self.node.setPos(self.node.getPos() + self.velocity * step)
        return LVector3f(self.velocity)


class ControlRotation:
    """Controller yaw/pitch (degrees). Drives the camera only; the body turns separately."""

    PITCH_LIMIT = 89.0

    def __init__(self, *, yaw: float = 0.0, pitch: float = 0.0) -> None:
        self.yaw = float(yaw)
        self.pitch = max(-self.PITCH_LIMIT, min(self.PITCH_LIMIT, float(pitch)))

    def add_yaw_input(self, delta_deg: float) -> None:
        self.yaw = (self.yaw + float(delta_deg)) % 360.0

    def add_pitch_input(self, delta_deg: float) -> None:
        self.pitch = max(-self.PITCH_LIMIT, min(self.PITCH_LIMIT, self.pitch + float(delta_deg)))

    def forward(self) -> LVector3f:
        q = LQuaternionf()
        q.setHpr(LVecBase3f(self.yaw, self.pitch, 0.0))
        return LVector3f(q.getForward())


class CharacterRig:
    """
    Look target for the input adapter: controller rotation plus the character's own heading.

    Input yaw is positive to the right; Panda3D headings grow counter-clockwise, hence the sign flips.
    """

    def __init__(self, *, node: NodePath, control: ControlRotation | None = None, eye_height: float = 1.2) -> None:
        self.node = node
        self.control = control if control is not None else ControlRotation(yaw=float(node.getH()))
        self.eye_height = float(eye_height)

    def add_yaw_input(self, delta_deg: float) -> None:
        self.control.add_yaw_input(-float(delta_deg))

    def add_pitch_input(self, delta_deg: float) -> None:
        self.control.add_pitch_input(delta_deg)

    def add_actor_yaw(self, delta_deg: float) -> None:
        self.node.setH(self.node.getH() - float(delta_deg))

    def boom_camera_pos(self, *, boom_length: float) -> LVector3f:
        pivot = LVector3f(self.node.getPos()) + LVector3f(0, 0, self.eye_height)
        return pivot - self.control.forward() * max(0.0, float(boom_length))

    def look_target(self) -> LVector3f:
        return LVector3f(self.node.getPos()) + LVector3f(0, 0, self.eye_height)
