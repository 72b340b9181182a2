"""Panda3D side of the locomotion contracts (movement sink, look targets)."""

from walker.engine.character import CharacterMovement, CharacterRig, ControlRotation

__all__ = [
    "CharacterMovement",
    "CharacterRig",
    "ControlRotation",
]
