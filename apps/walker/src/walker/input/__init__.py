"""Input event -> locomotion command mapping."""

from walker.input.bindings import DoubleClickDetector, InputAction, InputAdapter, LookSink

__all__ = [
    "DoubleClickDetector",
    "InputAction",
    "InputAdapter",
    "LookSink",
]
