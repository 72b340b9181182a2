"""
Headless locomotion runs driven by a compact input script.

Script format: comma-separated `command@tick` items, e.g. "forward@0,forward@5,stop@240".
Presses go through the same input adapter as the live game, so two `forward` presses
within the double-click window escalate to full forward.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass

from panda3d.core import NodePath

from walker.driver import CharacterDriver
from walker.input.bindings import InputAction, InputAdapter
from walker.settings import Tuning
from walker.telemetry import LocomotionRecorder

SCRIPT_COMMANDS = ("forward", "backward", "stop", "max_forward", "max_backward", "left", "right")


@dataclass(frozen=True)
class ScriptEvent:
    tick: int
    command: str


def parse_script(text: str) -> list[ScriptEvent]:
    events: list[ScriptEvent] = []
    for raw in str(text or "").split(","):
        item = raw.strip()
        if not item:
            continue
        command, sep, tick_text = item.partition("@")
        command = command.strip().lower()
        if not sep:
            raise ValueError(f"Script item {item!r} is missing '@<tick>'")
        if command not in SCRIPT_COMMANDS:
            raise ValueError(f"Unknown script command {command!r} (expected one of: {', '.join(SCRIPT_COMMANDS)})")
        try:
            tick = int(tick_text.strip())
        except ValueError:
            raise ValueError(f"Script item {item!r} has a non-integer tick") from None
        if tick < 0:
            raise ValueError(f"Script item {item!r} has a negative tick")
        events.append(ScriptEvent(tick=tick, command=command))
    events.sort(key=lambda e: e.tick)
    return events


def _apply(adapter: InputAdapter, command: str, *, now: float) -> None:
    if command == "forward":
        adapter.press(InputAction.FORWARD, now=now)
    elif command == "backward":
        adapter.press(InputAction.BACKWARD, now=now)
    elif command == "stop":
        adapter.press(InputAction.STOP, now=now)
    elif command == "max_forward":
        adapter.on_double_click(InputAction.FORWARD)
    elif command == "max_backward":
        adapter.on_double_click(InputAction.BACKWARD)
    elif command == "left":
        adapter.move_right(-1.0)
    elif command == "right":
        adapter.move_right(1.0)


def run_script(
    events: list[ScriptEvent],
    *,
    ticks: int,
    tuning: Tuning | None = None,
    dt: float = 1.0 / 60.0,
) -> LocomotionRecorder:
    if ticks < 0:
        raise ValueError("ticks must be >= 0")
    if dt <= 0.0:
        raise ValueError("dt must be > 0")
    tuning = tuning if tuning is not None else Tuning()

    recorder = LocomotionRecorder()
    driver = CharacterDriver(node=NodePath("walker"), tuning=tuning, recorder=recorder)

    by_tick: dict[int, list[str]] = defaultdict(list)
    for ev in events:
        by_tick[int(ev.tick)].append(ev.command)

    for tick in range(int(ticks)):
        now = tick * float(dt)
        for command in by_tick.get(tick, ()):
            _apply(driver.input, command, now=now)
        driver.frame(dt)
    return recorder
