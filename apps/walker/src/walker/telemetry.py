from __future__ import annotations

import csv
import json
import math
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from walker.locomotion.state import LocomotionPhase, LocomotionStep

CSV_FIELDS = ["tick", "level", "last_level", "multiplier", "max_speed", "direction", "phase", "x", "y"]

_REVERSAL_PHASES = {LocomotionPhase.REVERSE_TO_FORWARD, LocomotionPhase.REVERSE_TO_BACKWARD}


@dataclass(frozen=True)
class TelemetryExport:
    csv_path: Path
    summary_path: Path
    tick_count: int


class LocomotionRecorder:
    """Per-tick locomotion rows, exportable as CSV plus a JSON summary."""

    def __init__(self) -> None:
        self._rows: list[dict[str, Any]] = []
        self._steps: list[LocomotionStep] = []

    def __len__(self) -> int:
        return len(self._rows)

    @property
    def rows(self) -> list[dict[str, Any]]:
        return list(self._rows)

    def record(self, *, step: LocomotionStep, x: float = 0.0, y: float = 0.0) -> None:
        self._steps.append(step)
        self._rows.append(
            {
                "tick": len(self._rows),
                "level": int(step.level),
                "last_level": int(step.last_level),
                "multiplier": round(float(step.multiplier), 6),
                "max_speed": "" if step.max_speed is None else round(float(step.max_speed), 6),
                "direction": int(step.direction.value),
                "phase": step.phase.value,
                "x": round(float(x), 6),
                "y": round(float(y), 6),
            }
        )

    def clear(self) -> None:
        self._rows.clear()
        self._steps.clear()

    def summary(self) -> dict[str, Any]:
        phases = Counter(s.phase.value for s in self._steps)
        distance = 0.0
        for prev, cur in zip(self._rows, self._rows[1:]):
            distance += math.hypot(float(cur["x"]) - float(prev["x"]), float(cur["y"]) - float(prev["y"]))
        return {
            "tick_count": len(self._steps),
            "peak_multiplier": max((float(s.multiplier) for s in self._steps), default=0.0),
            "moving_ticks": sum(1 for s in self._steps if s.moved),
            "reversal_ticks": sum(1 for s in self._steps if s.phase in _REVERSAL_PHASES),
            "phase_counts": {k: int(v) for k, v in sorted(phases.items())},
            "distance": float(distance),
        }

    def export(self, *, csv_path: Path, summary_path: Path | None = None) -> TelemetryExport:
        csv_path = Path(csv_path)
        summary_path = Path(summary_path) if summary_path is not None else csv_path.with_suffix(".summary.json")
        csv_path.parent.mkdir(parents=True, exist_ok=True)
        summary_path.parent.mkdir(parents=True, exist_ok=True)
        with csv_path.open("w", encoding="utf-8", newline="") as fh:
            writer = csv.DictWriter(fh, fieldnames=CSV_FIELDS)
            writer.writeheader()
            writer.writerows(self._rows)
        summary_path.write_text(json.dumps(self.summary(), indent=2, sort_keys=True), encoding="utf-8")
        return TelemetryExport(csv_path=csv_path, summary_path=summary_path, tick_count=len(self._rows))
