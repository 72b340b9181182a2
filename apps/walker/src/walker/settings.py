from __future__ import annotations

import json
import logging
import math
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from walker.locomotion.config import LocomotionTuning

logger = logging.getLogger(__name__)


@dataclass
class Tuning:
    # Locomotion state machine.
    max_level: int = 4
    acceleration_step: float = 0.01
    decay_step: float = 0.01
    # Nominal max walk speed (m/s) captured as the locomotion base speed.
    base_walk_speed: float = 6.0

    # Turn/look pass-through (deg/s for rate inputs, deg per axis unit for actor turn).
    base_turn_rate: float = 45.0
    base_look_up_rate: float = 45.0
    actor_turn_step: float = 2.0

    # Second press of the same action inside this window counts as a double-click.
    double_click_time: float = 0.3
    camera_boom_length: float = 3.0

    def locomotion(self) -> LocomotionTuning:
        return LocomotionTuning(
            max_level=self.max_level,
            acceleration_step=self.acceleration_step,
            decay_step=self.decay_step,
        )


@dataclass
class FeatureFlags:
    show_debug: bool = True
    record_telemetry: bool = False


@dataclass
class Settings:
    tuning: Tuning = field(default_factory=Tuning)
    flags: FeatureFlags = field(default_factory=FeatureFlags)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "Settings":
        return cls(
            tuning=Tuning(**_section_values("tuning", payload.get("tuning", {}), Tuning())),
            flags=FeatureFlags(**_section_values("flags", payload.get("flags", {}), FeatureFlags())),
        )


def _coerce(value: Any, default: Any) -> Any:
    """Convert a JSON value to the type of `default`, raising TypeError/ValueError when it can't be."""

    if isinstance(default, bool):
        if not isinstance(value, bool):
            raise TypeError(f"expected true/false, got {value!r}")
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"expected a number, got {value!r}")
    if isinstance(default, int):
        # Fractional levels are left for LocomotionTuning.validate to reject.
        return value
    out = float(value)
    if not math.isfinite(out):
        raise ValueError(f"expected a finite number, got {value!r}")
    return out


def _section_values(section: str, raw: Any, defaults: Any) -> dict[str, Any]:
    values = asdict(defaults)
    if not isinstance(raw, dict):
        if raw is not None:
            logger.warning("Ignoring settings section %r: expected an object", section)
        return values
    for key, value in raw.items():
        # Unknown keys (older/newer settings files) are dropped instead of failing construction.
        if key not in values:
            continue
        try:
            values[key] = _coerce(value, values[key])
        except (TypeError, ValueError) as e:
            logger.warning("Ignoring setting %s.%s: %s (using default %r)", section, key, e, values[key])
    return values


def load_settings(path: Path) -> Settings:
    if not path.exists():
        return Settings()
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Ignoring unreadable settings file %s: %s", path, e)
        return Settings()
    if not isinstance(payload, dict):
        logger.warning("Ignoring settings file %s: expected a JSON object", path)
        return Settings()
    settings = Settings.from_dict(payload)
    try:
        settings.tuning.locomotion()
    except (TypeError, ValueError) as e:
        logger.warning("Ignoring invalid locomotion tuning in %s: %s", path, e)
        settings.tuning = Tuning()
    return settings


def save_settings(settings: Settings, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(settings.to_dict(), indent=2, sort_keys=True), encoding="utf-8")
