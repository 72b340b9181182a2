from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class RunConfig:
    smoke: bool = False
    # JSON settings file for tuning + flags. Missing file means defaults; F5 writes it.
    settings_path: Path = Path("walker_settings.json")
    # When set, per-tick locomotion telemetry is exported here (CSV + summary JSON) on exit.
    telemetry_path: Path | None = None
