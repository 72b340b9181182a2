from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from walker.locomotion import LocomotionTuning
from walker.settings import FeatureFlags, Settings, Tuning, load_settings, save_settings


def test_missing_settings_file_yields_defaults(tmp_path: Path) -> None:
    settings = load_settings(tmp_path / "nope.json")

    assert settings == Settings()
    assert settings.tuning.locomotion() == LocomotionTuning()


def test_settings_round_trip_through_json(tmp_path: Path) -> None:
    path = tmp_path / "cfg" / "walker_settings.json"
    settings = Settings(
        tuning=Tuning(acceleration_step=0.02, base_walk_speed=4.5, double_click_time=0.25),
        flags=FeatureFlags(show_debug=False, record_telemetry=True),
    )

    save_settings(settings, path)
    loaded = load_settings(path)

    assert loaded == settings
    assert json.loads(path.read_text(encoding="utf-8"))["tuning"]["acceleration_step"] == 0.02


def test_partial_payload_keeps_defaults_and_drops_unknown_keys() -> None:
    settings = Settings.from_dict(
        {
            "tuning": {"decay_step": 0.05, "gravity": 28.0},
            "flags": {"record_telemetry": True, "bunny_hop": False},
        }
    )

    assert settings.tuning.decay_step == 0.05
    assert settings.tuning.acceleration_step == Tuning().acceleration_step
    assert settings.flags.record_telemetry is True
    assert settings.flags.show_debug is True


def test_malformed_json_falls_back_with_warning(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    path = tmp_path / "walker_settings.json"
    path.write_text("{not json", encoding="utf-8")

    with caplog.at_level(logging.WARNING, logger="walker.settings"):
        settings = load_settings(path)

    assert settings == Settings()
    assert "unreadable settings" in caplog.text


def test_non_object_payload_falls_back(tmp_path: Path) -> None:
    path = tmp_path / "walker_settings.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")

    assert load_settings(path) == Settings()


def test_invalid_locomotion_steps_reset_tuning_only(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    path = tmp_path / "walker_settings.json"
    path.write_text(
        json.dumps({"tuning": {"acceleration_step": -1.0}, "flags": {"show_debug": False}}),
        encoding="utf-8",
    )

    with caplog.at_level(logging.WARNING, logger="walker.settings"):
        settings = load_settings(path)

    assert settings.tuning == Tuning()
    assert settings.flags.show_debug is False
    assert "invalid locomotion tuning" in caplog.text


def test_tuning_builds_frozen_locomotion_tuning() -> None:
    loco = Tuning(max_level=3, acceleration_step=0.02, decay_step=0.03).locomotion()

    assert loco == LocomotionTuning(max_level=3, acceleration_step=0.02, decay_step=0.03)


def test_wrongly_typed_fields_fall_back_per_field(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    path = tmp_path / "walker_settings.json"
    path.write_text(
        json.dumps(
            {
                "tuning": {"base_walk_speed": "fast", "double_click_time": None, "decay_step": 0.02},
                "flags": {"show_debug": "yes", "record_telemetry": True},
            }
        ),
        encoding="utf-8",
    )

    with caplog.at_level(logging.WARNING, logger="walker.settings"):
        settings = load_settings(path)

    assert settings.tuning == Tuning(decay_step=0.02)
    assert settings.flags == FeatureFlags(show_debug=True, record_telemetry=True)
    for key in ("tuning.base_walk_speed", "tuning.double_click_time", "flags.show_debug"):
        assert f"Ignoring setting {key}" in caplog.text


def test_loaded_fallback_tuning_drives_a_headless_run(tmp_path: Path) -> None:
    from walker.simulate import parse_script, run_script

    path = tmp_path / "walker_settings.json"
    path.write_text(json.dumps({"tuning": {"base_walk_speed": "fast", "double_click_time": None}}), encoding="utf-8")

    recorder = run_script(parse_script("max_forward@0"), ticks=30, tuning=load_settings(path).tuning)

    last = recorder.rows[-1]
    assert 0.0 < last["max_speed"] < Tuning().base_walk_speed * 4
    assert recorder.summary()["distance"] > 0.0


def test_integer_valued_floats_are_accepted() -> None:
    settings = Settings.from_dict({"tuning": {"base_walk_speed": 5, "max_level": 3}})

    assert settings.tuning.base_walk_speed == 5.0
    assert isinstance(settings.tuning.base_walk_speed, float)
    assert settings.tuning.locomotion().max_level == 3


def test_fractional_max_level_is_rejected_not_truncated(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    with pytest.raises(ValueError):
        Tuning(max_level=4.5).locomotion()  # type: ignore[arg-type]

    path = tmp_path / "walker_settings.json"
    path.write_text(json.dumps({"tuning": {"max_level": 4.5, "base_walk_speed": 3.0}}), encoding="utf-8")

    with caplog.at_level(logging.WARNING, logger="walker.settings"):
        settings = load_settings(path)

    assert settings.tuning == Tuning()
    assert "invalid locomotion tuning" in caplog.text
