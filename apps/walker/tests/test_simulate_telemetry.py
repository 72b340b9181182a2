from __future__ import annotations

import csv
import json
from pathlib import Path

import pytest

from walker.locomotion.state import LocomotionPhase
from walker.settings import Tuning
from walker.simulate import ScriptEvent, parse_script, run_script
from walker.telemetry import CSV_FIELDS, LocomotionRecorder


def test_parse_script_sorts_by_tick_and_normalizes_commands() -> None:
    events = parse_script(" Stop@30, forward@0 ,, max_backward@12 ")

    assert events == [
        ScriptEvent(tick=0, command="forward"),
        ScriptEvent(tick=12, command="max_backward"),
        ScriptEvent(tick=30, command="stop"),
    ]


@pytest.mark.parametrize("script", ["jump@3", "forward", "forward@x", "forward@-1"])
def test_parse_script_rejects_bad_items(script: str) -> None:
    with pytest.raises(ValueError):
        parse_script(script)


def test_two_quick_forward_presses_reach_full_forward() -> None:
    recorder = run_script(parse_script("forward@0,forward@5"), ticks=20, dt=1.0 / 60.0)

    rows = recorder.rows
    assert rows[0]["level"] == 1
    assert rows[5]["level"] == 4
    assert all(r["phase"] == "forward" for r in rows)
    assert rows[-1]["y"] > 0.0


def test_reversal_then_stop_trace_has_expected_phases() -> None:
    script = "max_forward@0,max_backward@50,stop@200"
    recorder = run_script(parse_script(script), ticks=700, tuning=Tuning(base_walk_speed=2.0))

    phases = [r["phase"] for r in recorder.rows]
    assert phases[0] == LocomotionPhase.FORWARD.value
    # 50 ticks of +0.04 are unwound at 0.04 per tick while still moving forward.
    assert phases[50:100] == [LocomotionPhase.REVERSE_TO_BACKWARD.value] * 50
    assert recorder.rows[99]["direction"] == 1
    assert recorder.rows[100]["direction"] == 0
    assert recorder.rows[101]["phase"] == LocomotionPhase.BACKWARD.value
    assert recorder.rows[101]["direction"] == -1
    assert LocomotionPhase.COAST.value in phases[200:]
    assert phases[-1] == LocomotionPhase.REST.value

    summary = recorder.summary()
    assert summary["tick_count"] == 700
    assert summary["reversal_ticks"] == 51
    # Backward ramp ran ticks 101..199 before the stop: 99 * 0.04.
    assert summary["peak_multiplier"] == pytest.approx(3.96, abs=1e-6)
    assert summary["distance"] > 0.0


def test_right_turn_changes_heading_of_subsequent_movement() -> None:
    straight = run_script(parse_script("max_forward@0"), ticks=30)
    turned = run_script(parse_script("max_forward@0,right@0,right@1,right@2"), ticks=30)

    assert straight.rows[-1]["x"] == pytest.approx(0.0, abs=1e-6)
    assert turned.rows[-1]["x"] > 0.0


def test_run_script_rejects_bad_arguments() -> None:
    with pytest.raises(ValueError):
        run_script([], ticks=-1)
    with pytest.raises(ValueError):
        run_script([], ticks=10, dt=0.0)


def test_recorder_export_writes_csv_and_summary(tmp_path: Path) -> None:
    recorder = run_script(parse_script("forward@0,stop@10"), ticks=30)
    out = tmp_path / "exports" / "run.csv"

    export = recorder.export(csv_path=out)

    assert export.tick_count == 30
    assert export.summary_path == out.with_suffix(".summary.json")
    with out.open(encoding="utf-8", newline="") as fh:
        reader = csv.DictReader(fh)
        assert reader.fieldnames == CSV_FIELDS
        rows = list(reader)
    assert len(rows) == 30
    assert rows[0]["phase"] == "forward"
    summary = json.loads(export.summary_path.read_text(encoding="utf-8"))
    assert summary["tick_count"] == 30
    assert summary["moving_ticks"] == sum(1 for r in rows if r["direction"] != "0")


def test_empty_recorder_summary_is_zeroed() -> None:
    summary = LocomotionRecorder().summary()

    assert summary["tick_count"] == 0
    assert summary["peak_multiplier"] == 0.0
    assert summary["distance"] == 0.0
    assert summary["phase_counts"] == {}
