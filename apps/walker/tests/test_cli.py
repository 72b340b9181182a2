from __future__ import annotations

import json
from pathlib import Path

import pytest

from walker.__main__ import build_parser, main


def test_simulate_command_exports_telemetry(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    out_dir = tmp_path / "telemetry"

    code = main(
        [
            "--settings",
            str(tmp_path / "missing.json"),
            "simulate",
            "--script",
            "forward@0,forward@3,stop@60",
            "--ticks",
            "120",
            "--out",
            str(out_dir),
        ]
    )

    assert code == 0
    assert (out_dir / "locomotion.csv").is_file()
    assert (out_dir / "locomotion.summary.json").is_file()
    printed = json.loads(capsys.readouterr().out)
    assert printed["summary"]["tick_count"] == 120


def test_simulate_command_reports_bad_script(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = main(["simulate", "--script", "moonwalk@1", "--out", str(tmp_path)])

    assert code == 2
    assert "Unknown script command" in capsys.readouterr().err


def test_parser_defaults_for_game_mode() -> None:
    args = build_parser().parse_args([])

    assert args.cmd is None
    assert args.smoke is False
    assert args.settings == Path("walker_settings.json")
    assert args.telemetry is None
