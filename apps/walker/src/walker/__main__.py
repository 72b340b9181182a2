from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from walker.app_config import RunConfig
from walker.settings import load_settings


def _cmd_simulate(args: argparse.Namespace) -> int:
    from walker.simulate import parse_script, run_script

    try:
        events = parse_script(args.script)
    except ValueError as e:
        print(f"walker simulate: {e}", file=sys.stderr)
        return 2
    settings = load_settings(args.settings)
    recorder = run_script(events, ticks=int(args.ticks), tuning=settings.tuning, dt=float(args.dt))
    out_dir = Path(args.out)
    export = recorder.export(csv_path=out_dir / "locomotion.csv", summary_path=out_dir / "locomotion.summary.json")
    print(json.dumps({"csv": str(export.csv_path), "summary": recorder.summary()}, indent=2, sort_keys=True))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="walker", description="WALKER momentum locomotion demo and tools")
    parser.add_argument(
        "--smoke",
        action="store_true",
        help="Run briefly and exit (for quick verification).",
    )
    parser.add_argument(
        "--settings",
        type=Path,
        default=Path("walker_settings.json"),
        help="Path to JSON settings file for locomotion tuning.",
    )
    parser.add_argument(
        "--telemetry",
        type=Path,
        default=None,
        help="Record per-tick locomotion telemetry and write it to this CSV path on exit.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log locomotion phase changes (DEBUG).")

    sub = parser.add_subparsers(dest="cmd")
    sp = sub.add_parser("simulate", help="Run a scripted input sequence headless and export telemetry.")
    sp.add_argument(
        "--script",
        required=True,
        help='Comma-separated command@tick items, e.g. "forward@0,forward@5,stop@240".',
    )
    sp.add_argument("--ticks", type=int, default=600, help="Number of ticks to simulate.")
    sp.add_argument("--dt", type=float, default=1.0 / 60.0, help="Frame delta time in seconds.")
    sp.add_argument("--out", default="telemetry", help="Output directory for CSV + summary JSON.")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.cmd == "simulate":
        return _cmd_simulate(args)

    from walker.game import run

    run(cfg=RunConfig(smoke=args.smoke, settings_path=args.settings, telemetry_path=args.telemetry))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
