#!/usr/bin/env python3
"""
Run the walker app from a checkout without installing it.

    ./runner.py --smoke
    ./runner.py --print-cmd simulate --script forward@0,forward@5
"""

from __future__ import annotations

import os
from pathlib import Path
import shlex
import subprocess
import sys
from typing import Iterable

REPO_ROOT = Path(__file__).resolve().parent
APP_DIR = REPO_ROOT / "apps" / "walker"


def build_command(app_args: list[str]) -> list[str]:
    venv_py = APP_DIR / ".venv" / "bin" / "python"
    python = str(venv_py) if os.access(venv_py, os.X_OK) else (sys.executable or "python3")
    return [python, "-m", "walker", *app_args]


def build_env(env: dict[str, str]) -> dict[str, str]:
    out = dict(env)
    cur = out.get("PYTHONPATH", "")
    out["PYTHONPATH"] = os.pathsep.join([str(APP_DIR / "src")] + ([cur] if cur else []))
    return out


def main(argv: Iterable[str] | None = None) -> int:
    app_args = list(argv) if argv is not None else sys.argv[1:]
    print_cmd = "--print-cmd" in app_args
    if print_cmd:
        app_args.remove("--print-cmd")

    cmd = build_command(app_args)
    if print_cmd:
        print("+", " ".join(shlex.quote(x) for x in cmd))
        return 0
    return int(subprocess.run(cmd, cwd=str(APP_DIR), env=build_env(dict(os.environ))).returncode)


if __name__ == "__main__":
    raise SystemExit(main())
