"""Regenerate deal ledger fixtures by running the pytest suite with --output.

The fixtures directory is wiped first: a renamed or deleted test must not
leave its old cases behind for consume.py to replay.
"""

from __future__ import annotations

import argparse
import os
import shutil
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
OUT = ROOT / "fixtures"


def _env() -> dict[str, str]:
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join([str(ROOT / "src"), str(ROOT)])
    return env


def main() -> int:
    parser = argparse.ArgumentParser(description="Fill deal ledger fixtures")
    parser.add_argument("--out", default=str(OUT))
    parser.add_argument("--keep", action="store_true", help="do not clear --out first")
    parser.add_argument(
        "--vectors", default=None, help="also convert the fixtures into YAML vectors here"
    )
    args = parser.parse_args()
    out = Path(args.out).resolve()

    if out.exists() and not args.keep:
        print(f"Clearing {out}")
        shutil.rmtree(out)

    cmd = [sys.executable, "-m", "pytest", str(ROOT / "tests"), "-q", "--output", str(out)]
    print("Running:", " ".join(cmd))
    rc = subprocess.call(cmd, env=_env(), cwd=str(ROOT))
    if rc != 0:
        return rc

    written = sorted(out.rglob("*.json")) if out.exists() else []
    print(f"Filled {len(written)} fixture files into {out}")

    if args.vectors:
        convert = [
            sys.executable,
            str(ROOT / "tools" / "fixtures_to_vectors.py"),
            "--fixtures",
            str(out),
            "--vectors",
            args.vectors,
        ]
        rc = subprocess.call(convert, env=_env(), cwd=str(ROOT))
    return rc


if __name__ == "__main__":
    raise SystemExit(main())
