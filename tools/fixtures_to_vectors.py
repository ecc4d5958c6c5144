#!/usr/bin/env python3
"""Convert spec fixtures into client-consumable YAML vectors.

Each JSON fixture file of recorded cases becomes one YAML file of
`test_vectors` with the expected error code and state digest filled in, so
another implementation can replay them without the Python spec.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT / "src"))
sys.path.insert(0, str(ROOT / "tools"))

from deal_spec.errors import ErrorCode  # noqa: E402
from deal_spec.state_digest import compute_state_digest  # noqa: E402
from yaml_dump import write_vectors  # noqa: E402


def _map_error_code(name: str | None) -> int:
    if not name:
        return int(ErrorCode.SUCCESS)
    return int(ErrorCode[name])


def case_to_vector(case: dict[str, Any]) -> dict[str, Any]:
    expected = case.get("expected", {})
    post_state = expected.get("post_state")
    return {
        "name": case.get("name", ""),
        "description": case.get("description", ""),
        "pre_state": case.get("pre_state"),
        "input": {
            "kind": "block" if "calls" in case else "call",
            "call": case.get("call"),
            "calls": case.get("calls"),
        },
        "expected": {
            "success": bool(expected.get("ok", False)),
            "error": expected.get("error"),
            "error_code": _map_error_code(expected.get("error")),
            "value": expected.get("value"),
            "state_digest": compute_state_digest(post_state) if post_state else "",
            "post_state": post_state,
        },
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Convert fixtures to vectors")
    parser.add_argument("--fixtures", default=str(ROOT / "fixtures"))
    parser.add_argument("--vectors", default=str(ROOT / "vectors"))
    args = parser.parse_args()

    fixtures = Path(args.fixtures).resolve()
    vectors = Path(args.vectors).resolve()

    if not fixtures.exists():
        raise SystemExit(f"fixtures dir not found: {fixtures}")

    count = 0
    for path in sorted(fixtures.rglob("*.json")):
        data = json.loads(path.read_text())
        if not isinstance(data, dict):
            continue

        if isinstance(data.get("cases"), list):
            vectors_out = [case_to_vector(c) for c in data["cases"]]
        elif isinstance(data.get("test_vectors"), list):
            vectors_out = data["test_vectors"]
        else:
            continue

        dest = (vectors / path.relative_to(fixtures)).with_suffix(".yaml")
        dest.parent.mkdir(parents=True, exist_ok=True)
        write_vectors(dest, vectors_out, source=str(path.relative_to(fixtures)))
        count += 1

    print(f"Written {count} vector files into {vectors}")


if __name__ == "__main__":
    main()
