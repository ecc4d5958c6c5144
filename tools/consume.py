"""Consume fixtures and validate against the Python spec."""

from __future__ import annotations

import json
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT / "src"))
sys.path.insert(0, str(ROOT / "tools"))

from deal_spec.state_digest import compute_state_digest  # noqa: E402
from deal_spec.state_transition import apply_block, apply_call  # noqa: E402
from fixtures_io import call_from_json, state_from_json, state_to_json  # noqa: E402


def check_case(case: dict) -> str | None:
    """Replay one recorded case; return a failure label or None."""
    pre_state = state_from_json(case["pre_state"])
    if "calls" in case:
        calls = [call_from_json(c) for c in case["calls"]]
        post_state, result = apply_block(pre_state, calls)
    else:
        post_state, result = apply_call(pre_state, call_from_json(case["call"]))

    expected = case["expected"]
    if result.ok != expected["ok"]:
        return f"{case['name']}: ok_mismatch"

    actual_err = result.error.code.name if result.error else None
    if actual_err != expected["error"]:
        return f"{case['name']}: error_mismatch"

    if result.ok and result.value != expected.get("value"):
        return f"{case['name']}: value_mismatch"

    actual_digest = compute_state_digest(state_to_json(post_state))
    if actual_digest != compute_state_digest(expected["post_state"]):
        return f"{case['name']}: state_mismatch"

    return None


def _check_state_cases(path: Path) -> list[str]:
    data = json.loads(path.read_text())
    failures = []
    for case in data.get("cases", []):
        failure = check_case(case)
        if failure:
            failures.append(f"{path.name}/{failure}")
    return failures


def main() -> None:
    fixtures = ROOT / "fixtures"

    failures: list[str] = []
    for path in sorted(fixtures.rglob("*.json")):
        failures.extend(_check_state_cases(path))

    if failures:
        for f in failures:
            print("FAIL", f)
        raise SystemExit(1)

    print("All fixtures passed")


if __name__ == "__main__":
    main()
