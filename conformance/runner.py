#!/usr/bin/env python3
"""
Deal ledger conformance runner.

Replays YAML vectors (see tools/fixtures_to_vectors.py) through the Python
spec and checks success, error code and post-state digest for each one.
"""

import glob
import logging
import os
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import click

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT / "src"))
sys.path.insert(0, str(ROOT / "tools"))

from deal_spec.state_digest import compute_state_digest  # noqa: E402
from deal_spec.state_transition import apply_block, apply_call  # noqa: E402
from fixtures_io import call_from_json, state_from_json, state_to_json  # noqa: E402
from yaml_dump import load_vectors  # noqa: E402

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)


@dataclass
class VectorResult:
    """Outcome of replaying one vector."""
    vector_name: str
    suite_name: str
    passed: bool
    execution_time_ms: float
    error: Optional[str] = None


@dataclass
class SuiteResult:
    """Aggregated results of one vector file."""
    suite_name: str
    results: List[VectorResult] = field(default_factory=list)
    skipped: int = 0

    @property
    def passed(self) -> int:
        return sum(1 for r in self.results if r.passed)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.passed)


def run_vector(vector: Dict[str, Any]) -> Optional[str]:
    """
    Replay a single vector.

    Returns None when the spec agrees with the vector, otherwise a short
    description of the first divergence.
    """
    pre_state = state_from_json(vector["pre_state"])
    inp = vector.get("input", {})
    if inp.get("kind") == "block":
        calls = [call_from_json(c) for c in inp.get("calls") or []]
        post_state, result = apply_block(pre_state, calls)
    else:
        post_state, result = apply_call(pre_state, call_from_json(inp["call"]))

    expected = vector.get("expected", {})
    if result.ok != expected.get("success"):
        return f"success: expected {expected.get('success')}, got {result.ok}"

    actual_code = int(result.error.code) if result.error else 0
    if actual_code != expected.get("error_code", 0):
        return f"error_code: expected {expected.get('error_code')}, got {actual_code}"

    digest = compute_state_digest(state_to_json(post_state))
    if expected.get("state_digest") and digest != expected["state_digest"]:
        return f"state_digest: expected {expected['state_digest']}, got {digest}"

    return None


def run_suite(suite_path: str, stop_on_first_failure: bool = False) -> SuiteResult:
    """Run a test suite from a YAML file."""
    suite_name = Path(suite_path).stem
    logger.info(f"Running suite: {suite_name}")

    vectors = load_vectors(suite_path)
    suite_result = SuiteResult(suite_name=suite_name)

    for vector in vectors:
        if vector.get("runnable") is False:
            suite_result.skipped += 1
            continue

        name = vector.get("name", "unknown")
        start_time = time.time()
        try:
            divergence = run_vector(vector)
        except (KeyError, ValueError, TypeError) as e:
            logger.exception(f"Malformed vector {name}")
            divergence = f"malformed vector: {e}"

        result = VectorResult(
            vector_name=name,
            suite_name=suite_name,
            passed=divergence is None,
            execution_time_ms=(time.time() - start_time) * 1000,
            error=divergence,
        )
        suite_result.results.append(result)

        status = "PASS" if result.passed else "FAIL"
        logger.info(f"  [{status}] {name}")
        if divergence:
            logger.debug(f"    {divergence}")

        if not result.passed and stop_on_first_failure:
            break

    return suite_result


def find_vector_files(vector_dir: str) -> List[str]:
    """Find all vector YAML files in directory."""
    patterns = [
        os.path.join(vector_dir, "**", "*.yaml"),
        os.path.join(vector_dir, "**", "*.yml"),
    ]

    files = []
    for pattern in patterns:
        files.extend(glob.glob(pattern, recursive=True))

    return sorted(files)


@click.command()
@click.option(
    "--vectors",
    default=None,
    help="Path to vectors directory or specific YAML file",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Enable verbose output",
)
@click.option(
    "--stop-on-failure",
    is_flag=True,
    help="Stop on first test failure",
)
def main(vectors: Optional[str], verbose: bool, stop_on_failure: bool) -> None:
    """Run deal ledger conformance vectors against the Python spec."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    vector_dir = vectors or os.environ.get("VECTOR_DIR", str(ROOT / "vectors"))
    if os.path.isfile(vector_dir):
        vector_files = [vector_dir]
    else:
        vector_files = find_vector_files(vector_dir)

    if not vector_files:
        logger.error(f"No vector files found in {vector_dir}")
        sys.exit(1)

    logger.info(f"Found {len(vector_files)} vector files")

    total_passed = total_failed = total_skipped = 0
    for path in vector_files:
        suite = run_suite(path, stop_on_first_failure=stop_on_failure)
        total_passed += suite.passed
        total_failed += suite.failed
        total_skipped += suite.skipped
        if suite.failed and stop_on_failure:
            break

    click.echo(f"passed={total_passed} failed={total_failed} skipped={total_skipped}")
    sys.exit(1 if total_failed else 0)


if __name__ == "__main__":
    main()
