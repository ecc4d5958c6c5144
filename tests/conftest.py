"""Pytest hooks to generate fixtures (EEST-style)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from deal_spec.state_digest import compute_state_digest
from deal_spec.state_transition import TransitionResult, apply_block, apply_call
from deal_spec.types import Call, LedgerState
from tools.fixtures_io import call_to_json, state_to_json

_STATE_CASES: dict[str, list[dict[str, Any]]] = {}
_VECTOR_CASES: dict[str, list[dict[str, Any]]] = {}

Outcome = tuple[LedgerState, TransitionResult]


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--output",
        action="store",
        default=None,
        help="Output directory for generated fixtures",
    )


def _expected(post_state: LedgerState, result: TransitionResult) -> dict[str, Any]:
    post_json = state_to_json(post_state)
    return {
        "ok": result.ok,
        "error": result.error.code.name if result.error else None,
        "value": result.value,
        "post_state": post_json,
        "state_digest": compute_state_digest(post_json),
    }


@pytest.fixture
def state_test_group() -> Callable[[str, str, LedgerState, Call], Outcome]:
    """Apply a call, collect it under a fixture path and return the outcome."""

    def _state_test_group(
        rel_path: str, name: str, pre_state: LedgerState, call: Call
    ) -> Outcome:
        pre_json = state_to_json(pre_state)
        post_state, result = apply_call(pre_state, call)
        _STATE_CASES.setdefault(rel_path, []).append(
            {
                "name": name,
                "pre_state": pre_json,
                "call": call_to_json(call),
                "expected": _expected(post_state, result),
            }
        )
        return post_state, result

    return _state_test_group


@pytest.fixture
def block_test_group() -> Callable[[str, str, LedgerState, list[Call]], Outcome]:
    """Apply a block of calls, collect it under a fixture path and return the outcome."""

    def _block_test_group(
        rel_path: str, name: str, pre_state: LedgerState, calls: list[Call]
    ) -> Outcome:
        pre_json = state_to_json(pre_state)
        post_state, result = apply_block(pre_state, calls)
        _STATE_CASES.setdefault(rel_path, []).append(
            {
                "name": name,
                "pre_state": pre_json,
                "calls": [call_to_json(c) for c in calls],
                "expected": _expected(post_state, result),
            }
        )
        return post_state, result

    return _block_test_group


@pytest.fixture
def vector_test_group() -> Callable[[str, dict[str, Any]], None]:
    """Collect pre-built test_vectors under a specific fixture path."""

    def _vector_test_group(rel_path: str, vector: dict[str, Any]) -> None:
        _VECTOR_CASES.setdefault(rel_path, []).append(vector)

    return _vector_test_group


def pytest_sessionfinish(session: pytest.Session, exitstatus: int) -> None:
    output_dir = session.config.getoption("--output")
    if not output_dir:
        return

    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    for rel_path, cases in _STATE_CASES.items():
        if not cases:
            continue
        target = out / rel_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(json.dumps({"cases": cases}, indent=2))

    for rel_path, vectors in _VECTOR_CASES.items():
        if not vectors:
            continue
        target = out / rel_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(json.dumps({"test_vectors": vectors}, indent=2))
