"""Fixture serialization, vector conversion and conformance replay."""

from __future__ import annotations

import pytest

from deal_spec.state_digest import compute_state_digest
from deal_spec.state_transition import apply_call
from deal_spec.test_accounts import ADMIN, ALICE, BOB
from deal_spec.types import AccountState, Call, CallType, LedgerState
from tools.fixtures_io import call_from_json, call_to_json, state_from_json, state_to_json


def _lifecycle_state() -> LedgerState:
    state = LedgerState(admin=ADMIN, max_rating=10)
    state.global_state.block_height = 4
    state.accounts[ALICE] = AccountState(address=ALICE, balance=700)
    calls = [
        Call(ALICE, CallType.INITIATE_DEAL, {"counterparty": BOB, "value": 300}),
        Call(ALICE, CallType.COMPLETE_PAYMENT, {"payment_id": 1}),
        Call(BOB, CallType.RATE_COUNTERPARTY, {"deal_id": 1, "rating": 3}),
    ]
    for call in calls:
        state, result = apply_call(state, call)
        assert result.ok
    return state


def test_state_json_preserves_records() -> None:
    state = _lifecycle_state()
    restored = state_from_json(state_to_json(state))
    assert restored == state


def test_call_json_restores_identities() -> None:
    call = Call(ALICE, CallType.INITIATE_DEAL, {"counterparty": BOB, "value": 9})
    data = call_to_json(call)
    assert data["payload"]["counterparty"] == BOB.hex()
    assert call_from_json(data) == call


def _recorded_case() -> dict:
    pre = _lifecycle_state()
    call = Call(ALICE, CallType.INITIATE_DEAL, {"counterparty": BOB, "value": 50})
    post, result = apply_call(pre, call)
    return {
        "name": "second_deal",
        "pre_state": state_to_json(pre),
        "call": call_to_json(call),
        "expected": {
            "ok": result.ok,
            "error": None,
            "value": result.value,
            "post_state": state_to_json(post),
        },
    }


def test_case_to_vector_and_replay() -> None:
    from conformance.runner import run_vector
    from tools.fixtures_to_vectors import case_to_vector

    vector = case_to_vector(_recorded_case())
    assert vector["expected"]["success"] is True
    assert vector["expected"]["error_code"] == 0
    assert vector["expected"]["value"] == 2
    assert vector["expected"]["state_digest"] == compute_state_digest(
        vector["expected"]["post_state"]
    )
    assert run_vector(vector) is None


def test_replay_detects_divergence() -> None:
    from conformance.runner import run_vector
    from tools.fixtures_to_vectors import case_to_vector

    vector = case_to_vector(_recorded_case())
    vector["expected"]["state_digest"] = "00" * 32
    assert run_vector(vector).startswith("state_digest")


def test_consume_checks_recorded_case() -> None:
    from tools.consume import check_case

    case = _recorded_case()
    assert check_case(case) is None

    case["expected"]["value"] = 7
    assert check_case(case) == "second_deal: value_mismatch"


def test_yaml_vectors_round_trip(tmp_path) -> None:
    from tools.fixtures_to_vectors import case_to_vector
    from tools.yaml_dump import HEADER, load_vectors, write_vectors

    vectors = [case_to_vector(_recorded_case())]
    path = tmp_path / "vectors.yaml"
    write_vectors(path, vectors, source="deals/initiate_deal.json")
    text = path.read_text()
    assert text.startswith(HEADER)
    assert "# source: deals/initiate_deal.json\n" in text
    assert load_vectors(path) == vectors


def test_load_vectors_rejects_bad_shape(tmp_path) -> None:
    from tools.yaml_dump import load_vectors

    empty = tmp_path / "empty.yaml"
    empty.write_text("")
    assert load_vectors(empty) == []

    bad = tmp_path / "bad.yaml"
    bad.write_text("test_vectors: {name: x}\n")
    with pytest.raises(ValueError, match="test_vectors"):
        load_vectors(bad)


def test_fill_clears_stale_fixtures(tmp_path, monkeypatch) -> None:
    from tools import fill

    out = tmp_path / "fixtures"
    (out / "old").mkdir(parents=True)
    (out / "old" / "renamed_test.json").write_text("{}")

    def fake_call(cmd, env, cwd):
        assert cmd[cmd.index("--output") + 1] == str(out.resolve())
        (out / "deals").mkdir(parents=True)
        (out / "deals" / "initiate_deal.json").write_text("{}")
        return 0

    monkeypatch.setattr(fill.subprocess, "call", fake_call)
    monkeypatch.setattr(fill.sys, "argv", ["fill.py", "--out", str(out)])
    assert fill.main() == 0
    assert sorted(p.name for p in out.rglob("*.json")) == ["initiate_deal.json"]


def test_global_state_json_carries_only_height() -> None:
    state = _lifecycle_state()
    assert state_to_json(state)["global_state"] == {"block_height": 4}
    assert state.deals[1].timestamp == 4
    assert state.payments[1].created_at == 4
