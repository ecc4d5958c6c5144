"""End-to-end deal lifecycle fixtures and block-atomic semantics."""

from __future__ import annotations

from deal_spec.queries import get_deal_info, get_payment_info, get_trust_profile
from deal_spec.test_accounts import ADMIN, ALICE, BOB, CAROL, DAVE
from deal_spec.types import (
    AccountState,
    Call,
    CallType,
    DealState,
    LedgerState,
    TrustProfile,
)

FIXTURE = "scenarios/deal_lifecycle.json"
BLOCK_FIXTURE = "scenarios/blocks.json"


def _base_state() -> LedgerState:
    state = LedgerState(admin=ADMIN)
    state.global_state.block_height = 100
    state.accounts[ALICE] = AccountState(address=ALICE, balance=5000)
    state.accounts[BOB] = AccountState(address=BOB, balance=200)
    state.accounts[CAROL] = AccountState(address=CAROL, balance=3000)
    return state


def _initiate(caller: bytes, counterparty: bytes, value: int) -> Call:
    return Call(caller, CallType.INITIATE_DEAL, {"counterparty": counterparty, "value": value})


def _complete(caller: bytes, payment_id: int) -> Call:
    return Call(caller, CallType.COMPLETE_PAYMENT, {"payment_id": payment_id})


def _rate(caller: bytes, deal_id: int, rating: int) -> Call:
    return Call(caller, CallType.RATE_COUNTERPARTY, {"deal_id": deal_id, "rating": rating})


def test_alice_bob_lifecycle(state_test_group) -> None:
    state = _base_state()

    state, result = state_test_group(FIXTURE, "lifecycle_initiate", state, _initiate(ALICE, BOB, 1000))
    assert result.ok and result.value == 1
    assert get_payment_info(state, 1).amount == 1000

    state, result = state_test_group(FIXTURE, "lifecycle_complete", state, _complete(ALICE, 1))
    assert result.ok and result.value is True
    assert state.accounts[ALICE].balance == 4000
    assert state.accounts[BOB].balance == 1200

    state, result = state_test_group(FIXTURE, "lifecycle_rate", state, _rate(BOB, 1, 5))
    assert result.ok and result.value is True

    assert get_trust_profile(state, ALICE) == TrustProfile(cumulative_score=5, deal_count=1)
    deal = get_deal_info(state, 1)
    assert deal.state == DealState.COMPLETE
    assert deal.trust_score == 5


def test_unknown_address_profile_is_zero() -> None:
    state = _base_state()
    assert get_trust_profile(state, DAVE) == TrustProfile(cumulative_score=0, deal_count=0)
    assert get_payment_info(state, 1) is None
    assert get_deal_info(state, 1) is None


def test_query_results_are_copies() -> None:
    state = _base_state()
    state.trust_profiles[ALICE] = TrustProfile(cumulative_score=3, deal_count=1)
    profile = get_trust_profile(state, ALICE)
    profile.cumulative_score = 99
    assert state.trust_profiles[ALICE].cumulative_score == 3


def test_profiles_are_per_initiator(state_test_group) -> None:
    state = _base_state()
    calls = [
        _initiate(ALICE, BOB, 100),
        _initiate(CAROL, BOB, 300),
        _complete(ALICE, 1),
        _complete(CAROL, 2),
        _rate(BOB, 1, 2),
        _rate(BOB, 2, 7),
    ]
    for i, call in enumerate(calls):
        state, result = state_test_group(FIXTURE, f"two_initiators_{i}", state, call)
        assert result.ok, result

    assert get_trust_profile(state, ALICE) == TrustProfile(cumulative_score=2, deal_count=1)
    assert get_trust_profile(state, CAROL) == TrustProfile(cumulative_score=7, deal_count=1)
    assert get_trust_profile(state, BOB) == TrustProfile()


def test_block_applies_in_order(block_test_group) -> None:
    state = _base_state()
    calls = [
        _initiate(ALICE, BOB, 1000),
        _complete(ALICE, 1),
        _rate(BOB, 1, 4),
    ]
    post, result = block_test_group(BLOCK_FIXTURE, "block_full_lifecycle", state, calls)
    assert result.ok
    assert result.value == [1, True, True]
    assert post.global_state.block_height == 101
    # Records are stamped with the height the block executes at.
    assert post.deals[1].timestamp == 100
    assert post.trust_profiles[ALICE].cumulative_score == 4


def test_block_rejected_atomically(block_test_group) -> None:
    state = _base_state()
    calls = [
        _initiate(ALICE, BOB, 1000),
        _complete(ALICE, 1),
        _complete(ALICE, 1),
    ]
    post, result = block_test_group(BLOCK_FIXTURE, "block_double_completion", state, calls)
    assert not result.ok
    assert result.error.code.name == "PAYMENT_COMPLETE"
    assert post is state
    assert post.deals == {}
    assert post.accounts[ALICE].balance == 5000
    assert post.global_state.block_height == 100


def test_empty_block_advances_height(block_test_group) -> None:
    state = _base_state()
    post, result = block_test_group(BLOCK_FIXTURE, "block_empty", state, [])
    assert result.ok
    assert result.value == []
    assert post.global_state.block_height == 101
