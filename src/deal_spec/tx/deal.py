"""Deal registry specs (INITIATE_DEAL)."""

from __future__ import annotations

from copy import deepcopy

from ..config import IDENTITY_LEN, U64_MAX
from ..errors import ErrorCode, SpecError
from ..ids import Counter, next_id, verify_allocatable
from ..types import Call, CallType, Deal, DealState, LedgerState, Payment


def _is_int(v: object) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


def _check_payload(p: object) -> tuple[bytes, int]:
    if not isinstance(p, dict):
        raise SpecError(ErrorCode.INVALID_PAYLOAD, "deal payload must be dict")
    counterparty = p.get("counterparty")
    if not isinstance(counterparty, bytes) or len(counterparty) != IDENTITY_LEN:
        raise SpecError(ErrorCode.INVALID_PAYLOAD, "counterparty must be a 32-byte identity")
    value = p.get("value")
    if not _is_int(value):
        raise SpecError(ErrorCode.INVALID_PAYLOAD, "value must be an integer")
    return counterparty, value


def verify(state: LedgerState, call: Call) -> None:
    if call.call_type != CallType.INITIATE_DEAL:
        raise SpecError(ErrorCode.INVALID_TYPE, "unsupported deal call type")

    counterparty, value = _check_payload(call.payload)

    if counterparty == call.caller:
        raise SpecError(ErrorCode.SELF_DEAL, "counterparty cannot be the initiator")
    if counterparty == state.admin:
        raise SpecError(ErrorCode.INVALID_USER, "counterparty cannot be the admin")
    if value <= 0:
        raise SpecError(ErrorCode.ZERO_AMOUNT, "deal value must be > 0")
    if value < state.min_deal_value:
        raise SpecError(ErrorCode.LOW_VALUE, f"deal value below minimum {state.min_deal_value}")
    if value > U64_MAX:
        raise SpecError(ErrorCode.OVERFLOW, "deal value exceeds u64 max")

    verify_allocatable(state, Counter.DEAL)
    verify_allocatable(state, Counter.PAYMENT)


def apply(state: LedgerState, call: Call) -> tuple[LedgerState, int]:
    """Record an OPEN deal and its paired escrow payment.

    No value moves here; the transfer happens on payment completion.
    """
    ns = deepcopy(state)
    counterparty, value = _check_payload(call.payload)
    height = ns.global_state.block_height

    deal_id = next_id(ns, Counter.DEAL)
    payment_id = next_id(ns, Counter.PAYMENT)

    ns.payments[payment_id] = Payment(
        id=payment_id,
        from_=call.caller,
        to=counterparty,
        amount=value,
        deal_id=deal_id,
        is_complete=False,
        created_at=height,
    )
    ns.deals[deal_id] = Deal(
        id=deal_id,
        initiator=call.caller,
        counterparty=counterparty,
        value=value,
        payment_id=payment_id,
        state=DealState.OPEN,
        timestamp=height,
    )
    return ns, deal_id
