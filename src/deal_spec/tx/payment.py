"""Payment ledger specs (COMPLETE_PAYMENT)."""

from __future__ import annotations

from copy import deepcopy

from ..account_model import transfer, verify_transfer
from ..errors import ErrorCode, SpecError
from ..types import Call, CallType, DealState, LedgerState, Payment


def _lookup(state: LedgerState, p: object) -> Payment:
    if not isinstance(p, dict):
        raise SpecError(ErrorCode.INVALID_PAYLOAD, "payment payload must be dict")
    payment_id = p.get("payment_id")
    payment = None
    if isinstance(payment_id, int) and not isinstance(payment_id, bool):
        payment = state.payments.get(payment_id)
    if payment is None:
        raise SpecError(ErrorCode.NO_PAYMENT, f"payment {payment_id!r} not found")
    return payment


def verify(state: LedgerState, call: Call) -> None:
    if call.call_type != CallType.COMPLETE_PAYMENT:
        raise SpecError(ErrorCode.INVALID_TYPE, "unsupported payment call type")

    payment = _lookup(state, call.payload)
    if call.caller != payment.from_:
        raise SpecError(ErrorCode.NO_AUTH, "only the payer may complete a payment")
    if payment.is_complete:
        raise SpecError(ErrorCode.PAYMENT_COMPLETE, "payment already completed")

    verify_transfer(state, payment.from_, payment.to, payment.amount)


def apply(state: LedgerState, call: Call) -> tuple[LedgerState, bool]:
    ns = deepcopy(state)
    payment = _lookup(ns, call.payload)

    transfer(ns, payment.from_, payment.to, payment.amount)
    payment.is_complete = True

    deal = ns.deals.get(payment.deal_id)
    if deal is not None:
        deal.state = DealState.COMPLETE

    return ns, True
