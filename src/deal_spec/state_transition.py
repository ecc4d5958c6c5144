"""State transition entrypoints for the deal ledger spec."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Optional

from .config import IDENTITY_LEN
from .errors import ErrorCode, SpecError
from .types import Call, CallType, LedgerState
from .tx import deal as tx_deal
from .tx import payment as tx_payment
from .tx import rating as tx_rating

logger = logging.getLogger(__name__)

_HANDLERS = {
    CallType.INITIATE_DEAL: tx_deal,
    CallType.COMPLETE_PAYMENT: tx_payment,
    CallType.RATE_COUNTERPARTY: tx_rating,
}


class TransitionResult:
    """Thin wrapper for verify/apply results.

    `value` carries the operation's success value: the new deal id for
    INITIATE_DEAL, `True` for the other calls.
    """

    def __init__(self, ok: bool, error: Optional[SpecError] = None, value: Any = None):
        self.ok = ok
        self.error = error
        self.value = value

    @classmethod
    def success(cls, value: Any = None) -> "TransitionResult":
        return cls(True, None, value)

    @classmethod
    def failure(cls, error: SpecError) -> "TransitionResult":
        return cls(False, error, None)

    def __repr__(self) -> str:
        if self.ok:
            return f"TransitionResult(ok, value={self.value!r})"
        return f"TransitionResult(failed, {self.error})"


def _handler(call: Call):
    handler = _HANDLERS.get(call.call_type)
    if handler is None:
        raise SpecError(ErrorCode.NOT_IMPLEMENTED, f"no handler for {call.call_type}")
    return handler


def _verify_common(call: Call) -> None:
    if not isinstance(call.caller, bytes) or len(call.caller) != IDENTITY_LEN:
        raise SpecError(ErrorCode.INVALID_PAYLOAD, f"caller must be {IDENTITY_LEN} bytes")
    if not isinstance(call.payload, dict):
        raise SpecError(ErrorCode.INVALID_PAYLOAD, "payload must be dict")


def verify_call(state: LedgerState, call: Call) -> TransitionResult:
    """Run every guard for `call` without writing anything."""
    try:
        _verify_common(call)
        _handler(call).verify(state, call)
        return TransitionResult.success()
    except SpecError as exc:
        return TransitionResult.failure(exc)


def apply_call(state: LedgerState, call: Call) -> tuple[LedgerState, TransitionResult]:
    """Apply a single call after verification.

    Failed-call semantics: the input state is returned unchanged and no id
    is allocated. On success a new state value is returned; the input is
    never mutated.
    """
    try:
        _verify_common(call)
        handler = _handler(call)
        handler.verify(state, call)
    except SpecError as exc:
        logger.debug("rejected %s: %s", call.call_type, exc)
        return state, TransitionResult.failure(exc)

    try:
        working, value = handler.apply(state, call)
    except SpecError as exc:
        logger.debug("execution failed %s: %s", call.call_type, exc)
        return state, TransitionResult.failure(exc)

    logger.debug("applied %s -> %r", call.call_type, value)
    return working, TransitionResult.success(value)


def apply_block(state: LedgerState, calls: list[Call]) -> tuple[LedgerState, TransitionResult]:
    """Apply a block worth of calls in order (block-atomic semantics).

    If any call fails, the entire block is rejected and the state is
    unchanged. On success the block height advances by one and the result
    value lists each call's success value.
    """
    working = state
    values = []
    for call in calls:
        working, result = apply_call(working, call)
        if not result.ok:
            return state, result
        values.append(result.value)

    working = replace(
        working,
        global_state=replace(
            working.global_state, block_height=working.global_state.block_height + 1
        ),
    )
    return working, TransitionResult.success(values)
