"""Trust profile specs (RATE_COUNTERPARTY)."""

from __future__ import annotations

from copy import deepcopy

from ..config import U64_MAX
from ..errors import ErrorCode, SpecError
from ..types import Call, CallType, Deal, DealState, LedgerState, TrustProfile


def _is_int(v: object) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


def _lookup(state: LedgerState, p: object) -> Deal:
    if not isinstance(p, dict):
        raise SpecError(ErrorCode.INVALID_PAYLOAD, "rating payload must be dict")
    deal_id = p.get("deal_id")
    # Ids are handed out densely from GENESIS_ID, so anything at or past the
    # counter was never allocated.
    if not _is_int(deal_id) or deal_id < 0 or deal_id >= state.deal_id_counter:
        raise SpecError(ErrorCode.INVALID_DEAL_ID, f"deal id {deal_id!r} out of range")
    deal = state.deals.get(deal_id)
    if deal is None:
        raise SpecError(ErrorCode.DEAL_NOT_EXIST, f"deal {deal_id} not found")
    return deal


def verify(state: LedgerState, call: Call) -> None:
    if call.call_type != CallType.RATE_COUNTERPARTY:
        raise SpecError(ErrorCode.INVALID_TYPE, "unsupported rating call type")

    deal = _lookup(state, call.payload)
    if call.caller != deal.counterparty:
        raise SpecError(ErrorCode.NOT_AUTHORIZED, "only the counterparty may rate")

    rating = call.payload.get("rating")
    if not _is_int(rating) or rating <= 0:
        raise SpecError(ErrorCode.BAD_RATING, "rating must be a positive integer")
    if state.max_rating is not None and rating > state.max_rating:
        raise SpecError(ErrorCode.BAD_RATING, f"rating above maximum {state.max_rating}")

    if deal.state != DealState.COMPLETE:
        raise SpecError(ErrorCode.DEAL_NOT_COMPLETE, "deal payment not completed")
    if deal.is_rated:
        raise SpecError(ErrorCode.ALREADY_RATED, "deal already rated")

    profile = state.trust_profiles.get(deal.initiator, TrustProfile())
    if profile.cumulative_score + rating > U64_MAX:
        raise SpecError(ErrorCode.OVERFLOW, "cumulative_score overflow")


def apply(state: LedgerState, call: Call) -> tuple[LedgerState, bool]:
    ns = deepcopy(state)
    deal = _lookup(ns, call.payload)
    rating = call.payload["rating"]

    profile = ns.trust_profiles.setdefault(deal.initiator, TrustProfile())
    profile.cumulative_score += rating
    profile.deal_count += 1
    deal.trust_score = rating

    return ns, True
