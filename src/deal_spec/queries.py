"""Read-only queries. No authorization, no side effects."""

from __future__ import annotations

from copy import deepcopy
from typing import Optional

from .types import Deal, Identity, LedgerState, Payment, TrustProfile


def get_trust_profile(state: LedgerState, address: Identity) -> TrustProfile:
    """Profile for `address`; an address never rated reads as all zeros."""
    profile = state.trust_profiles.get(address)
    if profile is None:
        return TrustProfile()
    return deepcopy(profile)


def get_payment_info(state: LedgerState, payment_id: int) -> Optional[Payment]:
    payment = state.payments.get(payment_id)
    return deepcopy(payment) if payment is not None else None


def get_deal_info(state: LedgerState, deal_id: int) -> Optional[Deal]:
    deal = state.deals.get(deal_id)
    return deepcopy(deal) if deal is not None else None
