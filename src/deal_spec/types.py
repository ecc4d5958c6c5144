"""Core types for the deal ledger spec.

State is a single `LedgerState` value holding the three persistent
collections (payments, deals, trust profiles), the two id counters, host
account balances and the block height source. Every operation receives the
state explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .config import DEFAULT_ADMIN, GENESIS_ID, MAX_RATING, MIN_DEAL_VALUE

Identity = bytes


class DealState(Enum):
    OPEN = "OPEN"
    COMPLETE = "COMPLETE"


class CallType(Enum):
    INITIATE_DEAL = "initiate_deal"
    COMPLETE_PAYMENT = "complete_payment"
    RATE_COUNTERPARTY = "rate_counterparty"


@dataclass
class Call:
    """One mutating operation submitted by `caller`.

    Payload keys per call type:
    - INITIATE_DEAL: counterparty (bytes), value (int)
    - COMPLETE_PAYMENT: payment_id (int)
    - RATE_COUNTERPARTY: deal_id (int), rating (int)
    """
    caller: Identity
    call_type: CallType
    payload: dict


@dataclass
class Payment:
    id: int
    from_: Identity
    to: Identity
    amount: int
    deal_id: int
    is_complete: bool = False
    created_at: int = 0


@dataclass
class Deal:
    id: int
    initiator: Identity
    counterparty: Identity
    value: int
    payment_id: int
    state: DealState = DealState.OPEN
    timestamp: int = 0
    # 0 means not rated yet; valid ratings are always > 0.
    trust_score: int = 0

    @property
    def is_rated(self) -> bool:
        return self.trust_score > 0


@dataclass
class TrustProfile:
    cumulative_score: int = 0
    deal_count: int = 0


@dataclass
class AccountState:
    address: Identity
    balance: int = 0


@dataclass
class GlobalState:
    block_height: int = 0


@dataclass
class LedgerState:
    admin: Identity = DEFAULT_ADMIN
    min_deal_value: int = MIN_DEAL_VALUE
    max_rating: int | None = MAX_RATING
    accounts: dict[Identity, AccountState] = field(default_factory=dict)
    global_state: GlobalState = field(default_factory=GlobalState)
    payments: dict[int, Payment] = field(default_factory=dict)
    deals: dict[int, Deal] = field(default_factory=dict)
    trust_profiles: dict[Identity, TrustProfile] = field(default_factory=dict)
    payment_id_counter: int = GENESIS_ID
    deal_id_counter: int = GENESIS_ID
