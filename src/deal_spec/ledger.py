"""In-process ledger facade.

`Ledger` owns one `LedgerState` and serializes every mutation behind a
single writer lock, so concurrent callers still see exactly one id per
successful deal and exactly one completion or rating per record. Mutating
methods raise `SpecError` on guard failure; queries never raise.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Any, Mapping, Optional

from . import queries
from .account_model import balance_of
from .config import LedgerConfig
from .state_transition import apply_call
from .types import (
    AccountState,
    Call,
    CallType,
    Deal,
    GlobalState,
    Identity,
    LedgerState,
    Payment,
    TrustProfile,
)

logger = logging.getLogger(__name__)


def genesis_state(
    config: LedgerConfig, balances: Optional[Mapping[Identity, int]] = None
) -> LedgerState:
    state = LedgerState(
        admin=config.admin,
        min_deal_value=config.min_deal_value,
        max_rating=config.max_rating,
        global_state=GlobalState(block_height=config.genesis_height),
    )
    for address, balance in (balances or {}).items():
        state.accounts[address] = AccountState(address=address, balance=balance)
    return state


class Ledger:
    def __init__(self, state: LedgerState):
        self._state = state
        self._lock = threading.Lock()

    @classmethod
    def from_config(
        cls,
        config: Optional[LedgerConfig] = None,
        balances: Optional[Mapping[Identity, int]] = None,
    ) -> "Ledger":
        return cls(genesis_state(config or LedgerConfig(), balances))

    @property
    def state(self) -> LedgerState:
        """Current state value. Treat as read-only."""
        with self._lock:
            return self._state

    def _submit(self, call: Call) -> Any:
        with self._lock:
            self._state, result = apply_call(self._state, call)
        if not result.ok:
            raise result.error
        return result.value

    # --- mutating operations ---

    def initiate_deal(self, caller: Identity, counterparty: Identity, value: int) -> int:
        deal_id = self._submit(
            Call(caller, CallType.INITIATE_DEAL, {"counterparty": counterparty, "value": value})
        )
        logger.info("deal %d opened by %s", deal_id, caller.hex()[:16])
        return deal_id

    def complete_payment(self, caller: Identity, payment_id: int) -> bool:
        return self._submit(
            Call(caller, CallType.COMPLETE_PAYMENT, {"payment_id": payment_id})
        )

    def rate_counterparty(self, caller: Identity, deal_id: int, rating: int) -> bool:
        return self._submit(
            Call(caller, CallType.RATE_COUNTERPARTY, {"deal_id": deal_id, "rating": rating})
        )

    def advance_block(self, count: int = 1) -> int:
        if count < 1:
            raise ValueError("count must be >= 1")
        with self._lock:
            gs = self._state.global_state
            self._state = replace(
                self._state, global_state=replace(gs, block_height=gs.block_height + count)
            )
            return self._state.global_state.block_height

    # --- queries ---

    def get_trust_profile(self, address: Identity) -> TrustProfile:
        with self._lock:
            return queries.get_trust_profile(self._state, address)

    def get_payment_info(self, payment_id: int) -> Optional[Payment]:
        with self._lock:
            return queries.get_payment_info(self._state, payment_id)

    def get_deal_info(self, deal_id: int) -> Optional[Deal]:
        with self._lock:
            return queries.get_deal_info(self._state, deal_id)

    def balance_of(self, address: Identity) -> int:
        with self._lock:
            return balance_of(self._state, address)

