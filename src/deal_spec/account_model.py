"""Host ledger account model: balances and the native transfer primitive."""

from __future__ import annotations

from .config import U64_MAX
from .errors import ErrorCode, SpecError
from .types import AccountState, Identity, LedgerState


def balance_of(state: LedgerState, address: Identity) -> int:
    acct = state.accounts.get(address)
    return acct.balance if acct is not None else 0


def apply_balance_change(balance: int, delta: int) -> int:
    """Apply +/- balance with u64 bounds."""
    new_balance = balance + delta
    if new_balance < 0:
        raise SpecError(ErrorCode.INSUFFICIENT_BALANCE, "negative balance")
    if new_balance > U64_MAX:
        raise SpecError(ErrorCode.OVERFLOW, "balance overflow")
    return new_balance


def verify_transfer(state: LedgerState, src: Identity, dst: Identity, amount: int) -> None:
    """Check that `transfer` would succeed without touching state."""
    if amount <= 0:
        raise SpecError(ErrorCode.INVALID_PAYLOAD, "transfer amount must be > 0")
    apply_balance_change(balance_of(state, src), -amount)
    if src != dst:
        apply_balance_change(balance_of(state, dst), amount)


def transfer(state: LedgerState, src: Identity, dst: Identity, amount: int) -> None:
    """Move `amount` from `src` to `dst` in place, all-or-nothing.

    Both new balances are computed before either account is written, so a
    failing transfer leaves `state` untouched. The receiver account is
    created implicitly on first incoming value.
    """
    verify_transfer(state, src, dst, amount)
    if src == dst:
        return
    sender = state.accounts[src]
    receiver = state.accounts.get(dst)
    if receiver is None:
        receiver = AccountState(address=dst, balance=0)
        state.accounts[dst] = receiver
    sender.balance -= amount
    receiver.balance += amount
