"""Identifier allocation for payments and deals."""

from __future__ import annotations

from enum import Enum

from .config import U64_MAX
from .errors import ErrorCode, SpecError
from .types import LedgerState


class Counter(Enum):
    PAYMENT = "payment_id_counter"
    DEAL = "deal_id_counter"


def peek_id(state: LedgerState, counter: Counter) -> int:
    return getattr(state, counter.value)


def verify_allocatable(state: LedgerState, counter: Counter) -> None:
    if peek_id(state, counter) >= U64_MAX:
        raise SpecError(ErrorCode.OVERFLOW, f"{counter.value} exhausted")


def next_id(state: LedgerState, counter: Counter) -> int:
    """Return the current counter value as a fresh id and advance the counter.

    Callers must only allocate on the validated success path; a rejected
    call never burns an id.
    """
    current = peek_id(state, counter)
    setattr(state, counter.value, current + 1)
    return current
