"""Deal ledger error codes and exceptions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class ErrorCategory(IntEnum):
    SUCCESS = 0x00
    DEAL = 0x01
    PAYMENT = 0x02
    RATING = 0x03
    RESOURCE = 0x04
    VALIDATION = 0x05
    INTERNAL = 0xFF


class ErrorCode(IntEnum):
    # Success
    SUCCESS = 0x0000

    # Deal creation
    INVALID_USER = 0x0100
    LOW_VALUE = 0x0101
    SELF_DEAL = 0x0102
    ZERO_AMOUNT = 0x0103

    # Payment completion
    NO_PAYMENT = 0x0200
    NO_AUTH = 0x0201
    PAYMENT_COMPLETE = 0x0202

    # Rating
    INVALID_DEAL_ID = 0x0300
    DEAL_NOT_EXIST = 0x0301
    NOT_AUTHORIZED = 0x0302
    BAD_RATING = 0x0303
    DEAL_NOT_COMPLETE = 0x0304
    ALREADY_RATED = 0x0305

    # Resource
    INSUFFICIENT_BALANCE = 0x0400
    OVERFLOW = 0x0401

    # Validation
    INVALID_PAYLOAD = 0x0500
    INVALID_TYPE = 0x0501

    # Internal
    NOT_IMPLEMENTED = 0xFF01

    @property
    def category(self) -> ErrorCategory:
        return ErrorCategory(self.value >> 8)


@dataclass(frozen=True)
class SpecError(Exception):
    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.name}({self.code:#06x}): {self.message}"


# Allow Python's Exception machinery to set __traceback__/__context__/__cause__
# while keeping dataclass fields frozen (Python 3.13 contextlib compat).
_EXCEPTION_ATTRS = frozenset(("__traceback__", "__context__", "__cause__"))
_frozen_setattr = SpecError.__setattr__


def _spec_error_setattr(self: SpecError, name: str, value: object) -> None:
    if name in _EXCEPTION_ATTRS:
        object.__setattr__(self, name, value)
    else:
        _frozen_setattr(self, name, value)


SpecError.__setattr__ = _spec_error_setattr  # type: ignore[method-assign]
