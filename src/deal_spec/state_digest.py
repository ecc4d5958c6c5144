"""Canonical state digest implementation (v1)."""
from __future__ import annotations

from typing import Any

from blake3 import blake3

from .config import DEFAULT_ADMIN, IDENTITY_LEN, MIN_DEAL_VALUE

_DEAL_STATE_TAGS = {"OPEN": 0, "COMPLETE": 1}


def _hex_to_bytes(value: str | None) -> bytes:
    if value is None:
        return b""
    if not isinstance(value, str):
        raise TypeError("hex value must be string")
    v = value[2:] if value.startswith(("0x", "0X")) else value
    if v == "":
        return b""
    return bytes.fromhex(v)


def _identity(value: str | None) -> bytes:
    addr = _hex_to_bytes(value)
    if len(addr) != IDENTITY_LEN:
        raise ValueError(f"identity must be {IDENTITY_LEN} bytes, got {len(addr)}")
    return addr


def _u64_be(value: int) -> bytes:
    if value < 0:
        raise ValueError("u64 must be non-negative")
    return int(value).to_bytes(8, "big", signed=False)


def compute_state_digest(post_state: dict[str, Any]) -> str:
    """Compute state digest v1 from a JSON post_state.

    Sections are encoded in a fixed order: guard configuration (admin,
    min_deal_value, max_rating), global state, counters, accounts (sorted by
    address), payments and deals (sorted by id), trust profiles (sorted by
    address). Integers are u64 big-endian and the result is BLAKE3-256 hex.
    An unbounded max_rating encodes as 0, which no configured cap can equal.
    Missing configuration keys take the genesis defaults.
    """
    if not isinstance(post_state, dict):
        post_state = {}
    buf = bytearray()

    admin = post_state.get("admin")
    buf += _identity(admin) if admin is not None else DEFAULT_ADMIN
    buf += _u64_be(int(post_state.get("min_deal_value", MIN_DEAL_VALUE)))
    buf += _u64_be(int(post_state.get("max_rating") or 0))

    gs = post_state.get("global_state", {})
    buf += _u64_be(int(gs.get("block_height", 0)))

    counters = post_state.get("counters", {})
    for field in ("payment_id", "deal_id"):
        buf += _u64_be(int(counters.get(field, 0)))

    accounts = sorted(
        ((_identity(a.get("address")), a) for a in post_state.get("accounts", [])),
        key=lambda x: x[0],
    )
    buf += _u64_be(len(accounts))
    for addr, acc in accounts:
        buf += addr
        buf += _u64_be(int(acc.get("balance", 0)))

    payments = sorted(post_state.get("payments", []), key=lambda p: int(p["id"]))
    buf += _u64_be(len(payments))
    for p in payments:
        buf += _u64_be(int(p["id"]))
        buf += _identity(p.get("from"))
        buf += _identity(p.get("to"))
        for field in ("amount", "deal_id", "created_at"):
            buf += _u64_be(int(p.get(field, 0)))
        buf += _u64_be(1 if p.get("is_complete") else 0)

    deals = sorted(post_state.get("deals", []), key=lambda d: int(d["id"]))
    buf += _u64_be(len(deals))
    for d in deals:
        buf += _u64_be(int(d["id"]))
        buf += _identity(d.get("initiator"))
        buf += _identity(d.get("counterparty"))
        for field in ("value", "payment_id", "timestamp", "trust_score"):
            buf += _u64_be(int(d.get(field, 0)))
        buf += _u64_be(_DEAL_STATE_TAGS[d.get("state", "OPEN")])

    profiles = sorted(
        ((_identity(t.get("address")), t) for t in post_state.get("trust_profiles", [])),
        key=lambda x: x[0],
    )
    buf += _u64_be(len(profiles))
    for addr, t in profiles:
        buf += addr
        buf += _u64_be(int(t.get("cumulative_score", 0)))
        buf += _u64_be(int(t.get("deal_count", 0)))

    return blake3(buf).hexdigest()
