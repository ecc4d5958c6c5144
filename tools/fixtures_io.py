"""Helpers to serialize/deserialize fixtures for the deal ledger spec."""

from __future__ import annotations

from typing import Any

from deal_spec.config import MIN_DEAL_VALUE
from deal_spec.types import (
    AccountState,
    Call,
    CallType,
    Deal,
    DealState,
    LedgerState,
    Payment,
    TrustProfile,
)

# Payload keys carrying identities; everything else is a plain JSON value.
_BYTES_FIELDS: set[str] = {"counterparty"}


def _hex_to_bytes(v: str) -> bytes:
    return bytes.fromhex(v)


def _bytes_to_hex(v: bytes) -> str:
    return v.hex()


def state_to_json(state: LedgerState) -> dict[str, Any]:
    return {
        "admin": _bytes_to_hex(state.admin),
        "min_deal_value": state.min_deal_value,
        "max_rating": state.max_rating,
        "global_state": {
            "block_height": state.global_state.block_height,
        },
        "counters": {
            "payment_id": state.payment_id_counter,
            "deal_id": state.deal_id_counter,
        },
        "accounts": [
            {"address": _bytes_to_hex(a.address), "balance": a.balance}
            for a in state.accounts.values()
        ],
        "payments": [
            {
                "id": p.id,
                "from": _bytes_to_hex(p.from_),
                "to": _bytes_to_hex(p.to),
                "amount": p.amount,
                "deal_id": p.deal_id,
                "is_complete": p.is_complete,
                "created_at": p.created_at,
            }
            for p in state.payments.values()
        ],
        "deals": [
            {
                "id": d.id,
                "initiator": _bytes_to_hex(d.initiator),
                "counterparty": _bytes_to_hex(d.counterparty),
                "value": d.value,
                "payment_id": d.payment_id,
                "state": d.state.value,
                "timestamp": d.timestamp,
                "trust_score": d.trust_score,
            }
            for d in state.deals.values()
        ],
        "trust_profiles": [
            {
                "address": _bytes_to_hex(addr),
                "cumulative_score": t.cumulative_score,
                "deal_count": t.deal_count,
            }
            for addr, t in state.trust_profiles.items()
        ],
    }


def state_from_json(data: dict[str, Any]) -> LedgerState:
    state = LedgerState(
        admin=_hex_to_bytes(data["admin"]),
        min_deal_value=data.get("min_deal_value", MIN_DEAL_VALUE),
        max_rating=data.get("max_rating"),
    )
    gs = data.get("global_state", {})
    state.global_state.block_height = gs.get("block_height", 0)

    counters = data.get("counters", {})
    state.payment_id_counter = counters.get("payment_id", state.payment_id_counter)
    state.deal_id_counter = counters.get("deal_id", state.deal_id_counter)

    for a in data.get("accounts", []):
        acct = AccountState(address=_hex_to_bytes(a["address"]), balance=a.get("balance", 0))
        state.accounts[acct.address] = acct

    for p in data.get("payments", []):
        state.payments[p["id"]] = Payment(
            id=p["id"],
            from_=_hex_to_bytes(p["from"]),
            to=_hex_to_bytes(p["to"]),
            amount=p["amount"],
            deal_id=p["deal_id"],
            is_complete=p.get("is_complete", False),
            created_at=p.get("created_at", 0),
        )

    for d in data.get("deals", []):
        state.deals[d["id"]] = Deal(
            id=d["id"],
            initiator=_hex_to_bytes(d["initiator"]),
            counterparty=_hex_to_bytes(d["counterparty"]),
            value=d["value"],
            payment_id=d["payment_id"],
            state=DealState(d.get("state", "OPEN")),
            timestamp=d.get("timestamp", 0),
            trust_score=d.get("trust_score", 0),
        )

    for t in data.get("trust_profiles", []):
        state.trust_profiles[_hex_to_bytes(t["address"])] = TrustProfile(
            cumulative_score=t.get("cumulative_score", 0),
            deal_count=t.get("deal_count", 0),
        )

    return state


def _payload_to_json(payload: Any) -> Any:
    """Recursively convert a payload value, turning bytes into hex strings."""
    if isinstance(payload, (bytes, bytearray)):
        return _bytes_to_hex(bytes(payload))
    if isinstance(payload, dict):
        return {k: _payload_to_json(v) for k, v in payload.items()}
    if isinstance(payload, list):
        return [_payload_to_json(item) for item in payload]
    return payload


def _json_to_bytes_payload(payload: Any) -> Any:
    """Convert hex string identity fields back to bytes."""
    if not isinstance(payload, dict):
        return payload
    result: dict[str, Any] = {}
    for key, value in payload.items():
        if key in _BYTES_FIELDS and isinstance(value, str) and value:
            result[key] = _hex_to_bytes(value)
        else:
            result[key] = value
    return result


def call_to_json(call: Call) -> dict[str, Any]:
    return {
        "caller": _bytes_to_hex(call.caller),
        "call_type": call.call_type.value,
        "payload": _payload_to_json(call.payload),
    }


def call_from_json(data: dict[str, Any]) -> Call:
    return Call(
        caller=_hex_to_bytes(data["caller"]),
        call_type=CallType(data["call_type"]),
        payload=_json_to_bytes_payload(data.get("payload") or {}),
    )
