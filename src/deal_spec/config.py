"""Deal ledger configuration.

Module constants describe the fixed arithmetic surface of the host ledger.
`LedgerConfig` carries the per-deployment values (admin identity, value and
rating bounds) that used to be hardcoded at deploy time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

# Arithmetic
U64_MAX = (1 << 64) - 1

# Identifier allocation: the first deal and the first payment both get id 1.
GENESIS_ID = 1

# Identities are 32-byte public keys.
IDENTITY_LEN = 32

# Deal / rating bounds (deployment defaults)
MIN_DEAL_VALUE = 1
MAX_RATING: Optional[int] = None

# All-zero admin is used when a deployment does not configure one.
DEFAULT_ADMIN = bytes(IDENTITY_LEN)


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.environ.get(name, "")
    if raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be a decimal integer, got {raw!r}") from None


@dataclass
class LedgerConfig:
    """Genesis configuration for a deal ledger."""
    admin: bytes = DEFAULT_ADMIN
    min_deal_value: int = MIN_DEAL_VALUE
    max_rating: Optional[int] = MAX_RATING
    genesis_height: int = 0

    def __post_init__(self) -> None:
        if len(self.admin) != IDENTITY_LEN:
            raise ValueError(f"admin must be {IDENTITY_LEN} bytes, got {len(self.admin)}")
        if self.min_deal_value < 1:
            raise ValueError("min_deal_value must be >= 1")
        if self.max_rating is not None and self.max_rating < 1:
            raise ValueError("max_rating must be >= 1")
        if self.genesis_height < 0:
            raise ValueError("genesis_height must be non-negative")

    @classmethod
    def from_env(cls) -> "LedgerConfig":
        """Load configuration from environment variables."""
        admin_hex = os.environ.get("DEAL_ADMIN", "")
        admin = bytes.fromhex(admin_hex.removeprefix("0x")) if admin_hex else DEFAULT_ADMIN

        return cls(
            admin=admin,
            min_deal_value=_env_int("DEAL_MIN_VALUE", MIN_DEAL_VALUE),
            max_rating=_env_int("DEAL_MAX_RATING", MAX_RATING),
            genesis_height=_env_int("DEAL_GENESIS_HEIGHT", 0),
        )
