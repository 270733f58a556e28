"""Domain models for lr_account — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime

from src.lr_common.enums import LedgerEntryType

VAULT_PREFIX = "VAULT:"


def vault_account_id(round_id: int) -> str:
    """Custody account holding a round's pooled (post-fee) stakes."""
    return f"{VAULT_PREFIX}{round_id}"


@dataclass
class Account:
    id: str
    user_id: str
    available_balance: int   # lamports
    version: int
    created_at: datetime
    updated_at: datetime


@dataclass
class LedgerEntry:
    id: int                          # BIGSERIAL
    user_id: str
    entry_type: str                  # LedgerEntryType value
    amount: int                      # lamports, positive=income negative=expense
    balance_after: int               # available_balance snapshot after op
    reference_type: str | None = None
    reference_id: str | None = None
    description: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class Transfer:
    """One value movement requested by the core; applied by AccountRepository."""

    from_id: str
    to_id: str
    amount: int
    debit_type: LedgerEntryType
    credit_type: LedgerEntryType
    reference_type: str
    reference_id: str
