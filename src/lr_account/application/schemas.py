"""Pydantic schemas and cursor helpers for the account API."""

import base64
import binascii
import json

from pydantic import BaseModel, Field

from src.lr_account.domain.models import LedgerEntry
from src.lr_common.amounts import U64_MAX, lamports_to_display


def cursor_encode(last_id: int) -> str:
    """Opaque Base64 cursor for keyset pagination over a BIGINT key."""
    return base64.urlsafe_b64encode(json.dumps({"id": last_id}).encode()).decode()


def cursor_decode(cursor: str | None) -> int | None:
    """Last seen id, or None for a missing or malformed cursor."""
    if not cursor:
        return None
    try:
        payload = json.loads(base64.urlsafe_b64decode(cursor.encode()).decode())
        return int(payload["id"])
    except (binascii.Error, UnicodeDecodeError, ValueError, KeyError, TypeError):
        return None


class AmountRequest(BaseModel):
    amount: int = Field(..., gt=0, le=U64_MAX, description="Lamports")


class BalanceResponse(BaseModel):
    user_id: str
    available_balance: int
    available_balance_display: str

    @classmethod
    def from_lamports(cls, user_id: str, available: int) -> "BalanceResponse":
        return cls(
            user_id=user_id,
            available_balance=available,
            available_balance_display=lamports_to_display(available),
        )


class MovementResponse(BaseModel):
    """Result of a deposit or a withdrawal."""

    available_balance: int
    available_balance_display: str
    amount: int
    amount_display: str
    ledger_entry_id: int

    @classmethod
    def from_result(cls, available: int, amount: int, entry_id: int) -> "MovementResponse":
        return cls(
            available_balance=available,
            available_balance_display=lamports_to_display(available),
            amount=amount,
            amount_display=lamports_to_display(amount),
            ledger_entry_id=entry_id,
        )


class LedgerEntryItem(BaseModel):
    id: int
    entry_type: str
    amount: int
    amount_display: str
    balance_after: int
    reference_type: str | None
    reference_id: str | None
    description: str | None
    created_at: str

    @classmethod
    def from_domain(cls, e: LedgerEntry) -> "LedgerEntryItem":
        return cls(
            id=e.id,
            entry_type=e.entry_type,
            amount=e.amount,
            amount_display=lamports_to_display(e.amount),
            balance_after=e.balance_after,
            reference_type=e.reference_type,
            reference_id=e.reference_id,
            description=e.description,
            created_at=e.created_at.isoformat() if e.created_at else "",
        )


class LedgerResponse(BaseModel):
    items: list[LedgerEntryItem]
    next_cursor: str | None
    has_more: bool
