"""Pydantic schemas and cursor utilities for pm_account API."""

import base64
import json

from pydantic import BaseModel, Field

from src.pm_common.lamports import U64_MAX, lamports_to_display

# ---------------------------------------------------------------------------
# Cursor-based pagination utilities
# ---------------------------------------------------------------------------


def cursor_encode(last_id: int) -> str:
    """Encode a BIGINT primary key into an opaque Base64 cursor string."""
    payload = json.dumps({"id": last_id})
    return base64.b64encode(payload.encode()).decode()


def cursor_decode(cursor: str | None) -> int | None:
    """Decode a cursor string back to the last seen id. Returns None on error."""
    if cursor is None:
        return None
    try:
        payload = json.loads(base64.b64decode(cursor.encode()).decode())
        return int(payload["id"])
    except Exception:
        return None


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class AirdropRequest(BaseModel):
    amount: int = Field(..., gt=0, le=U64_MAX, description="Lamports to credit")


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BalanceResponse(BaseModel):
    address: str
    balance_lamports: int
    balance_display: str

    @classmethod
    def from_lamports(cls, address: str, balance: int) -> "BalanceResponse":
        return cls(
            address=address,
            balance_lamports=balance,
            balance_display=lamports_to_display(balance),
        )


class AirdropResponse(BaseModel):
    balance_lamports: int
    balance_display: str
    credited_lamports: int
    ledger_entry_id: int

    @classmethod
    def from_result(cls, balance: int, amount: int, entry_id: int) -> "AirdropResponse":
        return cls(
            balance_lamports=balance,
            balance_display=lamports_to_display(balance),
            credited_lamports=amount,
            ledger_entry_id=entry_id,
        )


class LedgerEntryItem(BaseModel):
    id: int
    entry_type: str
    amount_lamports: int
    balance_after_lamports: int
    reference_type: str | None
    reference_id: str | None
    description: str | None
    created_at: str  # ISO8601 string


class LedgerResponse(BaseModel):
    items: list[LedgerEntryItem]
    next_cursor: str | None
    has_more: bool
