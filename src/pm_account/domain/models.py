"""Domain models for pm_account — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Account:
    address: str
    balance: int   # lamports
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class LedgerEntry:
    id: int
    address: str
    entry_type: str                  # LedgerEntryType value
    amount: int                      # lamports, positive=income negative=expense
    balance_after: int               # lamports, balance snapshot after op
    reference_type: str | None = None
    reference_id: str | None = None
    description: str | None = None
    created_at: datetime | None = None


@dataclass
class Transfer:
    """Reference metadata written to both ledger rows of a transfer."""

    debit_type: str
    credit_type: str
    reference_type: str
    reference_id: str
    description: str | None = None
