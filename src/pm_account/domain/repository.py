"""Repository Protocol — dependency inversion for testability.

The lamport transfer primitive lives here: every movement between a user
and the vault goes through transfer(), which debits, credits and writes a
paired ledger row in the caller's transaction.
"""

from typing import Any, Protocol

from src.pm_account.domain.models import Account, LedgerEntry, Transfer


class AccountRepositoryProtocol(Protocol):
    async def get_account(self, db: Any, address: str) -> Account | None: ...

    async def credit(
        self, db: Any, address: str, amount: int, entry_type: str, description: str
    ) -> tuple[Account, LedgerEntry]: ...

    async def transfer(
        self, db: Any, source: str, destination: str, amount: int, transfer: Transfer
    ) -> tuple[Account, Account]: ...

    async def list_ledger_entries(
        self,
        db: Any,
        address: str,
        cursor_id: int | None,
        limit: int,
        entry_type: str | None,
    ) -> list[LedgerEntry]: ...
