"""In-memory AccountRepository used by the "memory" storage backend."""

import copy

from src.pm_account.domain.models import Account, LedgerEntry, Transfer
from src.pm_common.datetime_utils import utc_now
from src.pm_common.errors import InsufficientBalanceError
from src.pm_common.memory_db import InMemoryDatabase


class InMemoryAccountRepository:
    async def get_account(self, db: InMemoryDatabase, address: str) -> Account | None:
        account = db.tables.accounts.get(address)
        return copy.copy(account) if account else None

    async def credit(
        self,
        db: InMemoryDatabase,
        address: str,
        amount: int,
        entry_type: str,
        description: str,
    ) -> tuple[Account, LedgerEntry]:
        account = self._apply(db, address, amount)
        entry = self._write_ledger(db, account, entry_type, amount, entry_type, None, description)
        return copy.copy(account), entry

    async def transfer(
        self,
        db: InMemoryDatabase,
        source: str,
        destination: str,
        amount: int,
        transfer: Transfer,
    ) -> tuple[Account, Account]:
        current = db.tables.accounts.get(source)
        available = current.balance if current else 0
        if available < amount:
            raise InsufficientBalanceError(source, amount, available)
        debited = self._apply(db, source, -amount)
        credited = self._apply(db, destination, amount)
        self._write_ledger(
            db, debited, transfer.debit_type, -amount,
            transfer.reference_type, transfer.reference_id, transfer.description,
        )
        self._write_ledger(
            db, credited, transfer.credit_type, amount,
            transfer.reference_type, transfer.reference_id, transfer.description,
        )
        return copy.copy(debited), copy.copy(credited)

    async def list_ledger_entries(
        self,
        db: InMemoryDatabase,
        address: str,
        cursor_id: int | None,
        limit: int,
        entry_type: str | None,
    ) -> list[LedgerEntry]:
        rows = [
            e for e in reversed(db.tables.ledger_entries)
            if e.address == address
            and (cursor_id is None or e.id < cursor_id)
            and (entry_type is None or e.entry_type == entry_type)
        ]
        return rows[:limit]

    def _apply(self, db: InMemoryDatabase, address: str, delta: int) -> Account:
        now = utc_now()
        account = db.tables.accounts.get(address)
        if account is None:
            account = Account(address=address, balance=0, created_at=now, updated_at=now)
            db.tables.accounts[address] = account
        account.balance += delta
        account.updated_at = now
        return account

    def _write_ledger(
        self,
        db: InMemoryDatabase,
        account: Account,
        entry_type: str,
        amount: int,
        reference_type: str | None,
        reference_id: str | None,
        description: str | None,
    ) -> LedgerEntry:
        entry = LedgerEntry(
            id=len(db.tables.ledger_entries) + 1,
            address=account.address,
            entry_type=entry_type,
            amount=amount,
            balance_after=account.balance,
            reference_type=reference_type,
            reference_id=reference_id,
            description=description,
            created_at=utc_now(),
        )
        db.tables.ledger_entries.append(entry)
        return entry
