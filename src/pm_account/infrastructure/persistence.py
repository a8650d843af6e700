"""AccountRepository — concrete implementation of AccountRepositoryProtocol.

All balance-mutating operations use atomic PostgreSQL UPDATE ... RETURNING.
A result of 0 rows on a debit means the source cannot cover the amount.

Transaction ownership: the CALLER (application service) commits or rolls back.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_account.domain.models import Account, LedgerEntry, Transfer
from src.pm_common.errors import InsufficientBalanceError, InternalError

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_GET_ACCOUNT_SQL = text("""
    SELECT address, balance, created_at, updated_at
    FROM accounts
    WHERE address = :address
""")

_CREDIT_SQL = text("""
    INSERT INTO accounts (address, balance)
    VALUES (:address, :amount)
    ON CONFLICT (address) DO UPDATE
        SET balance = accounts.balance + EXCLUDED.balance,
            updated_at = NOW()
    RETURNING address, balance, created_at, updated_at
""")

# Both sides of a transfer are locked in address order, so a deposit
# (user -> vault) and a payout (vault -> user) cannot deadlock.
_LOCK_PAIR_SQL = text("""
    SELECT address
    FROM accounts
    WHERE address IN (:source, :destination)
    ORDER BY address
    FOR UPDATE
""")

_DEBIT_SQL = text("""
    UPDATE accounts
    SET balance = balance - :amount,
        updated_at = NOW()
    WHERE address = :address AND balance >= :amount
    RETURNING address, balance, created_at, updated_at
""")

_INSERT_LEDGER_SQL = text("""
    INSERT INTO ledger_entries
        (address, entry_type, amount, balance_after,
         reference_type, reference_id, description)
    VALUES
        (:address, :entry_type, :amount, :balance_after,
         :reference_type, :reference_id, :description)
    RETURNING id, address, entry_type, amount, balance_after,
              reference_type, reference_id, description, created_at
""")

_LIST_LEDGER_SQL = text("""
    SELECT id, address, entry_type, amount, balance_after,
           reference_type, reference_id, description, created_at
    FROM ledger_entries
    WHERE address = :address
      AND (CAST(:cursor_id AS BIGINT) IS NULL OR id < CAST(:cursor_id AS BIGINT))
      AND (CAST(:entry_type AS TEXT) IS NULL OR entry_type = CAST(:entry_type AS TEXT))
    ORDER BY id DESC
    LIMIT :limit
""")


def _row_to_account(row: object) -> Account:
    return Account(
        address=row.address,  # type: ignore[attr-defined]
        balance=int(row.balance),  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


def _row_to_ledger(row: object) -> LedgerEntry:
    return LedgerEntry(
        id=row.id,  # type: ignore[attr-defined]
        address=row.address,  # type: ignore[attr-defined]
        entry_type=row.entry_type,  # type: ignore[attr-defined]
        amount=int(row.amount),  # type: ignore[attr-defined]
        balance_after=int(row.balance_after),  # type: ignore[attr-defined]
        reference_type=row.reference_type,  # type: ignore[attr-defined]
        reference_id=row.reference_id,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class AccountRepository:
    """Concrete repository — all operations atomic at the SQL level."""

    async def get_account(self, db: AsyncSession, address: str) -> Account | None:
        result = await db.execute(_GET_ACCOUNT_SQL, {"address": address})
        row = result.fetchone()
        return _row_to_account(row) if row else None

    async def credit(
        self, db: AsyncSession, address: str, amount: int, entry_type: str, description: str
    ) -> tuple[Account, LedgerEntry]:
        account = await self._credit(db, address, amount)
        entry = await self._write_ledger(
            db, account, entry_type, amount, entry_type, None, description
        )
        return account, entry

    async def transfer(
        self,
        db: AsyncSession,
        source: str,
        destination: str,
        amount: int,
        transfer: Transfer,
    ) -> tuple[Account, Account]:
        await db.execute(_LOCK_PAIR_SQL, {"source": source, "destination": destination})
        result = await db.execute(_DEBIT_SQL, {"address": source, "amount": amount})
        row = result.fetchone()
        if row is None:
            current = await self.get_account(db, source)
            raise InsufficientBalanceError(source, amount, current.balance if current else 0)
        debited = _row_to_account(row)
        credited = await self._credit(db, destination, amount)

        await self._write_ledger(
            db, debited, transfer.debit_type, -amount,
            transfer.reference_type, transfer.reference_id, transfer.description,
        )
        await self._write_ledger(
            db, credited, transfer.credit_type, amount,
            transfer.reference_type, transfer.reference_id, transfer.description,
        )
        return debited, credited

    async def list_ledger_entries(
        self,
        db: AsyncSession,
        address: str,
        cursor_id: int | None,
        limit: int,
        entry_type: str | None,
    ) -> list[LedgerEntry]:
        result = await db.execute(
            _LIST_LEDGER_SQL,
            {
                "address": address,
                "cursor_id": cursor_id,
                "limit": limit,
                "entry_type": entry_type,
            },
        )
        return [_row_to_ledger(row) for row in result.fetchall()]

    async def _credit(self, db: AsyncSession, address: str, amount: int) -> Account:
        result = await db.execute(_CREDIT_SQL, {"address": address, "amount": amount})
        row = result.fetchone()
        if row is None:
            raise InternalError("Account upsert returned no rows — this should never happen")
        return _row_to_account(row)

    async def _write_ledger(
        self,
        db: AsyncSession,
        account: Account,
        entry_type: str,
        amount: int,
        reference_type: str | None,
        reference_id: str | None,
        description: str | None,
    ) -> LedgerEntry:
        result = await db.execute(
            _INSERT_LEDGER_SQL,
            {
                "address": account.address,
                "entry_type": entry_type,
                "amount": amount,
                "balance_after": account.balance,
                "reference_type": reference_type,
                "reference_id": reference_id,
                "description": description,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Ledger insert returned no rows — this should never happen")
        return _row_to_ledger(row)
