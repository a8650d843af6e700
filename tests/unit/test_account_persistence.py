"""Unit tests for AccountRepository using a mocked AsyncSession."""
from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.pm_account.domain.models import Transfer
from src.pm_account.infrastructure.persistence import AccountRepository
from src.pm_common.errors import InsufficientBalanceError

_TRANSFER = Transfer(
    debit_type="WINNER_PAYOUT_OUT",
    credit_type="WINNER_PAYOUT",
    reference_type="MARKET",
    reference_id="0",
)


def _account_row(address: str, balance: int):
    row = MagicMock()
    row.address = address
    row.balance = Decimal(balance)
    row.created_at = datetime.now(UTC)
    row.updated_at = datetime.now(UTC)
    return row


def _ledger_row(entry_id: int, address: str, amount: int):
    row = MagicMock()
    row.id = entry_id
    row.address = address
    row.entry_type = "WINNER_PAYOUT"
    row.amount = Decimal(amount)
    row.balance_after = Decimal(0)
    row.reference_type = "MARKET"
    row.reference_id = "0"
    row.description = None
    row.created_at = datetime.now(UTC)
    return row


def _result(row=None):
    result_mock = MagicMock()
    result_mock.fetchone.return_value = row
    return result_mock


class TestTransfer:
    async def test_locks_both_rows_in_address_order_first(self):
        db = MagicMock()
        db.execute = AsyncMock(side_effect=[
            _result(),                                  # lock pair
            _result(_account_row("vault", 10)),         # debit
            _result(_account_row("alice", 5)),          # credit
            _result(_ledger_row(1, "vault", -5)),
            _result(_ledger_row(2, "alice", 5)),
        ])

        debited, credited = await AccountRepository().transfer(db, "vault", "alice", 5, _TRANSFER)

        lock_sql, lock_params = db.execute.call_args_list[0][0]
        assert "ORDER BY address" in str(lock_sql)
        assert "FOR UPDATE" in str(lock_sql)
        assert lock_params == {"source": "vault", "destination": "alice"}
        assert "UPDATE accounts" in str(db.execute.call_args_list[1][0][0])
        assert (debited.balance, credited.balance) == (10, 5)

    async def test_short_source_raises(self):
        db = MagicMock()
        db.execute = AsyncMock(side_effect=[
            _result(),                              # lock pair
            _result(None),                          # debit matched no row
            _result(_account_row("alice", 3)),      # balance lookup
        ])

        with pytest.raises(InsufficientBalanceError):
            await AccountRepository().transfer(db, "alice", "vault", 5, _TRANSFER)
