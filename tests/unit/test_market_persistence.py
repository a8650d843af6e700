# tests/unit/test_market_persistence.py
"""Unit tests for MarketRepository using MagicMock AsyncSession."""
import json
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.pm_common.enums import Outcome
from src.pm_market.domain.models import Entry, History, ProbabilityPoint
from src.pm_market.infrastructure.persistence import MarketRepository


def _make_market_row(**kwargs):
    """Build a mock DB row; NUMERIC columns come back as Decimal."""
    row = MagicMock()
    row.address = "pool-addr"
    row.creator = "creator"
    row.bet_id = Decimal(kwargs.get("bet_id", 3))
    row.referee = "referee"
    row.title = kwargs.get("title", "Test Market")
    row.description = "desc"
    row.share_uuid = "3-65535-ff"
    row.created_timestamp = 1_700_000_000
    row.end_timestamp = kwargs.get("end_timestamp", -1)
    row.initial_price = Decimal(100_000_000)
    row.scale_factor = Decimal(10_000_000)
    row.total_supply = Decimal(4)
    row.total_reserve = Decimal(2)
    row.yes_supply = Decimal(2)
    row.yes_reserve = Decimal(1)
    row.no_supply = Decimal(2)
    row.no_reserve = Decimal(1)
    row.complete = kwargs.get("complete", False)
    row.winner = kwargs.get("winner", "")
    row.creator_fee_claimed = False
    row.platform_fee_claimed = kwargs.get("complete", False)
    return row


def _result(row=None, rows=None):
    result_mock = MagicMock()
    result_mock.fetchone.return_value = row
    result_mock.fetchall.return_value = rows or []
    return result_mock


@pytest.fixture
def db():
    return MagicMock()


class TestGetMarket:
    async def test_maps_numeric_to_int(self, db):
        db.execute = AsyncMock(return_value=_result(_make_market_row(winner="yes", complete=True)))
        market = await MarketRepository().get_market(db, 3)

        assert market is not None
        assert market.bet_id == 3
        assert isinstance(market.yes_reserve, int)
        assert market.winner is Outcome.YES
        assert market.is_open_ended()

    async def test_returns_none_when_missing(self, db):
        db.execute = AsyncMock(return_value=_result(None))
        assert await MarketRepository().get_market(db, 3) is None

    async def test_for_update_locks_row(self, db):
        db.execute = AsyncMock(return_value=_result(_make_market_row()))
        await MarketRepository().get_market(db, 3, for_update=True)
        sql = str(db.execute.call_args[0][0])
        assert "FOR UPDATE" in sql


class TestListMarkets:
    async def test_passes_cursor_and_limit(self, db):
        db.execute = AsyncMock(return_value=_result(rows=[_make_market_row(bet_id=2)]))
        markets = await MarketRepository().list_markets(db, 5, 10)

        assert [m.bet_id for m in markets] == [2]
        params = db.execute.call_args[0][1]
        assert params == {"cursor_bet_id": 5, "limit": 10}


class TestSaveMarket:
    async def test_winner_written_as_wire_value(self, db):
        db.execute = AsyncMock(return_value=_result(_make_market_row()))
        repo = MarketRepository()
        market = await repo.get_market(db, 3)
        market.winner = Outcome.NO
        await repo.save_market(db, market)

        params = db.execute.call_args[0][1]
        assert params["winner"] == "no"
        assert params["bet_id"] == 3


class TestHistory:
    async def test_points_serialized_as_json(self, db):
        db.execute = AsyncMock()
        history = History(
            pool="pool", bet_id=1, points=[ProbabilityPoint(10, 0, 0), ProbabilityPoint(11, 5, 0)]
        )
        await MarketRepository().save_history(db, history)

        params = db.execute.call_args[0][1]
        assert json.loads(params["points"]) == [
            {"timestamp": 10, "yes_reserve": 0, "no_reserve": 0},
            {"timestamp": 11, "yes_reserve": 5, "no_reserve": 0},
        ]

    async def test_reads_jsonb_list(self, db):
        row = MagicMock()
        row.pool = "pool"
        row.bet_id = Decimal(1)
        row.points = [{"timestamp": 10, "yes_reserve": 0, "no_reserve": 0}]
        db.execute = AsyncMock(return_value=_result(row))

        history = await MarketRepository().get_history(db, 1)
        assert history.points == [ProbabilityPoint(10, 0, 0)]


class TestEntries:
    async def test_save_entry_uses_user_address_column(self, db):
        db.execute = AsyncMock()
        entry = Entry(address="e", user="alice", bet_id=1, deposited_sol_amount=7, token_balance=14)
        await MarketRepository().save_entry(db, entry)

        params = db.execute.call_args[0][1]
        assert params["user"] == "alice"
        assert params["token_balance"] == 14
        assert "ON CONFLICT (bet_id, user_address)" in str(db.execute.call_args[0][0])

    async def test_get_entry_maps_row(self, db):
        row = MagicMock()
        row.address = "e"
        row.user_address = "alice"
        row.bet_id = Decimal(1)
        row.deposited_sol_amount = Decimal(7)
        row.token_balance = Decimal(14)
        row.is_yes = False
        row.is_claimed = True
        db.execute = AsyncMock(return_value=_result(row))

        entry = await MarketRepository().get_entry(db, 1, "alice")
        assert entry == Entry(
            address="e", user="alice", bet_id=1,
            deposited_sol_amount=7, token_balance=14, is_yes=False, is_claimed=True,
        )

    async def test_insert_entry_never_overwrites(self, db):
        db.execute = AsyncMock(return_value=_result(None))
        entry = Entry(address="e", user="alice", bet_id=1)

        inserted = await MarketRepository().insert_entry(db, entry)

        sql = str(db.execute.call_args[0][0])
        assert "DO NOTHING" in sql
        assert "DO UPDATE" not in sql
        assert inserted is False

    async def test_insert_entry_reports_new_row(self, db):
        db.execute = AsyncMock(return_value=_result(MagicMock()))
        assert await MarketRepository().insert_entry(db, Entry(address="e", user="bob", bet_id=1))
