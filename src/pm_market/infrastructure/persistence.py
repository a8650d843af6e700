"""MarketRepository — concrete implementation of MarketRepositoryProtocol.

All queries use raw text() SQL (no ORM). u64 columns are NUMERIC(20, 0),
which asyncpg returns as Decimal; row mappers convert back to int.
"""

import json

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.enums import Outcome
from src.pm_market.domain.models import Entry, History, Market, ProbabilityPoint

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_MARKET_COLUMNS = """
    address, creator, bet_id, referee, title, description, share_uuid,
    created_timestamp, end_timestamp, initial_price, scale_factor,
    total_supply, total_reserve, yes_supply, yes_reserve, no_supply, no_reserve,
    complete, winner, creator_fee_claimed, platform_fee_claimed
"""

_GET_MARKET_SQL = text(f"SELECT {_MARKET_COLUMNS} FROM markets WHERE bet_id = :bet_id")

_GET_MARKET_FOR_UPDATE_SQL = text(
    f"SELECT {_MARKET_COLUMNS} FROM markets WHERE bet_id = :bet_id FOR UPDATE"
)

_LIST_MARKETS_SQL = text(f"""
    SELECT {_MARKET_COLUMNS}
    FROM markets
    WHERE CAST(:cursor_bet_id AS NUMERIC) IS NULL
       OR bet_id < CAST(:cursor_bet_id AS NUMERIC)
    ORDER BY bet_id DESC
    LIMIT :limit
""")

_LIST_ALL_MARKETS_SQL = text(f"SELECT {_MARKET_COLUMNS} FROM markets ORDER BY bet_id")

_INSERT_MARKET_SQL = text("""
    INSERT INTO markets (
        address, creator, bet_id, referee, title, description, share_uuid,
        created_timestamp, end_timestamp, initial_price, scale_factor,
        total_supply, total_reserve, yes_supply, yes_reserve, no_supply, no_reserve,
        complete, winner, creator_fee_claimed, platform_fee_claimed
    ) VALUES (
        :address, :creator, :bet_id, :referee, :title, :description, :share_uuid,
        :created_timestamp, :end_timestamp, :initial_price, :scale_factor,
        :total_supply, :total_reserve, :yes_supply, :yes_reserve, :no_supply, :no_reserve,
        :complete, :winner, :creator_fee_claimed, :platform_fee_claimed
    )
""")

_UPDATE_MARKET_SQL = text("""
    UPDATE markets
    SET referee = :referee,
        title = :title,
        description = :description,
        end_timestamp = :end_timestamp,
        total_supply = :total_supply,
        total_reserve = :total_reserve,
        yes_supply = :yes_supply,
        yes_reserve = :yes_reserve,
        no_supply = :no_supply,
        no_reserve = :no_reserve,
        complete = :complete,
        winner = :winner,
        creator_fee_claimed = :creator_fee_claimed,
        platform_fee_claimed = :platform_fee_claimed,
        updated_at = NOW()
    WHERE bet_id = :bet_id
""")

_GET_HISTORY_SQL = text("""
    SELECT pool, bet_id, points FROM market_histories WHERE bet_id = :bet_id
""")

_UPSERT_HISTORY_SQL = text("""
    INSERT INTO market_histories (bet_id, pool, points)
    VALUES (:bet_id, :pool, CAST(:points AS JSONB))
    ON CONFLICT (bet_id) DO UPDATE
        SET pool = EXCLUDED.pool,
            points = EXCLUDED.points,
            updated_at = NOW()
""")

_ENTRY_COLUMNS = """
    address, user_address, bet_id, deposited_sol_amount, token_balance, is_yes, is_claimed
"""

_GET_ENTRY_SQL = text(
    f"SELECT {_ENTRY_COLUMNS} FROM entries WHERE bet_id = :bet_id AND user_address = :user"
)

_GET_ENTRY_FOR_UPDATE_SQL = text(
    f"SELECT {_ENTRY_COLUMNS} FROM entries"
    " WHERE bet_id = :bet_id AND user_address = :user FOR UPDATE"
)

_LIST_ENTRIES_SQL = text(
    f"SELECT {_ENTRY_COLUMNS} FROM entries WHERE bet_id = :bet_id ORDER BY created_at"
)

_INSERT_ENTRY_SQL = text("""
    INSERT INTO entries (
        address, user_address, bet_id, deposited_sol_amount, token_balance, is_yes, is_claimed
    ) VALUES (
        :address, :user, :bet_id, :deposited_sol_amount, :token_balance, :is_yes, :is_claimed
    )
    ON CONFLICT (bet_id, user_address) DO NOTHING
    RETURNING bet_id
""")

_UPSERT_ENTRY_SQL = text("""
    INSERT INTO entries (
        address, user_address, bet_id, deposited_sol_amount, token_balance, is_yes, is_claimed
    ) VALUES (
        :address, :user, :bet_id, :deposited_sol_amount, :token_balance, :is_yes, :is_claimed
    )
    ON CONFLICT (bet_id, user_address) DO UPDATE
        SET deposited_sol_amount = EXCLUDED.deposited_sol_amount,
            token_balance = EXCLUDED.token_balance,
            is_yes = EXCLUDED.is_yes,
            is_claimed = EXCLUDED.is_claimed,
            updated_at = NOW()
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_market(row: object) -> Market:
    return Market(
        address=row.address,  # type: ignore[attr-defined]
        creator=row.creator,  # type: ignore[attr-defined]
        bet_id=int(row.bet_id),  # type: ignore[attr-defined]
        referee=row.referee,  # type: ignore[attr-defined]
        title=row.title,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        share_uuid=row.share_uuid,  # type: ignore[attr-defined]
        created_timestamp=int(row.created_timestamp),  # type: ignore[attr-defined]
        end_timestamp=int(row.end_timestamp),  # type: ignore[attr-defined]
        initial_price=int(row.initial_price),  # type: ignore[attr-defined]
        scale_factor=int(row.scale_factor),  # type: ignore[attr-defined]
        total_supply=int(row.total_supply),  # type: ignore[attr-defined]
        total_reserve=int(row.total_reserve),  # type: ignore[attr-defined]
        yes_supply=int(row.yes_supply),  # type: ignore[attr-defined]
        yes_reserve=int(row.yes_reserve),  # type: ignore[attr-defined]
        no_supply=int(row.no_supply),  # type: ignore[attr-defined]
        no_reserve=int(row.no_reserve),  # type: ignore[attr-defined]
        complete=row.complete,  # type: ignore[attr-defined]
        winner=Outcome(row.winner),  # type: ignore[attr-defined]
        creator_fee_claimed=row.creator_fee_claimed,  # type: ignore[attr-defined]
        platform_fee_claimed=row.platform_fee_claimed,  # type: ignore[attr-defined]
    )


def _market_params(m: Market) -> dict[str, object]:
    return {
        "address": m.address,
        "creator": m.creator,
        "bet_id": m.bet_id,
        "referee": m.referee,
        "title": m.title,
        "description": m.description,
        "share_uuid": m.share_uuid,
        "created_timestamp": m.created_timestamp,
        "end_timestamp": m.end_timestamp,
        "initial_price": m.initial_price,
        "scale_factor": m.scale_factor,
        "total_supply": m.total_supply,
        "total_reserve": m.total_reserve,
        "yes_supply": m.yes_supply,
        "yes_reserve": m.yes_reserve,
        "no_supply": m.no_supply,
        "no_reserve": m.no_reserve,
        "complete": m.complete,
        "winner": m.winner.value,
        "creator_fee_claimed": m.creator_fee_claimed,
        "platform_fee_claimed": m.platform_fee_claimed,
    }


def _row_to_history(row: object) -> History:
    raw = row.points  # type: ignore[attr-defined]
    points = json.loads(raw) if isinstance(raw, str) else raw
    return History(
        pool=row.pool,  # type: ignore[attr-defined]
        bet_id=int(row.bet_id),  # type: ignore[attr-defined]
        points=[
            ProbabilityPoint(
                timestamp=int(p["timestamp"]),
                yes_reserve=int(p["yes_reserve"]),
                no_reserve=int(p["no_reserve"]),
            )
            for p in points
        ],
    )


def _entry_params(entry: Entry) -> dict[str, object]:
    return {
        "address": entry.address,
        "user": entry.user,
        "bet_id": entry.bet_id,
        "deposited_sol_amount": entry.deposited_sol_amount,
        "token_balance": entry.token_balance,
        "is_yes": entry.is_yes,
        "is_claimed": entry.is_claimed,
    }


def _row_to_entry(row: object) -> Entry:
    return Entry(
        address=row.address,  # type: ignore[attr-defined]
        user=row.user_address,  # type: ignore[attr-defined]
        bet_id=int(row.bet_id),  # type: ignore[attr-defined]
        deposited_sol_amount=int(row.deposited_sol_amount),  # type: ignore[attr-defined]
        token_balance=int(row.token_balance),  # type: ignore[attr-defined]
        is_yes=row.is_yes,  # type: ignore[attr-defined]
        is_claimed=row.is_claimed,  # type: ignore[attr-defined]
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------

class MarketRepository:
    """Concrete repository. Writes run inside the caller's transaction."""

    async def get_market(
        self, db: AsyncSession, bet_id: int, for_update: bool = False
    ) -> Market | None:
        sql = _GET_MARKET_FOR_UPDATE_SQL if for_update else _GET_MARKET_SQL
        result = await db.execute(sql, {"bet_id": bet_id})
        row = result.fetchone()
        return _row_to_market(row) if row else None

    async def list_markets(
        self, db: AsyncSession, cursor_bet_id: int | None, limit: int
    ) -> list[Market]:
        result = await db.execute(
            _LIST_MARKETS_SQL, {"cursor_bet_id": cursor_bet_id, "limit": limit}
        )
        return [_row_to_market(row) for row in result.fetchall()]

    async def list_all_markets(self, db: AsyncSession) -> list[Market]:
        result = await db.execute(_LIST_ALL_MARKETS_SQL)
        return [_row_to_market(row) for row in result.fetchall()]

    async def insert_market(self, db: AsyncSession, market: Market) -> None:
        await db.execute(_INSERT_MARKET_SQL, _market_params(market))

    async def save_market(self, db: AsyncSession, market: Market) -> None:
        await db.execute(_UPDATE_MARKET_SQL, _market_params(market))

    async def get_history(self, db: AsyncSession, bet_id: int) -> History | None:
        result = await db.execute(_GET_HISTORY_SQL, {"bet_id": bet_id})
        row = result.fetchone()
        return _row_to_history(row) if row else None

    async def save_history(self, db: AsyncSession, history: History) -> None:
        points = [
            {"timestamp": p.timestamp, "yes_reserve": p.yes_reserve, "no_reserve": p.no_reserve}
            for p in history.points
        ]
        await db.execute(
            _UPSERT_HISTORY_SQL,
            {"bet_id": history.bet_id, "pool": history.pool, "points": json.dumps(points)},
        )

    async def get_entry(
        self, db: AsyncSession, bet_id: int, user: str, for_update: bool = False
    ) -> Entry | None:
        sql = _GET_ENTRY_FOR_UPDATE_SQL if for_update else _GET_ENTRY_SQL
        result = await db.execute(sql, {"bet_id": bet_id, "user": user})
        row = result.fetchone()
        return _row_to_entry(row) if row else None

    async def list_entries(self, db: AsyncSession, bet_id: int) -> list[Entry]:
        result = await db.execute(_LIST_ENTRIES_SQL, {"bet_id": bet_id})
        return [_row_to_entry(row) for row in result.fetchall()]

    async def insert_entry(self, db: AsyncSession, entry: Entry) -> bool:
        result = await db.execute(_INSERT_ENTRY_SQL, _entry_params(entry))
        return result.fetchone() is not None

    async def save_entry(self, db: AsyncSession, entry: Entry) -> None:
        await db.execute(_UPSERT_ENTRY_SQL, _entry_params(entry))
