"""In-memory MarketRepository used by the "memory" storage backend.

Reads hand out copies, so a loaded record only changes once it is saved.
"""

import copy

from src.pm_common.memory_db import InMemoryDatabase
from src.pm_market.domain.models import Entry, History, Market


class InMemoryMarketRepository:
    async def get_market(
        self, db: InMemoryDatabase, bet_id: int, for_update: bool = False
    ) -> Market | None:
        return copy.deepcopy(db.tables.markets.get(bet_id))

    async def list_markets(
        self, db: InMemoryDatabase, cursor_bet_id: int | None, limit: int
    ) -> list[Market]:
        ids = sorted(
            (i for i in db.tables.markets if cursor_bet_id is None or i < cursor_bet_id),
            reverse=True,
        )
        return [copy.deepcopy(db.tables.markets[i]) for i in ids[:limit]]

    async def list_all_markets(self, db: InMemoryDatabase) -> list[Market]:
        return [copy.deepcopy(db.tables.markets[i]) for i in sorted(db.tables.markets)]

    async def insert_market(self, db: InMemoryDatabase, market: Market) -> None:
        if market.bet_id in db.tables.markets:
            raise KeyError(f"market {market.bet_id} already exists")
        db.tables.markets[market.bet_id] = copy.deepcopy(market)

    async def save_market(self, db: InMemoryDatabase, market: Market) -> None:
        db.tables.markets[market.bet_id] = copy.deepcopy(market)

    async def get_history(self, db: InMemoryDatabase, bet_id: int) -> History | None:
        return copy.deepcopy(db.tables.histories.get(bet_id))

    async def save_history(self, db: InMemoryDatabase, history: History) -> None:
        db.tables.histories[history.bet_id] = copy.deepcopy(history)

    async def get_entry(
        self, db: InMemoryDatabase, bet_id: int, user: str, for_update: bool = False
    ) -> Entry | None:
        return copy.deepcopy(db.tables.entries.get((bet_id, user)))

    async def list_entries(self, db: InMemoryDatabase, bet_id: int) -> list[Entry]:
        return [
            copy.deepcopy(e) for (b, _), e in db.tables.entries.items() if b == bet_id
        ]

    async def save_entry(self, db: InMemoryDatabase, entry: Entry) -> None:
        db.tables.entries[(entry.bet_id, entry.user)] = copy.deepcopy(entry)

    async def insert_entry(self, db: InMemoryDatabase, entry: Entry) -> bool:
        key = (entry.bet_id, entry.user)
        if key in db.tables.entries:
            return False
        db.tables.entries[key] = copy.deepcopy(entry)
        return True
