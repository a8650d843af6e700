# src/pm_market/domain/repository.py
"""Repository Protocol — dependency inversion for testability.

Unit tests inject the in-memory implementation or a mock conforming to this
Protocol. Infrastructure layer provides the SQL implementation.
"""

from typing import Any, Protocol

from src.pm_market.domain.models import Entry, History, Market


class MarketRepositoryProtocol(Protocol):
    async def get_market(
        self, db: Any, bet_id: int, for_update: bool = False
    ) -> Market | None: ...

    async def list_markets(
        self, db: Any, cursor_bet_id: int | None, limit: int
    ) -> list[Market]: ...

    async def list_all_markets(self, db: Any) -> list[Market]: ...

    async def insert_market(self, db: Any, market: Market) -> None: ...

    async def save_market(self, db: Any, market: Market) -> None: ...

    async def get_history(self, db: Any, bet_id: int) -> History | None: ...

    async def save_history(self, db: Any, history: History) -> None: ...

    async def get_entry(
        self, db: Any, bet_id: int, user: str, for_update: bool = False
    ) -> Entry | None: ...

    async def list_entries(self, db: Any, bet_id: int) -> list[Entry]: ...

    async def save_entry(self, db: Any, entry: Entry) -> None: ...

    async def insert_entry(self, db: Any, entry: Entry) -> bool:
        """Insert the entry unless one exists for (bet_id, user). True if inserted."""
        ...
