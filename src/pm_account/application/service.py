"""AccountApplicationService — lamport wallet views and dev funding.

Airdrop commits its own transaction; balance and ledger reads run without one.
Transfers into and out of the vault happen inside market operations, which
call the repository directly within their own unit of work.
"""

import logging
from typing import Any

from config.settings import settings
from src.pm_account.application.schemas import (
    AirdropResponse,
    BalanceResponse,
    LedgerEntryItem,
    LedgerResponse,
    cursor_decode,
    cursor_encode,
)
from src.pm_account.domain.repository import AccountRepositoryProtocol
from src.pm_account.infrastructure.persistence import AccountRepository
from src.pm_common.enums import LedgerEntryType
from src.pm_common.errors import AirdropDisabledError

logger = logging.getLogger(__name__)


class AccountApplicationService:
    def __init__(self, repo: AccountRepositoryProtocol | None = None) -> None:
        self._repo: AccountRepositoryProtocol = repo or AccountRepository()

    async def get_balance(self, db: Any, address: str) -> BalanceResponse:
        account = await self._repo.get_account(db, address)
        return BalanceResponse.from_lamports(address, account.balance if account else 0)

    async def airdrop(self, db: Any, address: str, amount: int) -> AirdropResponse:
        if not settings.AIRDROP_ENABLED:
            raise AirdropDisabledError()
        try:
            account, entry = await self._repo.credit(
                db, address, amount, LedgerEntryType.AIRDROP.value, "Development airdrop"
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Airdrop: address=%s amount=%d", address, amount)
        return AirdropResponse.from_result(account.balance, amount, entry.id)

    async def list_ledger(
        self,
        db: Any,
        address: str,
        cursor: str | None,
        limit: int,
        entry_type: str | None,
    ) -> LedgerResponse:
        cursor_id = cursor_decode(cursor)
        # Fetch limit+1 to detect has_more without a COUNT(*) query
        entries = await self._repo.list_ledger_entries(
            db, address, cursor_id, limit + 1, entry_type
        )
        has_more = len(entries) > limit
        page = entries[:limit]

        items = [
            LedgerEntryItem(
                id=e.id,
                entry_type=e.entry_type,
                amount_lamports=e.amount,
                balance_after_lamports=e.balance_after,
                reference_type=e.reference_type,
                reference_id=e.reference_id,
                description=e.description,
                created_at=e.created_at.isoformat() if e.created_at else "",
            )
            for e in page
        ]

        next_cursor = cursor_encode(page[-1].id) if has_more and page else None
        return LedgerResponse(items=items, next_cursor=next_cursor, has_more=has_more)
