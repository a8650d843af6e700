# src/pm_admin/application/service.py
"""Admin application service."""
import logging
from typing import Any

from pydantic import BaseModel

from config.settings import settings
from src.pm_account.domain.repository import AccountRepositoryProtocol
from src.pm_account.infrastructure.persistence import AccountRepository
from src.pm_common.errors import UnauthorizedError, UninitializedError
from src.pm_common.seeds import VAULT_ADDRESS
from src.pm_market.domain.invariants import (
    outstanding_liability,
    verify_market_invariants,
    verify_vault_solvency,
)
from src.pm_market.domain.repository import MarketRepositoryProtocol
from src.pm_market.infrastructure.persistence import MarketRepository
from src.pm_registry.domain.repository import RegistryRepositoryProtocol
from src.pm_registry.infrastructure.persistence import RegistryRepository

logger = logging.getLogger(__name__)


class InvariantReport(BaseModel):
    ok: bool
    markets_checked: int
    vault_balance: int
    outstanding_liabilities: int
    violations: list[str]


class AdminService:
    def __init__(
        self,
        registry_repo: RegistryRepositoryProtocol | None = None,
        market_repo: MarketRepositoryProtocol | None = None,
        accounts: AccountRepositoryProtocol | None = None,
    ) -> None:
        self._registry_repo: RegistryRepositoryProtocol = registry_repo or RegistryRepository()
        self._market_repo: MarketRepositoryProtocol = market_repo or MarketRepository()
        self._accounts: AccountRepositoryProtocol = accounts or AccountRepository()

    async def verify_all_invariants(self, db: Any, signer: str) -> InvariantReport:
        """Run per-market (INV-1/2/3/R) and vault solvency (INV-V) checks. Owner only."""
        registry = await self._registry_repo.get_registry(db)
        if registry is None or not registry.initialized:
            raise UninitializedError()
        if not registry.is_owner(signer):
            raise UnauthorizedError()

        violations: list[str] = []
        liabilities = 0
        markets = await self._market_repo.list_all_markets(db)
        for market in markets:
            entries = await self._market_repo.list_entries(db, market.bet_id)
            history = await self._market_repo.get_history(db, market.bet_id)
            violations.extend(verify_market_invariants(market, entries, history))
            liabilities += outstanding_liability(
                market, entries, registry.creator_fee_bps, registry.platform_fee_bps
            )

        vault = await self._accounts.get_account(db, VAULT_ADDRESS)
        vault_balance = vault.balance if vault else 0
        violations.extend(
            verify_vault_solvency(vault_balance, settings.VAULT_RENT_EXEMPT_LAMPORTS, liabilities)
        )

        logger.info(
            "Invariant sweep: markets=%d violations=%d", len(markets), len(violations)
        )
        return InvariantReport(
            ok=not violations,
            markets_checked=len(markets),
            vault_balance=vault_balance,
            outstanding_liabilities=liabilities,
            violations=violations,
        )
