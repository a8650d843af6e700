"""RegistryApplicationService — init-registry and update-registry.

Each mutating method is one unit of work: commit on success, rollback and
re-raise on any error, so a failed call leaves the registry untouched.
"""

import logging
from typing import Any

from config.settings import settings
from src.pm_account.domain.models import Transfer
from src.pm_account.domain.repository import AccountRepositoryProtocol
from src.pm_account.infrastructure.persistence import AccountRepository
from src.pm_common.enums import LedgerEntryType
from src.pm_common.errors import (
    AlreadyInitializedError,
    UnauthorizedError,
    UninitializedError,
)
from src.pm_common.seeds import VAULT_ADDRESS, registry_address
from src.pm_registry.application.schemas import RegistryResponse, UpdateRegistryRequest
from src.pm_registry.domain.models import GlobalRegistry
from src.pm_registry.domain.repository import RegistryRepositoryProtocol
from src.pm_registry.infrastructure.persistence import RegistryRepository

logger = logging.getLogger(__name__)


class RegistryApplicationService:
    def __init__(
        self,
        repo: RegistryRepositoryProtocol | None = None,
        accounts: AccountRepositoryProtocol | None = None,
    ) -> None:
        self._repo: RegistryRepositoryProtocol = repo or RegistryRepository()
        self._accounts: AccountRepositoryProtocol = accounts or AccountRepository()

    async def get_registry(self, db: Any) -> RegistryResponse:
        registry = await self._repo.get_registry(db)
        if registry is None or not registry.initialized:
            raise UninitializedError()
        return RegistryResponse.from_domain(registry)

    async def init_registry(self, db: Any, signer: str) -> RegistryResponse:
        try:
            registry = await self._init_registry_inner(db, signer)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Registry initialized: owner=%s", registry.owner)
        return RegistryResponse.from_domain(registry)

    async def _init_registry_inner(self, db: Any, signer: str) -> GlobalRegistry:
        existing = await self._repo.get_registry(db, for_update=True)
        if existing is not None and existing.initialized:
            raise AlreadyInitializedError()

        registry = GlobalRegistry(
            initialized=True,
            owner=signer,
            initial_price=settings.INITIAL_PRICE,
            scale_factor=settings.SCALE_FACTOR,
            current_bet_id=0,
            creator_fee_bps=settings.CREATOR_FEE_BPS,
            platform_fee_bps=settings.PLATFORM_FEE_BPS,
        )
        registry.validate_fees()
        await self._repo.save_registry(db, registry)

        # Fund the vault so it exists before any market uses it
        rent = settings.VAULT_RENT_EXEMPT_LAMPORTS
        if rent > 0:
            await self._accounts.transfer(
                db,
                signer,
                VAULT_ADDRESS,
                rent,
                Transfer(
                    debit_type=LedgerEntryType.VAULT_RENT.value,
                    credit_type=LedgerEntryType.VAULT_RENT_IN.value,
                    reference_type="REGISTRY",
                    reference_id=registry_address(),
                    description="Vault rent exemption",
                ),
            )
        return registry

    async def update_registry(
        self, db: Any, signer: str, body: UpdateRegistryRequest
    ) -> RegistryResponse:
        try:
            registry = await self._repo.get_registry(db, for_update=True)
            if registry is None or not registry.initialized:
                raise UninitializedError()
            if not registry.is_owner(signer):
                raise UnauthorizedError()

            registry.owner = body.owner
            registry.initial_price = body.initial_price
            registry.scale_factor = body.scale_factor
            registry.creator_fee_bps = body.creator_fee_bps
            registry.platform_fee_bps = body.platform_fee_bps
            registry.validate_fees()

            await self._repo.save_registry(db, registry)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Registry updated by %s: owner=%s creator_fee_bps=%d platform_fee_bps=%d",
            signer,
            registry.owner,
            registry.creator_fee_bps,
            registry.platform_fee_bps,
        )
        return RegistryResponse.from_domain(registry)
