"""Tests for pm_registry — domain model and RegistryApplicationService on the memory backend."""

import pytest

from config.settings import settings
from src.container import ServiceContainer
from src.pm_common.errors import (
    AlreadyInitializedError,
    InsufficientBalanceError,
    InvalidFeeConfigurationError,
    MathOverflowError,
    UnauthorizedError,
    UninitializedError,
)
from src.pm_common.lamports import U64_MAX
from src.pm_common.memory_db import InMemoryDatabase
from src.pm_common.seeds import VAULT_ADDRESS
from src.pm_registry.application.schemas import UpdateRegistryRequest
from src.pm_registry.domain.models import GlobalRegistry
from tests.helpers import ALICE, OWNER, SOL, balance_of


def _registry(**overrides: object) -> GlobalRegistry:
    values: dict[str, object] = {
        "initialized": True,
        "owner": OWNER,
        "initial_price": 100_000_000,
        "scale_factor": 10_000_000,
        "current_bet_id": 0,
        "creator_fee_bps": 100,
        "platform_fee_bps": 200,
    }
    values.update(overrides)
    return GlobalRegistry(**values)  # type: ignore[arg-type]


def _update(**overrides: object) -> UpdateRegistryRequest:
    values: dict[str, object] = {
        "owner": OWNER,
        "initial_price": 1,
        "scale_factor": 2,
        "creator_fee_bps": 300,
        "platform_fee_bps": 400,
    }
    values.update(overrides)
    return UpdateRegistryRequest(**values)  # type: ignore[arg-type]


class TestGlobalRegistry:
    def test_allocate_bet_id_consumes_then_increments(self) -> None:
        r = _registry(current_bet_id=7)
        assert r.allocate_bet_id() == 7
        assert r.current_bet_id == 8

    def test_allocate_bet_id_overflow(self) -> None:
        r = _registry(current_bet_id=U64_MAX)
        with pytest.raises(MathOverflowError):
            r.allocate_bet_id()

    def test_fee_sum_must_stay_below_denominator(self) -> None:
        _registry(creator_fee_bps=4_999, platform_fee_bps=5_000).validate_fees()
        with pytest.raises(InvalidFeeConfigurationError):
            _registry(creator_fee_bps=5_000, platform_fee_bps=5_000).validate_fees()


class TestInitRegistry:
    async def test_init_sets_defaults_and_funds_vault(
        self, services: ServiceContainer, db: InMemoryDatabase, fund
    ) -> None:
        await fund(OWNER, SOL)
        result = await services.registry.init_registry(db, OWNER)

        assert result.initialized
        assert result.owner == OWNER
        assert result.current_bet_id == 0
        assert result.creator_fee_bps == settings.CREATOR_FEE_BPS == 100
        assert result.platform_fee_bps == settings.PLATFORM_FEE_BPS == 200
        assert result.initial_price == 100_000_000
        assert result.scale_factor == 10_000_000
        rent = settings.VAULT_RENT_EXEMPT_LAMPORTS
        assert await balance_of(db, VAULT_ADDRESS) == rent
        assert await balance_of(db, OWNER) == SOL - rent

    async def test_second_init_fails(
        self, services: ServiceContainer, db: InMemoryDatabase, fund
    ) -> None:
        await fund(OWNER, SOL)
        await fund(ALICE, SOL)
        await services.registry.init_registry(db, OWNER)
        with pytest.raises(AlreadyInitializedError):
            await services.registry.init_registry(db, ALICE)
        assert (await services.registry.get_registry(db)).owner == OWNER

    async def test_init_without_rent_rolls_back(
        self, services: ServiceContainer, db: InMemoryDatabase
    ) -> None:
        with pytest.raises(InsufficientBalanceError):
            await services.registry.init_registry(db, OWNER)
        assert db.tables.registry is None
        with pytest.raises(UninitializedError):
            await services.registry.get_registry(db)


class TestUpdateRegistry:
    async def _init(self, services: ServiceContainer, db: InMemoryDatabase, fund) -> None:
        await fund(OWNER, SOL)
        await services.registry.init_registry(db, OWNER)

    async def test_owner_overwrites_fields(
        self, services: ServiceContainer, db: InMemoryDatabase, fund
    ) -> None:
        await self._init(services, db, fund)
        result = await services.registry.update_registry(db, OWNER, _update(owner=ALICE))
        assert result.owner == ALICE
        assert (result.creator_fee_bps, result.platform_fee_bps) == (300, 400)
        assert result.current_bet_id == 0

    async def test_non_owner_rejected(
        self, services: ServiceContainer, db: InMemoryDatabase, fund
    ) -> None:
        await self._init(services, db, fund)
        with pytest.raises(UnauthorizedError):
            await services.registry.update_registry(db, ALICE, _update())
        assert (await services.registry.get_registry(db)).creator_fee_bps == 100

    async def test_uninitialized(self, services: ServiceContainer, db: InMemoryDatabase) -> None:
        with pytest.raises(UninitializedError):
            await services.registry.update_registry(db, OWNER, _update())

    async def test_fee_sum_bound_enforced(
        self, services: ServiceContainer, db: InMemoryDatabase, fund
    ) -> None:
        await self._init(services, db, fund)
        with pytest.raises(InvalidFeeConfigurationError):
            await services.registry.update_registry(
                db, OWNER, _update(creator_fee_bps=9_000, platform_fee_bps=1_000)
            )
        assert (await services.registry.get_registry(db)).platform_fee_bps == 200
