"""Shared test fixtures.

Settings are read at import time, so the environment is prepared before any
application module is imported.
"""

import os

os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production")
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("AIRDROP_ENABLED", "true")

from collections.abc import Awaitable, Callable  # noqa: E402

import pytest  # noqa: E402

from src.container import ServiceContainer, build_container  # noqa: E402
from src.pm_account.infrastructure.memory import InMemoryAccountRepository  # noqa: E402
from src.pm_common.enums import LedgerEntryType  # noqa: E402
from src.pm_common.memory_db import InMemoryDatabase  # noqa: E402
from tests.helpers import FixedClock  # noqa: E402


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def db() -> InMemoryDatabase:
    return InMemoryDatabase()


@pytest.fixture
def services(clock: FixedClock) -> ServiceContainer:
    return build_container("memory", clock=clock)


@pytest.fixture
def fund(db: InMemoryDatabase) -> Callable[[str, int], Awaitable[None]]:
    """Credit lamports to an address and commit, as a dev airdrop would."""
    repo = InMemoryAccountRepository()

    async def _fund(address: str, amount: int) -> None:
        await repo.credit(db, address, amount, LedgerEntryType.AIRDROP.value, "test funding")
        await db.commit()

    return _fund
