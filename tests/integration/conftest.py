"""Integration-test fixtures.

Each test gets a fresh memory-backend container and database installed
through app.dependency_overrides, so the HTTP layer, services and
repositories run end to end without Postgres.
"""

from collections.abc import AsyncGenerator, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.container import ServiceContainer, build_container, get_container
from src.main import app
from src.pm_common.database import get_db_session
from src.pm_common.memory_db import InMemoryDatabase
from src.pm_gateway.auth.jwt_handler import create_access_token
from tests.helpers import FixedClock


@pytest.fixture
def api_clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def memory_db() -> InMemoryDatabase:
    return InMemoryDatabase()


@pytest.fixture
def container(api_clock: FixedClock) -> ServiceContainer:
    return build_container("memory", clock=api_clock)


@pytest_asyncio.fixture
async def client(
    container: ServiceContainer, memory_db: InMemoryDatabase
) -> AsyncGenerator[AsyncClient, None]:
    async def _db() -> AsyncGenerator[InMemoryDatabase, None]:
        yield memory_db

    app.dependency_overrides[get_container] = lambda: container
    app.dependency_overrides[get_db_session] = _db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def auth() -> Callable[[str], dict[str, str]]:
    """Bearer headers for a signer address."""

    def _headers(address: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(address)}"}

    return _headers
