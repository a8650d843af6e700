from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from config.settings import settings
from src.pm_common.memory_db import InMemoryDatabase

engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_size=20,
    max_overflow=10,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

# Shared by every request when STORAGE_BACKEND == "memory"
memory_database = InMemoryDatabase()


def uses_memory_backend() -> bool:
    return settings.STORAGE_BACKEND == "memory"


async def get_db_session() -> AsyncGenerator[Any, None]:
    """FastAPI dependency: yields an AsyncSession (or the in-memory database), auto-closes after request."""
    if uses_memory_backend():
        yield memory_database
        return
    async with async_session_factory() as session:
        yield session
