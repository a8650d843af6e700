"""In-memory RegistryRepository used by the "memory" storage backend."""

import dataclasses

from src.pm_common.memory_db import InMemoryDatabase
from src.pm_registry.domain.models import GlobalRegistry


class InMemoryRegistryRepository:
    async def get_registry(
        self, db: InMemoryDatabase, for_update: bool = False
    ) -> GlobalRegistry | None:
        registry = db.tables.registry
        return dataclasses.replace(registry) if registry else None

    async def save_registry(self, db: InMemoryDatabase, registry: GlobalRegistry) -> None:
        db.tables.registry = dataclasses.replace(registry)
