"""Repository Protocol for the registry singleton (seed "main")."""

from typing import Any, Protocol

from src.pm_registry.domain.models import GlobalRegistry


class RegistryRepositoryProtocol(Protocol):
    async def get_registry(
        self, db: Any, for_update: bool = False
    ) -> GlobalRegistry | None: ...

    async def save_registry(self, db: Any, registry: GlobalRegistry) -> None: ...
