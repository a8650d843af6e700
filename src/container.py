"""Composition root: wires repositories into the application services.

The container is a process-wide singleton so the per-market locks held by
MarketApplicationService are shared by every request. Tests build their
own container and install it through app.dependency_overrides.
"""

from dataclasses import dataclass

from config.settings import settings
from src.pm_account.application.service import AccountApplicationService
from src.pm_account.infrastructure.memory import InMemoryAccountRepository
from src.pm_account.infrastructure.persistence import AccountRepository
from src.pm_admin.application.service import AdminService
from src.pm_common.datetime_utils import Clock, SystemClock
from src.pm_market.application.service import MarketApplicationService
from src.pm_market.infrastructure.event_log import InMemoryEventSink, SqlEventSink
from src.pm_market.infrastructure.memory import InMemoryMarketRepository
from src.pm_market.infrastructure.persistence import MarketRepository
from src.pm_registry.application.service import RegistryApplicationService
from src.pm_registry.infrastructure.memory import InMemoryRegistryRepository
from src.pm_registry.infrastructure.persistence import RegistryRepository


@dataclass
class ServiceContainer:
    accounts: AccountApplicationService
    registry: RegistryApplicationService
    markets: MarketApplicationService
    admin: AdminService


def build_container(backend: str, clock: Clock | None = None) -> ServiceContainer:
    """Build services for a storage backend ("postgres" or "memory")."""
    if backend == "memory":
        account_repo = InMemoryAccountRepository()
        registry_repo = InMemoryRegistryRepository()
        market_repo = InMemoryMarketRepository()
        events = InMemoryEventSink()
    elif backend == "postgres":
        account_repo = AccountRepository()
        registry_repo = RegistryRepository()
        market_repo = MarketRepository()
        events = SqlEventSink()
    else:
        raise ValueError(f"Unknown storage backend: {backend}")

    return ServiceContainer(
        accounts=AccountApplicationService(account_repo),
        registry=RegistryApplicationService(registry_repo, account_repo),
        markets=MarketApplicationService(
            registry_repo, market_repo, account_repo, events, clock or SystemClock()
        ),
        admin=AdminService(registry_repo, market_repo, account_repo),
    )


_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """FastAPI dependency: the process-wide container for the configured backend."""
    global _container
    if _container is None:
        _container = build_container(settings.STORAGE_BACKEND)
    return _container
