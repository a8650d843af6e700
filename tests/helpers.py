"""Test doubles and constants shared by unit and integration tests."""

from src.pm_common.memory_db import InMemoryDatabase

T0 = 1_700_000_000
SLOT0 = 250_000_000
HOUR = 3600

OWNER = "owner-wallet"
CREATOR = "creator-wallet"
REFEREE = "referee-wallet"
ALICE = "alice-wallet"
BOB = "bob-wallet"
CAROL = "carol-wallet"

SOL = 1_000_000_000


class FixedClock:
    """Test clock: time only moves when a test moves it."""

    def __init__(self, now: int = T0, slot: int = SLOT0) -> None:
        self.now = now
        self.current_slot = slot

    def unix_timestamp(self) -> int:
        return self.now

    def slot(self) -> int:
        return self.current_slot

    def advance(self, seconds: int) -> None:
        self.now += seconds
        self.current_slot += seconds * 1000 // 400


async def balance_of(db: InMemoryDatabase, address: str) -> int:
    account = db.tables.accounts.get(address)
    return account.balance if account else 0
