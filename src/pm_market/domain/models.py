"""Domain models for pm_market — dataclasses with the state-transition helpers they own."""

from dataclasses import dataclass, field

from src.pm_common.enums import Outcome
from src.pm_common.lamports import checked_add

MAX_HISTORY_POINTS = 40


@dataclass(frozen=True)
class Deadline:
    """Market timing mode. timestamp None means open-ended (arbiter resolves any time)."""

    timestamp: int | None

    @classmethod
    def from_end_timestamp(cls, end_timestamp: int) -> "Deadline":
        return cls(None if end_timestamp < 0 else end_timestamp)

    def is_open_ended(self) -> bool:
        return self.timestamp is None

    def accepts_deposits(self, now: int) -> bool:
        return self.timestamp is None or now < self.timestamp

    def has_passed(self, now: int) -> bool:
        return self.timestamp is None or now > self.timestamp


@dataclass
class Market:
    address: str
    creator: str
    bet_id: int
    referee: str
    title: str
    description: str
    share_uuid: str
    created_timestamp: int
    end_timestamp: int          # negative => open-ended, stored verbatim
    initial_price: int
    scale_factor: int
    total_supply: int = 0
    total_reserve: int = 0
    yes_supply: int = 0
    yes_reserve: int = 0
    no_supply: int = 0
    no_reserve: int = 0
    complete: bool = False
    winner: Outcome = Outcome.UNRESOLVED
    creator_fee_claimed: bool = False
    platform_fee_claimed: bool = False

    @property
    def deadline(self) -> Deadline:
        return Deadline.from_end_timestamp(self.end_timestamp)

    def is_open_ended(self) -> bool:
        return self.deadline.is_open_ended()

    def apply_deposit(self, is_yes: bool, amount: int, token_amount: int) -> None:
        """Add a deposit to the running totals. Raises MathOverflowError past u64."""
        total_supply = checked_add(self.total_supply, token_amount)
        total_reserve = checked_add(self.total_reserve, amount)
        if is_yes:
            self.yes_supply = checked_add(self.yes_supply, token_amount)
            self.yes_reserve = checked_add(self.yes_reserve, amount)
        else:
            self.no_supply = checked_add(self.no_supply, token_amount)
            self.no_reserve = checked_add(self.no_reserve, amount)
        self.total_supply = total_supply
        self.total_reserve = total_reserve

    def winning_side(self) -> tuple[int, int]:
        """(reserve, supply) of the winning outcome."""
        if self.winner == Outcome.YES:
            return self.yes_reserve, self.yes_supply
        return self.no_reserve, self.no_supply


@dataclass(frozen=True)
class ProbabilityPoint:
    timestamp: int
    yes_reserve: int
    no_reserve: int


@dataclass
class History:
    """Bounded FIFO of probability snapshots for one market."""

    pool: str
    bet_id: int
    points: list[ProbabilityPoint] = field(default_factory=list)

    @classmethod
    def seeded(cls, market: Market) -> "History":
        return cls(
            pool=market.address,
            bet_id=market.bet_id,
            points=[ProbabilityPoint(market.created_timestamp, 0, 0)],
        )

    def is_initialized(self) -> bool:
        return bool(self.pool) and bool(self.points)

    def ensure_initialized(self, market: Market, now: int) -> None:
        """Seed a history that was never written (markets created before histories existed)."""
        if self.is_initialized():
            return
        self.pool = market.address
        self.bet_id = market.bet_id
        if not self.points:
            self.points.append(ProbabilityPoint(now, 0, 0))

    def record(self, point: ProbabilityPoint) -> None:
        self.points.append(point)
        overflow = len(self.points) - MAX_HISTORY_POINTS
        if overflow > 0:
            del self.points[:overflow]


@dataclass
class Entry:
    address: str
    user: str
    bet_id: int
    deposited_sol_amount: int = 0
    token_balance: int = 0
    is_yes: bool = True
    is_claimed: bool = False

    def accepts_side(self, is_yes: bool) -> bool:
        """Side is locked while the entry holds tokens."""
        return self.token_balance == 0 or self.is_yes == is_yes

    def apply_deposit(self, is_yes: bool, amount: int, token_amount: int) -> None:
        deposited = checked_add(self.deposited_sol_amount, amount)
        tokens = checked_add(self.token_balance, token_amount)
        self.deposited_sol_amount = deposited
        self.token_balance = tokens
        self.is_yes = is_yes
