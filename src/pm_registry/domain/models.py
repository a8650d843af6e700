"""Domain model for the process-wide registry — pure dataclass."""

from dataclasses import dataclass

from src.pm_common.errors import InvalidFeeConfigurationError
from src.pm_common.lamports import BPS_DENOMINATOR, checked_add


@dataclass
class GlobalRegistry:
    initialized: bool
    owner: str
    initial_price: int
    scale_factor: int
    current_bet_id: int
    creator_fee_bps: int
    platform_fee_bps: int

    def validate_fees(self) -> None:
        if self.creator_fee_bps + self.platform_fee_bps >= BPS_DENOMINATOR:
            raise InvalidFeeConfigurationError(self.creator_fee_bps, self.platform_fee_bps)

    def allocate_bet_id(self) -> int:
        """Consume the counter for a new market and advance it."""
        bet_id = self.current_bet_id
        self.current_bet_id = checked_add(bet_id, 1)
        return bet_id

    def is_owner(self, address: str) -> bool:
        return self.owner == address
