"""Virtual-reserve pricing.

Both sides are padded with one SOL of virtual liquidity so an empty market
starts at 50/50 and no price is ever zero. Prices are fixed-point over SCALE;
a deposit mints deposit * SCALE / price outcome tokens, so the favored side
yields fewer tokens per lamport.
"""

from dataclasses import dataclass

from src.pm_common.errors import MathOverflowError
from src.pm_common.lamports import LAMPORTS_PER_SOL, checked_u64

VIRTUAL_RESERVE = LAMPORTS_PER_SOL
SCALE = 1_000_000_000


@dataclass(frozen=True)
class Quote:
    token_amount: int
    yes_price: int
    no_price: int


def current_prices(yes_reserve: int, no_reserve: int) -> tuple[int, int]:
    """Return (yes_price, no_price) scaled by SCALE; they sum to SCALE up to truncation."""
    virtual_yes = yes_reserve + VIRTUAL_RESERVE
    virtual_no = no_reserve + VIRTUAL_RESERVE
    denom = virtual_yes + virtual_no
    return virtual_yes * SCALE // denom, virtual_no * SCALE // denom


def quote_deposit(
    deposit_amount: int, is_yes: bool, yes_reserve: int, no_reserve: int
) -> Quote:
    """Tokens minted for a deposit plus the prices it was minted at.

    Raises MathOverflowError if the price truncates to zero or the token
    amount does not fit in u64.
    """
    yes_price, no_price = current_prices(yes_reserve, no_reserve)
    selected_price = yes_price if is_yes else no_price
    if selected_price == 0:
        # Only reachable when the other side holds ~1e18+ lamports
        raise MathOverflowError()
    token_amount = checked_u64(deposit_amount * SCALE // selected_price)
    return Quote(token_amount=token_amount, yes_price=yes_price, no_price=no_price)


def calculate_token_amount(
    deposit_amount: int, is_yes: bool, yes_reserve: int, no_reserve: int
) -> int:
    return quote_deposit(deposit_amount, is_yes, yes_reserve, no_reserve).token_amount
