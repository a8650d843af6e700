"""Resolution fees and winner payouts.

A winner always gets their principal back. On top of that, the losing
reserve minus both fees is split across the winning side in proportion to
outcome tokens, so early entries (minted at a lower price) earn a larger
share. Fees are taken from the whole pool, so both sides contribute.

The platform fee is transferred at resolution; the payout formula still
subtracts it because `total` comes from the recorded reserves, not from
live vault lamports.
"""

from dataclasses import dataclass

from src.pm_common.errors import MathOverflowError, WrongBetError
from src.pm_common.lamports import bps_share, checked_u64, saturate_u64, saturating_sub
from src.pm_market.domain.models import Entry, Market


@dataclass(frozen=True)
class PayoutBreakdown:
    total: int
    creator_fee: int
    platform_fee: int
    winning_reserve: int
    winning_supply: int
    available_profit: int
    principal: int
    profit_share: int
    payout: int


def market_total(market: Market) -> int:
    return market.yes_reserve + market.no_reserve


def platform_fee_for(market: Market, platform_fee_bps: int) -> int:
    """Fee paid to the registry owner at resolution, saturated to u64."""
    return saturate_u64(bps_share(market_total(market), platform_fee_bps))


def creator_fee_for(market: Market, creator_fee_bps: int) -> int:
    """Fee the market creator may claim once, saturated to u64."""
    return saturate_u64(bps_share(market_total(market), creator_fee_bps))


def calculate_payout(
    market: Market, entry: Entry, creator_fee_bps: int, platform_fee_bps: int
) -> PayoutBreakdown:
    """Payout for a winning entry of a resolved market.

    Raises:
        MathOverflowError: the winning side has no supply, or payout exceeds u64.
        WrongBetError: the entry holds no outcome tokens.
    """
    winning_reserve, winning_supply = market.winning_side()
    if winning_supply == 0:
        raise MathOverflowError()
    user_tokens = entry.token_balance
    if user_tokens == 0:
        raise WrongBetError()

    total = market_total(market)
    creator_fee = bps_share(total, creator_fee_bps)
    platform_fee = bps_share(total, platform_fee_bps)

    available_profit = saturating_sub(
        saturating_sub(saturating_sub(total, winning_reserve), creator_fee),
        platform_fee,
    )
    profit_share = user_tokens * available_profit // winning_supply if available_profit > 0 else 0
    payout = checked_u64(entry.deposited_sol_amount + profit_share)

    return PayoutBreakdown(
        total=total,
        creator_fee=creator_fee,
        platform_fee=platform_fee,
        winning_reserve=winning_reserve,
        winning_supply=winning_supply,
        available_profit=available_profit,
        principal=entry.deposited_sol_amount,
        profit_share=profit_share,
        payout=payout,
    )
