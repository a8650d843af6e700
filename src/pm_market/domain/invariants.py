"""Market invariant verification.

Snapshot checks (hold after every committed operation):
  INV-1: yes_supply + no_supply == total_supply, yes_reserve + no_reserve == total_reserve
  INV-2: total_reserve == sum of the market's entries' deposited_sol_amount
  INV-3: history holds 1..40 points with non-decreasing timestamps
  INV-R: complete <=> winner set; complete => platform fee settled;
         claimed entries and a claimed creator fee only on complete markets

Transition checks (compare one market before and after an operation):
  INV-4: is_claimed, creator_fee_claimed, platform_fee_claimed never revert
  INV-5: once complete, reserves and supplies are frozen

Vault solvency (INV-V): the vault covers rent plus every amount still owed.

Checks return violation strings rather than raising, so a caller can
collect every failure in one pass.
"""

import logging
from collections.abc import Iterable

from src.pm_common.enums import Outcome
from src.pm_common.errors import AppError
from src.pm_market.domain.models import MAX_HISTORY_POINTS, Entry, History, Market
from src.pm_market.domain.payout import calculate_payout, creator_fee_for

logger = logging.getLogger(__name__)

_FROZEN_FIELDS = (
    "total_supply",
    "total_reserve",
    "yes_supply",
    "yes_reserve",
    "no_supply",
    "no_reserve",
)


def verify_market_invariants(
    market: Market, entries: Iterable[Entry], history: History | None
) -> list[str]:
    violations: list[str] = []
    bet_id = market.bet_id
    entries = list(entries)

    if market.yes_supply + market.no_supply != market.total_supply:
        violations.append(
            f"INV-1 violated (bet_id={bet_id}): yes_supply({market.yes_supply}) + "
            f"no_supply({market.no_supply}) != total_supply({market.total_supply})"
        )
    if market.yes_reserve + market.no_reserve != market.total_reserve:
        violations.append(
            f"INV-1 violated (bet_id={bet_id}): yes_reserve({market.yes_reserve}) + "
            f"no_reserve({market.no_reserve}) != total_reserve({market.total_reserve})"
        )

    deposited = sum(e.deposited_sol_amount for e in entries)
    if deposited != market.total_reserve:
        violations.append(
            f"INV-2 violated (bet_id={bet_id}): total_reserve({market.total_reserve}) "
            f"!= sum(deposited_sol_amount)={deposited}"
        )

    points = history.points if history is not None else []
    if not 1 <= len(points) <= MAX_HISTORY_POINTS:
        violations.append(
            f"INV-3 violated (bet_id={bet_id}): history has {len(points)} points"
        )
    timestamps = [p.timestamp for p in points]
    if any(a > b for a, b in zip(timestamps, timestamps[1:])):
        violations.append(f"INV-3 violated (bet_id={bet_id}): timestamps decrease")

    if market.complete != (market.winner != Outcome.UNRESOLVED):
        violations.append(
            f"INV-R violated (bet_id={bet_id}): complete={market.complete} "
            f"winner={market.winner.value!r}"
        )
    if market.complete and not market.platform_fee_claimed:
        violations.append(f"INV-R violated (bet_id={bet_id}): platform fee unsettled")
    if not market.complete:
        if market.creator_fee_claimed or market.platform_fee_claimed:
            violations.append(f"INV-R violated (bet_id={bet_id}): fee claimed before resolution")
        if any(e.is_claimed for e in entries):
            violations.append(f"INV-R violated (bet_id={bet_id}): entry claimed before resolution")

    for msg in violations:
        logger.error(msg)
    if not violations:
        logger.debug("Invariants OK: bet_id=%d reserve=%d", bet_id, market.total_reserve)
    return violations


def verify_market_transition(before: Market, after: Market) -> list[str]:
    violations: list[str] = []
    bet_id = after.bet_id

    for flag in ("creator_fee_claimed", "platform_fee_claimed", "complete"):
        if getattr(before, flag) and not getattr(after, flag):
            violations.append(f"INV-4 violated (bet_id={bet_id}): {flag} reverted")
    if before.complete:
        for name in _FROZEN_FIELDS:
            if getattr(before, name) != getattr(after, name):
                violations.append(
                    f"INV-5 violated (bet_id={bet_id}): {name} changed after resolution "
                    f"({getattr(before, name)} -> {getattr(after, name)})"
                )
        if before.winner != after.winner:
            violations.append(f"INV-5 violated (bet_id={bet_id}): winner changed")

    for msg in violations:
        logger.error(msg)
    return violations


def verify_entry_transition(before: Entry, after: Entry) -> list[str]:
    if before.is_claimed and not after.is_claimed:
        msg = f"INV-4 violated (bet_id={after.bet_id}): is_claimed reverted for {after.user}"
        logger.error(msg)
        return [msg]
    return []


def outstanding_liability(
    market: Market, entries: Iterable[Entry], creator_fee_bps: int, platform_fee_bps: int
) -> int:
    """Lamports the vault still owes for one market.

    An open market owes its whole reserve. A resolved market owes the payout of
    every unclaimed winning entry plus the creator fee if it is unclaimed.
    """
    if not market.complete:
        return market.total_reserve
    owed = 0 if market.creator_fee_claimed else creator_fee_for(market, creator_fee_bps)
    for entry in entries:
        if entry.is_claimed or entry.token_balance == 0:
            continue
        if Outcome.from_is_yes(entry.is_yes) != market.winner:
            continue
        try:
            owed += calculate_payout(market, entry, creator_fee_bps, platform_fee_bps).payout
        except AppError:
            # An unpayable entry is not a liability
            continue
    return owed


def verify_vault_solvency(vault_balance: int, rent: int, liabilities: int) -> list[str]:
    if vault_balance < rent + liabilities:
        msg = (
            f"INV-V violated: vault_balance({vault_balance}) < rent({rent}) + "
            f"outstanding({liabilities}) = {rent + liabilities}"
        )
        logger.error(msg)
        return [msg]
    return []
