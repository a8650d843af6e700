"""Tests for pm_market.domain.invariants."""

import dataclasses

from src.pm_market.domain.invariants import (
    outstanding_liability,
    verify_entry_transition,
    verify_market_invariants,
    verify_market_transition,
    verify_vault_solvency,
)
from src.pm_common.enums import Outcome
from src.pm_market.domain.models import Entry, History, Market, ProbabilityPoint


def _market(**overrides) -> Market:
    m = Market(
        address="pool",
        creator="creator",
        bet_id=0,
        referee="referee",
        title="t",
        description="d",
        share_uuid="0-0-0",
        created_timestamp=100,
        end_timestamp=-1,
        initial_price=1,
        scale_factor=1,
    )
    m.apply_deposit(True, 10, 20)
    m.apply_deposit(False, 5, 15)
    return dataclasses.replace(m, **overrides)


def _entries() -> list[Entry]:
    return [
        Entry(address="a", user="alice", bet_id=0, deposited_sol_amount=10, token_balance=20),
        Entry(
            address="b", user="bob", bet_id=0,
            deposited_sol_amount=5, token_balance=15, is_yes=False,
        ),
    ]


def _history() -> History:
    return History(
        pool="pool",
        bet_id=0,
        points=[ProbabilityPoint(100, 0, 0), ProbabilityPoint(101, 10, 0), ProbabilityPoint(101, 10, 5)],
    )


class TestMarketInvariants:
    def test_passes_when_all_ok(self) -> None:
        assert verify_market_invariants(_market(), _entries(), _history()) == []

    def test_supply_mismatch(self) -> None:
        violations = verify_market_invariants(_market(total_supply=1), _entries(), _history())
        assert any("INV-1" in v for v in violations)

    def test_reserve_not_backed_by_entries(self) -> None:
        violations = verify_market_invariants(_market(), _entries()[:1], _history())
        assert any("INV-2" in v for v in violations)

    def test_missing_history(self) -> None:
        violations = verify_market_invariants(_market(), _entries(), None)
        assert any("INV-3" in v for v in violations)

    def test_decreasing_timestamps(self) -> None:
        history = _history()
        history.points.append(ProbabilityPoint(50, 10, 5))
        violations = verify_market_invariants(_market(), _entries(), history)
        assert any("timestamps decrease" in v for v in violations)

    def test_resolution_flags_must_agree(self) -> None:
        violations = verify_market_invariants(
            _market(complete=True, winner=Outcome.YES), _entries(), _history()
        )
        assert any("platform fee unsettled" in v for v in violations)

    def test_claim_before_resolution(self) -> None:
        entries = _entries()
        entries[0].is_claimed = True
        violations = verify_market_invariants(_market(), entries, _history())
        assert any("entry claimed before resolution" in v for v in violations)


class TestTransitions:
    def test_flags_never_revert(self) -> None:
        before = _market(complete=True, winner=Outcome.YES, platform_fee_claimed=True)
        after = dataclasses.replace(before, platform_fee_claimed=False)
        assert any("INV-4" in v for v in verify_market_transition(before, after))

    def test_reserves_frozen_after_resolution(self) -> None:
        before = _market(complete=True, winner=Outcome.YES, platform_fee_claimed=True)
        after = dataclasses.replace(before, yes_reserve=before.yes_reserve + 1)
        assert any("INV-5" in v for v in verify_market_transition(before, after))

    def test_open_market_may_change(self) -> None:
        before = _market()
        after = dataclasses.replace(before, yes_reserve=99, total_reserve=104)
        assert verify_market_transition(before, after) == []

    def test_entry_claim_is_one_way(self) -> None:
        before = Entry(address="a", user="alice", bet_id=0, is_claimed=True)
        after = dataclasses.replace(before, is_claimed=False)
        assert verify_entry_transition(before, after)
        assert verify_entry_transition(after, before) == []


class TestVaultSolvency:
    def test_open_market_owes_reserve(self) -> None:
        assert outstanding_liability(_market(), _entries(), 100, 200) == 15

    def test_resolved_market_owes_unclaimed_winners(self) -> None:
        market = _market(complete=True, winner=Outcome.YES, platform_fee_claimed=True)
        # total 15, fees 0, available 5 -> alice payout 10 + 5
        assert outstanding_liability(market, _entries(), 100, 200) == 15

        entries = _entries()
        entries[0].is_claimed = True
        market.creator_fee_claimed = True
        assert outstanding_liability(market, entries, 100, 200) == 0

    def test_solvency(self) -> None:
        assert verify_vault_solvency(100, 10, 90) == []
        assert verify_vault_solvency(99, 10, 90)
