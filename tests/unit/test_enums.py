"""Tests for pm_common.enums."""

from src.pm_common.enums import BettingErrorCode, EventType, LedgerEntryType, Outcome


class TestOutcome:
    def test_wire_values(self) -> None:
        assert Outcome.UNRESOLVED.value == ""
        assert Outcome.YES.value == "yes"
        assert Outcome.NO.value == "no"

    def test_from_is_yes(self) -> None:
        assert Outcome.from_is_yes(True) is Outcome.YES
        assert Outcome.from_is_yes(False) is Outcome.NO

    def test_parses_stored_value(self) -> None:
        assert Outcome("") is Outcome.UNRESOLVED


class TestBettingErrorCode:
    def test_contiguous_from_6000(self) -> None:
        codes = [int(c) for c in BettingErrorCode]
        assert codes == list(range(6000, 6016))


class TestLedgerEntryType:
    def test_vault_flows_are_paired(self) -> None:
        names = {t.value for t in LedgerEntryType}
        for debit, credit in [
            ("VAULT_RENT", "VAULT_RENT_IN"),
            ("BET_DEPOSIT", "BET_DEPOSIT_IN"),
            ("PLATFORM_FEE_OUT", "PLATFORM_FEE"),
            ("WINNER_PAYOUT_OUT", "WINNER_PAYOUT"),
            ("CREATOR_FEE_OUT", "CREATOR_FEE"),
        ]:
            assert debit in names and credit in names


class TestEventType:
    def test_names(self) -> None:
        assert EventType.DEPOSIT.value == "DepositEvent"
