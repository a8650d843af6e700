"""Tests for pm_common.errors and pm_common.response."""

import pytest

from src.pm_common.enums import BettingErrorCode
from src.pm_common.errors import (
    AlreadyClaimedError,
    AlreadyInitializedError,
    AppError,
    BetCompleteError,
    BetEndedError,
    BetNotCompleteError,
    BetNotEndedError,
    BettingError,
    DescriptionEmptyError,
    DescriptionTooLongError,
    EntryNotFoundError,
    InsufficientBalanceError,
    InvalidBetError,
    InvalidFeeConfigurationError,
    MarketNotFoundError,
    MathOverflowError,
    TitleEmptyError,
    TitleTooLongError,
    UnauthorizedError,
    UninitializedError,
    WrongBetError,
)
from src.pm_common.response import ApiResponse, error_response, success_response


class TestAppError:
    def test_base_error(self) -> None:
        err = AppError(code=9002, message="Internal error")
        assert err.code == 9002
        assert err.message == "Internal error"
        assert err.http_status == 500

    def test_is_exception(self) -> None:
        assert isinstance(AppError(code=1, message="x"), Exception)


class TestBettingErrors:
    @pytest.mark.parametrize(
        ("error_cls", "code"),
        [
            (UninitializedError, 6000),
            (AlreadyInitializedError, 6001),
            (UnauthorizedError, 6002),
            (BetEndedError, 6003),
            (InvalidBetError, 6004),
            (BetCompleteError, 6005),
            (BetNotEndedError, 6006),
            (AlreadyClaimedError, 6007),
            (BetNotCompleteError, 6008),
            (WrongBetError, 6009),
            (TitleTooLongError, 6010),
            (DescriptionTooLongError, 6011),
            (TitleEmptyError, 6012),
            (DescriptionEmptyError, 6013),
            (MathOverflowError, 6014),
        ],
    )
    def test_stable_codes(self, error_cls: type[BettingError], code: int) -> None:
        err = error_cls()
        assert err.code == code
        assert isinstance(err, BettingError)

    def test_fee_configuration_appended_after_overflow(self) -> None:
        err = InvalidFeeConfigurationError(6000, 4000)
        assert err.code == BettingErrorCode.INVALID_FEE_CONFIGURATION == 6015
        assert "6000" in err.message

    def test_http_statuses(self) -> None:
        assert UnauthorizedError().http_status == 403
        assert AlreadyClaimedError().http_status == 409
        assert InvalidBetError().http_status == 422


class TestHostErrors:
    def test_insufficient_balance(self) -> None:
        err = InsufficientBalanceError("alice", 10, 3)
        assert err.code == 2001
        assert "alice" in err.message

    def test_lookups_are_404(self) -> None:
        assert MarketNotFoundError(7).http_status == 404
        assert EntryNotFoundError(7, "bob").code == 3003


class TestApiResponse:
    def test_success(self) -> None:
        resp = success_response({"bet_id": 1})
        assert resp.code == 0
        assert resp.data == {"bet_id": 1}
        assert resp.request_id.startswith("req_")

    def test_error(self) -> None:
        resp = error_response(6004, "Invalid bet")
        assert isinstance(resp, ApiResponse)
        assert resp.code == 6004
        assert resp.data is None
