"""Tests for pm_market.domain.pricing — virtual-reserve pricing."""

import pytest

from src.pm_common.errors import MathOverflowError
from src.pm_common.lamports import U64_MAX
from src.pm_market.domain.pricing import (
    SCALE,
    VIRTUAL_RESERVE,
    calculate_token_amount,
    current_prices,
    quote_deposit,
)


class TestCurrentPrices:
    def test_empty_market_is_even(self) -> None:
        assert current_prices(0, 0) == (500_000_000, 500_000_000)

    def test_prices_sum_to_scale_up_to_truncation(self) -> None:
        yes, no = current_prices(3_000_000_000, 1_234_567)
        assert SCALE - 1 <= yes + no <= SCALE

    def test_favored_side_is_pricier(self) -> None:
        yes, no = current_prices(5_000_000_000, 0)
        assert yes > no

    def test_virtual_reserve_is_one_sol(self) -> None:
        assert VIRTUAL_RESERVE == 1_000_000_000


class TestCalculateTokenAmount:
    def test_first_deposit_mints_two_tokens_per_lamport(self) -> None:
        assert calculate_token_amount(1_000_000_000, True, 0, 0) == 2_000_000_000

    def test_one_lamport_on_empty_market(self) -> None:
        assert calculate_token_amount(1, True, 0, 0) == 2

    def test_second_side_after_one_lamport(self) -> None:
        # price_no = 1e18 // (2e9 + 1) = 499_999_999
        assert calculate_token_amount(1, False, 1, 0) == 2

    def test_favored_side_mints_fewer_tokens(self) -> None:
        favored = calculate_token_amount(1_000_000_000, True, 2_000_000_000, 0)
        contrarian = calculate_token_amount(1_000_000_000, False, 2_000_000_000, 0)
        assert favored < contrarian

    def test_symmetric_reserves_mint_equally(self) -> None:
        yes = calculate_token_amount(777, True, 5_000, 5_000)
        no = calculate_token_amount(777, False, 5_000, 5_000)
        assert yes == no

    def test_deterministic(self) -> None:
        args = (123_456_789, False, 987_654_321, 42)
        assert calculate_token_amount(*args) == calculate_token_amount(*args)


class TestQuoteDeposit:
    def test_quote_carries_prices(self) -> None:
        q = quote_deposit(1_000_000_000, True, 1_000_000_000, 0)
        # v_yes = 2e9, v_no = 1e9
        assert q.yes_price == 666_666_666
        assert q.no_price == 333_333_333
        assert q.token_amount == 1_000_000_000 * SCALE // 666_666_666

    def test_token_amount_above_u64_overflows(self) -> None:
        # A cheap side and a huge deposit: tokens exceed u64
        with pytest.raises(MathOverflowError):
            quote_deposit(U64_MAX, False, 10**15, 0)

    def test_zero_price_overflows(self) -> None:
        # The other side is so large that the selected price truncates to zero
        with pytest.raises(MathOverflowError):
            quote_deposit(1, False, U64_MAX, 0)
