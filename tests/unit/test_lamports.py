"""Tests for pm_common.lamports."""

import pytest

from src.pm_common.errors import MathOverflowError
from src.pm_common.lamports import (
    U64_MAX,
    bps_share,
    checked_add,
    checked_u64,
    lamports_to_display,
    saturate_u64,
    saturating_sub,
)


class TestChecked:
    def test_in_range(self) -> None:
        assert checked_u64(0) == 0
        assert checked_u64(U64_MAX) == U64_MAX

    def test_out_of_range(self) -> None:
        with pytest.raises(MathOverflowError):
            checked_u64(U64_MAX + 1)
        with pytest.raises(MathOverflowError):
            checked_u64(-1)

    def test_checked_add(self) -> None:
        assert checked_add(2, 3) == 5
        with pytest.raises(MathOverflowError):
            checked_add(U64_MAX, 1)


class TestSaturating:
    def test_saturating_sub_clamps_at_zero(self) -> None:
        assert saturating_sub(5, 3) == 2
        assert saturating_sub(3, 5) == 0

    def test_saturate_u64(self) -> None:
        assert saturate_u64(-4) == 0
        assert saturate_u64(U64_MAX * 2) == U64_MAX


class TestBpsShare:
    def test_floor(self) -> None:
        assert bps_share(2, 200) == 0
        assert bps_share(15_000_000_000, 200) == 300_000_000
        assert bps_share(9_999, 1) == 0

    def test_zero_inputs(self) -> None:
        assert bps_share(0, 200) == 0
        assert bps_share(100, 0) == 0


class TestDisplay:
    def test_whole_and_fraction(self) -> None:
        assert lamports_to_display(1_500_000_000) == "1.500000000 SOL"
        assert lamports_to_display(0) == "0.000000000 SOL"
        assert lamports_to_display(1) == "0.000000001 SOL"

    def test_thousands_separator(self) -> None:
        assert lamports_to_display(1_234 * 1_000_000_000) == "1,234.000000000 SOL"
