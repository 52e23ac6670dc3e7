"""Tests for the constant-product swap model."""

from decimal import Decimal

import pytest

from src.errors import InvalidInputError, InvalidPoolStateError
from src.protocol.amm import get_constant_product_quote


class TestConstantProductQuote:
    def test_no_fee_output(self) -> None:
        quote = get_constant_product_quote(
            amount_in=Decimal(1000),
            reserve_in=Decimal(10_000),
            reserve_out=Decimal(10_000),
            fee_bps=0,
        )
        assert quote.amount_out == Decimal(1000) * Decimal(10_000) / Decimal(11_000)
        assert quote.fee_paid == 0

    def test_fee_taken_from_input(self) -> None:
        quote = get_constant_product_quote(
            amount_in=Decimal(1000),
            reserve_in=Decimal(10_000),
            reserve_out=Decimal(10_000),
            fee_bps=30,
        )
        after_fee = Decimal(1000) * Decimal("0.997")
        assert quote.fee_paid == Decimal(1000) - after_fee
        assert quote.amount_out == after_fee * Decimal(10_000) / (Decimal(10_000) + after_fee)

    def test_output_below_reserve(self) -> None:
        quote = get_constant_product_quote(
            amount_in=Decimal(10) ** 12,
            reserve_in=Decimal(100),
            reserve_out=Decimal(100),
            fee_bps=30,
        )
        assert 0 < quote.amount_out < 100

    def test_price_impact_positive_and_grows_with_size(self) -> None:
        small = get_constant_product_quote(Decimal(10), Decimal(10_000), Decimal(10_000), 30)
        large = get_constant_product_quote(Decimal(1_000), Decimal(10_000), Decimal(10_000), 30)
        assert small.price_impact_pct > 0
        assert large.price_impact_pct > small.price_impact_pct

    def test_invariant_non_decreasing(self) -> None:
        reserve_in, reserve_out = Decimal(20_000_000), Decimal(10_000)
        amount_in = Decimal("1395.348837")
        quote = get_constant_product_quote(amount_in, reserve_in, reserve_out, 30)
        k_before = reserve_in * reserve_out
        k_after = (reserve_in + amount_in) * (reserve_out - quote.amount_out)
        assert k_after >= k_before

    def test_full_fee_returns_zero_output(self) -> None:
        quote = get_constant_product_quote(Decimal(50), Decimal(1_000), Decimal(1_000), 10_000)
        assert quote.amount_out == 0
        assert quote.fee_paid == 0
        assert quote.fee_paid == Decimal(50)
        assert quote.price_impact_pct == 0.0

    def test_zero_input(self) -> None:
        quote = get_constant_product_quote(Decimal(0), Decimal(1_000), Decimal(1_000), 30)
        assert quote.amount_out == 0
        assert quote.fee_paid == 0


class TestQuoteProperties:
    @pytest.mark.parametrize(
        "reserve_in, reserve_out",
        [
            (Decimal(1_000), Decimal(500)),
            (Decimal(20_000_000), Decimal(10_000)),
            (Decimal("0.5"), Decimal(3)),
        ],
    )
    @pytest.mark.parametrize("fee_bps", [0, 5, 30, 100, 9_999])
    def test_output_strictly_increasing_in_size(
        self, reserve_in: Decimal, reserve_out: Decimal, fee_bps: int
    ) -> None:
        sizes = [Decimal(n) for n in range(1, 5_000, 37)]
        outputs = [
            get_constant_product_quote(size, reserve_in, reserve_out, fee_bps).amount_out
            for size in sizes
        ]
        assert all(later > earlier for earlier, later in zip(outputs, outputs[1:]))

    @pytest.mark.parametrize("fee_bps", [0, 30, 9_999])
    @pytest.mark.parametrize("amount_in", [Decimal("0.001"), Decimal(37), Decimal(4_999)])
    def test_matches_closed_form(self, amount_in: Decimal, fee_bps: int) -> None:
        reserve_in, reserve_out = Decimal(1_000), Decimal(500)
        quote = get_constant_product_quote(amount_in, reserve_in, reserve_out, fee_bps)
        after_fee = amount_in * (1 - Decimal(fee_bps) / 10_000)
        assert quote.amount_out == after_fee * reserve_out / (reserve_in + after_fee)
        assert quote.fee_paid == amount_in - after_fee

    @pytest.mark.parametrize("fee_bps", [0, 30, 10_000])
    def test_repeated_calls_identical(self, fee_bps: int) -> None:
        args = (Decimal("123.456"), Decimal(1_000), Decimal(500), fee_bps)
        assert get_constant_product_quote(*args) == get_constant_product_quote(*args)


class TestInvalidPool:
    @pytest.mark.parametrize(
        "reserve_in, reserve_out",
        [(Decimal(0), Decimal(100)), (Decimal(100), Decimal(0)), (Decimal(-1), Decimal(100))],
    )
    def test_non_positive_reserves(self, reserve_in: Decimal, reserve_out: Decimal) -> None:
        with pytest.raises(InvalidPoolStateError):
            get_constant_product_quote(Decimal(1), reserve_in, reserve_out, 30)

    def test_negative_amount(self) -> None:
        with pytest.raises(InvalidPoolStateError):
            get_constant_product_quote(Decimal(-1), Decimal(100), Decimal(100), 30)

    @pytest.mark.parametrize("fee_bps", [-1, 10_001])
    def test_fee_out_of_range(self, fee_bps: int) -> None:
        with pytest.raises(InvalidPoolStateError):
            get_constant_product_quote(Decimal(1), Decimal(100), Decimal(100), fee_bps)

    def test_pool_error_is_input_error(self) -> None:
        with pytest.raises(InvalidInputError):
            get_constant_product_quote(Decimal(1), Decimal(0), Decimal(100), 30)
