"""Tests for the liquidation model."""

from decimal import Decimal

import pytest

from src.protocol.liquidation import LiquidationModel


@pytest.fixture
def model() -> LiquidationModel:
    return LiquidationModel(0.86)


class TestHealthFactor:
    def test_healthy_position(self, model: LiquidationModel) -> None:
        hf = model.health_factor(Decimal(100), Decimal(50))
        assert hf == pytest.approx(100 * 0.86 / 50)
        assert hf > 1.0

    def test_exact_liquidation(self, model: LiquidationModel) -> None:
        assert model.health_factor(Decimal(100), Decimal(86)) == pytest.approx(1.0)

    def test_no_debt(self, model: LiquidationModel) -> None:
        assert model.health_factor(Decimal(100), Decimal(0)) == float("inf")


class TestLeverage:
    def test_gross_leverage(self, model: LiquidationModel) -> None:
        assert model.gross_leverage(Decimal(300), Decimal(200)) == pytest.approx(3.0)

    def test_no_debt_is_one(self, model: LiquidationModel) -> None:
        assert model.gross_leverage(Decimal(300), Decimal(0)) == pytest.approx(1.0)

    def test_no_equity_is_inf(self, model: LiquidationModel) -> None:
        assert model.gross_leverage(Decimal(100), Decimal(100)) == float("inf")
        assert model.gross_leverage(Decimal(100), Decimal(120)) == float("inf")


class TestLiquidationPrice:
    def test_price_where_hf_is_one(self, model: LiquidationModel) -> None:
        liq = model.liquidation_price(Decimal(2), Decimal(3_000))
        assert liq == pytest.approx(3_000 / (2 * 0.86))
        assert model.health_factor(Decimal(2) * Decimal(repr(liq)), Decimal(3_000)) == pytest.approx(1.0)

    def test_no_collateral_is_inf(self, model: LiquidationModel) -> None:
        assert model.liquidation_price(Decimal(0), Decimal(100)) == float("inf")

    def test_zero_lltv_is_inf(self) -> None:
        assert LiquidationModel(0).liquidation_price(Decimal(2), Decimal(100)) == float("inf")


class TestShortfall:
    def test_positive_shortfall(self, model: LiquidationModel) -> None:
        assert model.shortfall(Decimal(100), Decimal(90)) == Decimal(90) - Decimal(86)

    def test_no_shortfall_when_covered(self, model: LiquidationModel) -> None:
        assert model.shortfall(Decimal(100), Decimal(86)) is None
        assert model.shortfall(Decimal(100), Decimal(50)) is None


class TestPriceSensitivity:
    def test_columns_and_length(self, model: LiquidationModel) -> None:
        df = model.price_sensitivity(Decimal(2), Decimal(3_000), (1_000.0, 4_000.0), n_points=50)
        assert list(df.columns) == ["collateral_price", "health_factor"]
        assert len(df) == 50

    def test_hf_increases_with_price(self, model: LiquidationModel) -> None:
        df = model.price_sensitivity(Decimal(2), Decimal(3_000), (1_000.0, 4_000.0))
        assert df["health_factor"].is_monotonic_increasing
        assert df["health_factor"].iloc[0] < 1.0 < df["health_factor"].iloc[-1]
