"""Tests for stress scenario definitions."""

import pytest

from src.errors import InvalidInputError
from src.stress.scenarios import (
    OracleLagScenario,
    PriceJumpScenario,
    RatesShiftScenario,
    scenario_from_dict,
)


class TestLabels:
    def test_price_jump_label(self) -> None:
        scenario = PriceJumpScenario(asset="WETH", shock_pct=-0.15, at_day=1)
        assert scenario.label == "price_jump:WETH:-0.15:1"

    def test_rates_shift_label(self) -> None:
        assert RatesShiftScenario(borrow_apr_delta_bps=300).label == "rates_shift:300"

    def test_integral_float_drops_decimal(self) -> None:
        assert RatesShiftScenario(borrow_apr_delta_bps=300.0).label == "rates_shift:300"
        assert PriceJumpScenario(asset="WETH", shock_pct=-1.0, at_day=0).label == "price_jump:WETH:-1:0"

    def test_oracle_lag_label(self) -> None:
        assert OracleLagScenario(lag_seconds=3600).label == "oracle_lag:3600"

    def test_label_depends_only_on_fields(self) -> None:
        a = PriceJumpScenario(asset="WETH", shock_pct=-0.2, at_day=3)
        b = PriceJumpScenario(asset="WETH", shock_pct=-0.2, at_day=3)
        assert a.label == b.label


class TestScenarioFromDict:
    def test_price_jump(self) -> None:
        scenario = scenario_from_dict(
            {"type": "price_jump", "asset": "WETH", "shock_pct": -0.3, "at_day": 2}
        )
        assert scenario == PriceJumpScenario(asset="WETH", shock_pct=-0.3, at_day=2)

    def test_rates_shift(self) -> None:
        scenario = scenario_from_dict({"type": "rates_shift", "borrow_apr_delta_bps": 150})
        assert scenario == RatesShiftScenario(borrow_apr_delta_bps=150)

    def test_oracle_lag(self) -> None:
        scenario = scenario_from_dict({"type": "oracle_lag", "lag_seconds": 900})
        assert scenario == OracleLagScenario(lag_seconds=900)

    def test_round_trips_through_to_dict(self) -> None:
        scenario = PriceJumpScenario(asset="WETH", shock_pct=-0.1, at_day=5)
        assert scenario_from_dict(scenario.to_dict()) == scenario

    def test_unknown_type(self) -> None:
        with pytest.raises(InvalidInputError, match="unknown scenario type"):
            scenario_from_dict({"type": "depeg"})

    def test_missing_field(self) -> None:
        with pytest.raises(InvalidInputError, match="shock_pct"):
            scenario_from_dict({"type": "price_jump", "asset": "WETH", "at_day": 1})
