"""Evaluate stress scenarios against a looped position.

Every scenario starts from the same post-loop totals; scenarios never
compose.  ``price_jump`` re-prices the already-built base series, while
``rates_shift`` and ``oracle_lag`` rebuild an alternate series from the
post-loop totals (the leverage-acquisition phase is not re-simulated).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Iterable

from src.data.constants import BPS_DENOMINATOR
from src.errors import InvalidInputError
from src.protocol.decimal_math import ONE, to_decimal
from src.protocol.liquidation import LiquidationModel
from src.simulation.accrual import AccrualParams, build_time_series
from src.simulation.results import StressOutcome, TimeSeriesPoint
from src.stress.scenarios import (
    OracleLagScenario,
    PriceJumpScenario,
    RatesShiftScenario,
    ScenarioSpec,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeriesRisk:
    """Worst point of a series."""

    min_hf: float
    liquidated: bool
    liq_loss_usd: Decimal | None = None


def min_health_factor(values: Iterable[float]) -> float:
    """Plain minimum over finite and infinite HFs; inf for an all-inf series."""
    return min(values, default=float("inf"))


def _scan(points: Iterable[tuple[float, Decimal, Decimal]], model: LiquidationModel) -> SeriesRisk:
    """Track the minimum HF and the shortfall at that minimum.

    ``points`` yields ``(hf, collateral_value_usd, debt_value_usd)``.  Ties
    keep the earliest point.
    """
    min_hf = float("inf")
    liq_loss: Decimal | None = None
    for hf, collateral_value, debt_value in points:
        if hf < min_hf:
            min_hf = hf
            if hf < 1:
                liq_loss = model.shortfall(collateral_value, debt_value)
    return SeriesRisk(min_hf=min_hf, liquidated=min_hf < 1, liq_loss_usd=liq_loss)


def evaluate_series(
    series: list[TimeSeriesPoint],
    params: AccrualParams,
) -> SeriesRisk:
    """Minimum HF and liquidation outcome of an already-built series."""
    model = LiquidationModel(params.lltv)
    return _scan(
        (
            (
                point.hf,
                point.collateral * params.collateral_price_usd,
                point.debt * params.debt_price_usd,
            )
            for point in series
        ),
        model,
    )


def run_price_jump(
    base_series: list[TimeSeriesPoint],
    scenario: PriceJumpScenario,
    params: AccrualParams,
) -> SeriesRisk:
    """Re-price the base series with the collateral shock from ``at_day`` on.

    Interest is not recomputed; only the collateral price input changes.
    """
    model = LiquidationModel(params.lltv)
    shocked_multiplier = ONE + to_decimal(scenario.shock_pct, "shock_pct")

    def _points():
        for point in base_series:
            multiplier = shocked_multiplier if point.t >= scenario.at_day else ONE
            collateral_value = point.collateral * params.collateral_price_usd * multiplier
            debt_value = point.debt * params.debt_price_usd
            yield model.health_factor(collateral_value, debt_value), collateral_value, debt_value

    return _scan(_points(), model)


def evaluate_scenario(
    scenario: ScenarioSpec,
    base_series: list[TimeSeriesPoint],
    collateral_amount: Decimal,
    debt_amount: Decimal,
    params: AccrualParams,
) -> StressOutcome:
    """Apply one scenario to the post-loop position.

    Args:
        scenario: Scenario to apply.
        base_series: Unstressed series built from the same totals.
        collateral_amount: Post-loop collateral.
        debt_amount: Post-loop debt.
        params: Base accrual parameters of the run.
    """
    if isinstance(scenario, PriceJumpScenario):
        risk = run_price_jump(base_series, scenario, params)
    elif isinstance(scenario, RatesShiftScenario):
        delta = float(scenario.borrow_apr_delta_bps) / BPS_DENOMINATOR
        shifted = replace(params, borrow_apr=params.borrow_apr + delta)
        risk = evaluate_series(build_time_series(collateral_amount, debt_amount, shifted), shifted)
    elif isinstance(scenario, OracleLagScenario):
        # Replaces, not adds to, any run-level lag
        lagged = replace(params, oracle_lag_seconds=scenario.lag_seconds)
        risk = evaluate_series(build_time_series(collateral_amount, debt_amount, lagged), lagged)
    else:
        raise InvalidInputError(f"unsupported scenario: {scenario!r}")

    logger.debug("Scenario %s: min_hf=%s liquidated=%s", scenario.label, risk.min_hf, risk.liquidated)
    return StressOutcome(
        scenario=scenario.label,
        min_hf=risk.min_hf,
        liquidated=risk.liquidated,
        liq_loss_usd=risk.liq_loss_usd,
    )


def evaluate_scenarios(
    scenarios: Iterable[ScenarioSpec],
    base_series: list[TimeSeriesPoint],
    collateral_amount: Decimal,
    debt_amount: Decimal,
    params: AccrualParams,
) -> list[StressOutcome]:
    """Evaluate scenarios independently, preserving their order."""
    return [
        evaluate_scenario(s, base_series, collateral_amount, debt_amount, params)
        for s in scenarios
    ]
