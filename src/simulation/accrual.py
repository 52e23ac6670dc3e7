"""Day-indexed projection of a looped position under interest accrual.

Collateral compounds continuously at the supply rate and debt at the
borrow rate.  The collateral price is read through the oracle lag model;
the debt price is held constant over the horizon.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from src.data.constants import SECONDS_PER_DAY
from src.protocol.decimal_math import accrue
from src.protocol.liquidation import LiquidationModel
from src.protocol.oracle import OracleLagConfig, OracleState, resolve_oracle_price
from src.simulation.results import TimeSeriesPoint


@dataclass(frozen=True)
class AccrualParams:
    """Inputs shared by the base series and the rebuilt stress series."""

    horizon_days: int
    supply_apr: float
    borrow_apr: float
    collateral_price_usd: Decimal
    debt_price_usd: Decimal
    lltv: Decimal
    oracle_lag_seconds: int | None = None


def build_time_series(
    collateral_amount: Decimal,
    debt_amount: Decimal,
    params: AccrualParams,
) -> list[TimeSeriesPoint]:
    """Project the position for ``t = 0..horizon_days`` inclusive."""
    model = LiquidationModel(params.lltv)
    config = (
        OracleLagConfig(lag_seconds=params.oracle_lag_seconds)
        if params.oracle_lag_seconds
        else None
    )
    oracle_state = OracleState(price=params.collateral_price_usd, last_update=0)

    series: list[TimeSeriesPoint] = []
    for day in range(params.horizon_days + 1):
        collateral_at_t = accrue(collateral_amount, params.supply_apr, day)
        debt_at_t = accrue(debt_amount, params.borrow_apr, day)

        oracle_price, oracle_state = resolve_oracle_price(
            spot_price=params.collateral_price_usd,
            timestamp=day * SECONDS_PER_DAY,
            state=oracle_state,
            config=config,
        )

        collateral_value = collateral_at_t * oracle_price
        debt_value = debt_at_t * params.debt_price_usd

        series.append(
            TimeSeriesPoint(
                t=day,
                collateral=collateral_at_t,
                debt=debt_at_t,
                equity=collateral_value - debt_value,
                hf=model.health_factor(collateral_value, debt_value),
            )
        )

    return series
