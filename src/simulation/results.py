"""Result dataclasses for simulation outputs."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

import pandas as pd

from src.data.interfaces import MarketParams
from src.protocol.decimal_math import to_output_float


def _finite_or_none(value: float) -> float | None:
    """JSON has no infinity; unbounded ratios serialise as null."""
    return value if math.isfinite(value) else None


@dataclass(frozen=True)
class TimeSeriesPoint:
    """Position state on day ``t`` of the horizon.

    Attributes:
        t: Day index, 0..horizon_days inclusive.
        collateral: Collateral token amount after supply-rate accrual.
        debt: Debt token amount after borrow-rate accrual.
        equity: Collateral value minus debt value, in USD.
        hf: Health factor (inf when there is no debt).
    """

    t: int
    collateral: Decimal
    debt: Decimal
    equity: Decimal
    hf: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "t": self.t,
            "collateral": to_output_float(self.collateral),
            "debt": to_output_float(self.debt),
            "equity": to_output_float(self.equity),
            "hf": _finite_or_none(self.hf),
        }


@dataclass(frozen=True)
class StressOutcome:
    """Outcome of one stress scenario over the horizon."""

    scenario: str
    min_hf: float
    liquidated: bool
    liq_loss_usd: Decimal | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "scenario": self.scenario,
            "min_hf": _finite_or_none(self.min_hf),
            "liquidated": self.liquidated,
        }
        if self.liq_loss_usd is not None:
            payload["liq_loss_usd"] = to_output_float(self.liq_loss_usd)
        return payload


@dataclass(frozen=True)
class BorrowLeg:
    asset: str
    amount: Decimal


@dataclass(frozen=True)
class SwapLeg:
    from_asset: str
    to_asset: str
    amount_in: Decimal
    amount_out: Decimal
    route: Any = None


@dataclass(frozen=True)
class SupplyLeg:
    asset: str
    amount: Decimal


@dataclass(frozen=True)
class ActionStep:
    """One executed loop: borrow, swap back into collateral, supply."""

    borrow: BorrowLeg
    swap: SwapLeg
    supply: SupplyLeg

    def to_dict(self) -> dict[str, Any]:
        swap: dict[str, Any] = {
            "from": self.swap.from_asset,
            "to": self.swap.to_asset,
            "amount_in": to_output_float(self.swap.amount_in),
            "amount_out": to_output_float(self.swap.amount_out),
        }
        if self.swap.route is not None:
            swap["route"] = self.swap.route
        return {
            "borrow": {"asset": self.borrow.asset, "amount": to_output_float(self.borrow.amount)},
            "swap": swap,
            "supply": {"asset": self.supply.asset, "amount": to_output_float(self.supply.amount)},
        }


@dataclass(frozen=True)
class Summary:
    """Headline metrics of the looped position."""

    loops_done: int
    gross_leverage: float
    net_apr: float
    hf_now: float
    liq_price: dict[str, float]
    slip_cost_usd: Decimal  # cumulative slippage + swap fees

    def to_dict(self) -> dict[str, Any]:
        return {
            "loops_done": self.loops_done,
            "gross_leverage": _finite_or_none(self.gross_leverage),
            "net_apr": self.net_apr,
            "hf_now": _finite_or_none(self.hf_now),
            "liq_price": {k: _finite_or_none(v) for k, v in self.liq_price.items()},
            "slip_cost_usd": to_output_float(self.slip_cost_usd),
        }


@dataclass(frozen=True)
class Receipt:
    """Payment metadata (filled by the transport layer) and content hash."""

    payment: Any = None
    provenance_hash: str = ""


@dataclass(frozen=True)
class SimulationResult:
    """Complete output of one simulation run.

    ``can_execute`` and ``risk_reasons`` are set by the post-simulation
    risk check; a flagged result is still complete.
    """

    summary: Summary
    time_series: list[TimeSeriesPoint]
    stress: list[StressOutcome]
    action_plan: list[ActionStep]
    protocol_params_used: MarketParams
    receipt: Receipt = field(default_factory=Receipt)
    can_execute: bool | None = None
    risk_reasons: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "summary": self.summary.to_dict(),
            "time_series": [p.to_dict() for p in self.time_series],
            "stress": [s.to_dict() for s in self.stress],
            "action_plan": [step.to_dict() for step in self.action_plan],
            "protocol_params_used": self.protocol_params_used.to_dict(),
            "receipt": {
                "payment": self.receipt.payment,
                "provenance_hash": self.receipt.provenance_hash,
            },
        }
        if self.can_execute is not None:
            payload["can_execute"] = self.can_execute
        if self.risk_reasons:
            payload["reason"] = "; ".join(self.risk_reasons)
        return payload

    def time_series_frame(self) -> pd.DataFrame:
        """Time series as a DataFrame with columns: t, collateral, debt, equity, hf."""
        return pd.DataFrame(
            {
                "t": [p.t for p in self.time_series],
                "collateral": [float(p.collateral) for p in self.time_series],
                "debt": [float(p.debt) for p in self.time_series],
                "equity": [float(p.equity) for p in self.time_series],
                "hf": [p.hf for p in self.time_series],
            }
        )


@dataclass(frozen=True)
class SimulationArtifacts:
    """Result plus the provenance payload its hash was computed over."""

    result: SimulationResult
    provenance: dict[str, Any]
