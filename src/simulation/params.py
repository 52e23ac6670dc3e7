"""Input parameters for a looping simulation run."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from src.data.constants import CHAIN_BASE, DEFAULT_HORIZON_DAYS, PROTOCOL_MORPHO_BLUE
from src.data.interfaces import TokenSpec
from src.errors import InvalidInputError
from src.stress.scenarios import ScenarioSpec, scenario_from_dict


@dataclass(frozen=True)
class SwapModelSpec:
    """Explicit constant-product pool used instead of external quotes.

    Attributes:
        fee_bps: Swap fee in basis points.
        base_reserve: Collateral-side reserve.
        quote_reserve: Debt-side reserve.
    """

    fee_bps: float
    base_reserve: float
    quote_reserve: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "amm_xyk",
            "fee_bps": self.fee_bps,
            "pool": {"base_reserve": self.base_reserve, "quote_reserve": self.quote_reserve},
        }


@dataclass(frozen=True)
class OracleSpec:
    """Run-level oracle staleness window."""

    lag_seconds: int
    type: str = "chainlink"


@dataclass(frozen=True)
class RateOverrides:
    """Annualised rates overriding the snapshot's (decimal fractions)."""

    supply_apr: float | None = None
    borrow_apr: float | None = None


@dataclass(frozen=True)
class RiskLimits:
    """Post-simulation policy thresholds."""

    min_hf: float | None = None
    max_leverage: float | None = None


@dataclass(frozen=True)
class SimulationInput:
    """Caller-supplied request, immutable for the duration of one run."""

    collateral: TokenSpec
    debt: TokenSpec
    start_capital: str  # exact decimal string, collateral units
    target_ltv: float  # per-loop borrow target, expressed against the market LLTV
    loop_count: int
    protocol: str = PROTOCOL_MORPHO_BLUE
    chain: str = CHAIN_BASE
    price_overrides: dict[str, float] = field(default_factory=dict)
    swap_model: SwapModelSpec | None = None
    oracle: OracleSpec | None = None
    rates: RateOverrides | None = None
    horizon_days: int = DEFAULT_HORIZON_DAYS
    scenarios: tuple[ScenarioSpec, ...] = ()
    risk_limits: RiskLimits | None = None

    @property
    def oracle_lag_seconds(self) -> int | None:
        return self.oracle.lag_seconds if self.oracle is not None else None

    def to_dict(self) -> dict[str, Any]:
        """Wire-form representation (used as the raw input in provenance)."""
        payload: dict[str, Any] = {
            "protocol": self.protocol,
            "chain": self.chain,
            "collateral": self.collateral.to_dict(),
            "debt": self.debt.to_dict(),
            "start_capital": self.start_capital,
            "target_ltv": self.target_ltv,
            "loops": self.loop_count,
            "horizon_days": self.horizon_days,
        }
        if self.price_overrides:
            payload["price"] = dict(self.price_overrides)
        if self.swap_model is not None:
            payload["swap_model"] = self.swap_model.to_dict()
        if self.oracle is not None:
            payload["oracle"] = {"type": self.oracle.type, "lag_seconds": self.oracle.lag_seconds}
        if self.rates is not None:
            payload["rates"] = {
                key: value
                for key, value in (
                    ("supply_apr", self.rates.supply_apr),
                    ("borrow_apr", self.rates.borrow_apr),
                )
                if value is not None
            }
        if self.scenarios:
            payload["scenarios"] = [s.to_dict() for s in self.scenarios]
        if self.risk_limits is not None:
            payload["risk_limits"] = {
                key: value
                for key, value in (
                    ("min_hf", self.risk_limits.min_hf),
                    ("max_leverage", self.risk_limits.max_leverage),
                )
                if value is not None
            }
        return payload

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "SimulationInput":
        """Build from the wire form.  Assumes the shape was already validated."""
        try:
            swap_model = None
            if payload.get("swap_model") is not None:
                raw_model = payload["swap_model"]
                swap_model = SwapModelSpec(
                    fee_bps=raw_model["fee_bps"],
                    base_reserve=raw_model["pool"]["base_reserve"],
                    quote_reserve=raw_model["pool"]["quote_reserve"],
                )

            oracle = None
            if payload.get("oracle") is not None:
                oracle = OracleSpec(
                    lag_seconds=payload["oracle"]["lag_seconds"],
                    type=payload["oracle"].get("type", "chainlink"),
                )

            rates = None
            if payload.get("rates") is not None:
                rates = RateOverrides(
                    supply_apr=payload["rates"].get("supply_apr"),
                    borrow_apr=payload["rates"].get("borrow_apr"),
                )

            risk_limits = None
            if payload.get("risk_limits") is not None:
                risk_limits = RiskLimits(
                    min_hf=payload["risk_limits"].get("min_hf"),
                    max_leverage=payload["risk_limits"].get("max_leverage"),
                )

            return cls(
                collateral=TokenSpec.from_dict(payload["collateral"]),
                debt=TokenSpec.from_dict(payload["debt"]),
                start_capital=str(payload["start_capital"]),
                target_ltv=payload["target_ltv"],
                loop_count=payload["loops"],
                protocol=payload.get("protocol", PROTOCOL_MORPHO_BLUE),
                chain=payload.get("chain", CHAIN_BASE),
                price_overrides=dict(payload.get("price") or {}),
                swap_model=swap_model,
                oracle=oracle,
                rates=rates,
                horizon_days=payload.get("horizon_days", DEFAULT_HORIZON_DAYS),
                scenarios=tuple(scenario_from_dict(s) for s in payload.get("scenarios") or ()),
                risk_limits=risk_limits,
            )
        except KeyError as exc:
            raise InvalidInputError(f"missing required field {exc.args[0]!r}") from exc
