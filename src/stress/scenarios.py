"""Stress scenario definitions.

Each scenario is evaluated independently against the post-loop position.
Labels are ``"<type>:<param1>:<param2>..."`` and depend only on the
scenario's own fields.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from src.errors import InvalidInputError

PRICE_JUMP = "price_jump"
RATES_SHIFT = "rates_shift"
ORACLE_LAG = "oracle_lag"


def _format_param(value: Any) -> str:
    """Render a label parameter; integral floats drop the trailing ``.0``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _label(kind: str, *params: Any) -> str:
    return ":".join([kind, *(_format_param(p) for p in params)])


@dataclass(frozen=True)
class PriceJumpScenario:
    """Collateral price multiplied by ``1 + shock_pct`` from ``at_day`` on.

    Attributes:
        asset: Asset symbol the shock is attributed to.
        shock_pct: Fractional price change (e.g. -0.15 = -15%).
        at_day: First day index the shock applies to.
    """

    asset: str
    shock_pct: float
    at_day: int

    @property
    def label(self) -> str:
        return _label(PRICE_JUMP, self.asset, self.shock_pct, self.at_day)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": PRICE_JUMP,
            "asset": self.asset,
            "shock_pct": self.shock_pct,
            "at_day": self.at_day,
        }


@dataclass(frozen=True)
class RatesShiftScenario:
    """Borrow APR raised (or lowered) by ``borrow_apr_delta_bps``."""

    borrow_apr_delta_bps: float

    @property
    def label(self) -> str:
        return _label(RATES_SHIFT, self.borrow_apr_delta_bps)

    def to_dict(self) -> dict[str, Any]:
        return {"type": RATES_SHIFT, "borrow_apr_delta_bps": self.borrow_apr_delta_bps}


@dataclass(frozen=True)
class OracleLagScenario:
    """Collateral oracle held stale for ``lag_seconds`` between updates."""

    lag_seconds: int

    @property
    def label(self) -> str:
        return _label(ORACLE_LAG, self.lag_seconds)

    def to_dict(self) -> dict[str, Any]:
        return {"type": ORACLE_LAG, "lag_seconds": self.lag_seconds}


ScenarioSpec = Union[PriceJumpScenario, RatesShiftScenario, OracleLagScenario]


def scenario_from_dict(payload: dict[str, Any]) -> ScenarioSpec:
    """Build a scenario from its wire form (``{"type": ..., ...}``)."""
    kind = payload.get("type")
    try:
        if kind == PRICE_JUMP:
            return PriceJumpScenario(
                asset=str(payload["asset"]),
                shock_pct=float(payload["shock_pct"]),
                at_day=int(payload["at_day"]),
            )
        if kind == RATES_SHIFT:
            return RatesShiftScenario(borrow_apr_delta_bps=payload["borrow_apr_delta_bps"])
        if kind == ORACLE_LAG:
            return OracleLagScenario(lag_seconds=payload["lag_seconds"])
    except KeyError as exc:
        raise InvalidInputError(f"scenario {kind!r} is missing field {exc.args[0]!r}") from exc
    raise InvalidInputError(f"unknown scenario type: {kind!r}")
