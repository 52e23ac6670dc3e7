"""Pre- and post-simulation risk checks.

Both checks are pure and collect every violated rule instead of stopping
at the first one.  The pre-check gates the run; the post-check only flags
the finished result as inadvisable to execute.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from src.data.constants import DEFAULT_MAX_LOOPS, MAX_HORIZON_DAYS
from src.data.interfaces import MarketParams
from src.simulation.params import SimulationInput


@dataclass(frozen=True)
class RiskCheckResult:
    ok: bool
    reasons: list[str] = field(default_factory=list)


def pre_simulation_check(
    sim_input: SimulationInput,
    market: MarketParams,
    max_loops: int = DEFAULT_MAX_LOOPS,
    max_horizon_days: int = MAX_HORIZON_DAYS,
) -> RiskCheckResult:
    """Check the request against market and policy limits before running.

    Args:
        sim_input: Request to check.
        market: Resolved market parameters.
        max_loops: Policy cap on ``loop_count``.
        max_horizon_days: Policy cap on ``horizon_days``.

    Returns:
        RiskCheckResult; ``reasons`` is empty iff ``ok``.
    """
    reasons: list[str] = []

    if sim_input.target_ltv <= 0:
        reasons.append("target_ltv must be positive")

    if sim_input.target_ltv >= market.lltv:
        reasons.append(f"target_ltv {sim_input.target_ltv} violates market LLTV {market.lltv}")

    loops = sim_input.loop_count
    if isinstance(loops, bool) or not isinstance(loops, int) or loops <= 0:
        reasons.append("loops must be a positive integer")
    elif loops > max_loops:
        reasons.append(f"loops {loops} exceeds policy maximum {max_loops}")

    if sim_input.horizon_days > max_horizon_days:
        reasons.append(
            f"horizon_days {sim_input.horizon_days} exceeds policy maximum {max_horizon_days}"
        )

    return RiskCheckResult(ok=not reasons, reasons=reasons)


def post_simulation_check(
    health_factor: float,
    gross_leverage: float,
    min_health_factor: float | None = None,
    max_leverage: float | None = None,
) -> RiskCheckResult:
    """Flag a finished run whose HF or leverage breaches the caller's limits."""
    reasons: list[str] = []

    if min_health_factor is not None and health_factor < min_health_factor:
        reasons.append(
            f"final health factor {health_factor:.4f} is below minimum {min_health_factor}"
        )

    if max_leverage is not None and gross_leverage > max_leverage:
        reasons.append(f"gross leverage {gross_leverage:.4f} exceeds maximum {max_leverage}")

    return RiskCheckResult(ok=not reasons, reasons=reasons)
