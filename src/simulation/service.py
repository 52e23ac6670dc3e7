"""Simulation service: resolve market, gate, run the engine, flag the result."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable

from src.data.interfaces import MarketSnapshot, MarketSnapshotProvider, TokenSpec
from src.data.static_params import StaticSnapshotProvider
from src.errors import InvalidInputError, PolicyViolationError
from src.position.provider_factory import create_swap_provider
from src.position.swap_providers import QuoteFetcher
from src.risk.checks import post_simulation_check, pre_simulation_check
from src.risk.policy import RiskPolicy
from src.simulation.looping import resolve_price, simulate_looping
from src.simulation.params import SimulationInput
from src.simulation.results import SimulationArtifacts

logger = logging.getLogger(__name__)


def merge_prices(default_prices: dict[str, float], overrides: dict[str, float]) -> dict[str, float]:
    """Snapshot prices overlaid with caller overrides; keys upper-cased."""
    merged = {key.upper(): value for key, value in default_prices.items()}
    merged.update({key.upper(): value for key, value in overrides.items()})
    return merged


def _check_decimals(requested: TokenSpec, resolved: TokenSpec | None, leg: str) -> None:
    if resolved is not None and requested.decimals != resolved.decimals:
        logger.warning(
            "%s decimals mismatch: expected %d, got %d", leg, resolved.decimals, requested.decimals
        )
        raise InvalidInputError(
            f"{leg} decimals mismatch: expected {resolved.decimals}, got {requested.decimals}"
        )


async def run_simulation(
    sim_input: SimulationInput,
    snapshot_provider: MarketSnapshotProvider | None = None,
    quote_fetcher: QuoteFetcher | None = None,
    policy: RiskPolicy | None = None,
    clock: Callable[[], int] | None = None,
) -> SimulationArtifacts:
    """Run one looping simulation end to end.

    Args:
        sim_input: Structurally validated request.
        snapshot_provider: Market resolver; the static fixture by default.
        quote_fetcher: External quote source, required when the request has
            no ``swap_model``.
        policy: Request limits; ``RiskPolicy.from_env()`` by default.
        clock: Provenance timestamp source (Unix milliseconds).

    Returns:
        SimulationArtifacts whose result carries ``can_execute`` and, when
        flagged, the post-check reasons.

    Raises:
        MarketNotFoundError: if the market cannot be resolved.
        PolicyViolationError: if the pre-simulation check fails.
        InvalidInputError: on semantic input errors.
        SwapQuoteError: if the swap provider fails mid-run.
    """
    snapshot_provider = snapshot_provider or StaticSnapshotProvider()
    policy = policy or RiskPolicy.from_env()

    snapshot: MarketSnapshot = snapshot_provider.get_snapshot(
        sim_input.protocol, sim_input.chain, sim_input.collateral, sim_input.debt
    )
    logger.debug(
        "Resolved market %s (source=%s, rates=%s)",
        snapshot.market.market_id,
        snapshot.market.data_source,
        snapshot.rates.source,
    )

    _check_decimals(sim_input.collateral, snapshot.collateral, "collateral")
    _check_decimals(sim_input.debt, snapshot.debt, "debt")

    pre = pre_simulation_check(
        sim_input,
        snapshot.market,
        max_loops=policy.max_loops,
        max_horizon_days=policy.max_horizon_days,
    )
    if not pre.ok:
        logger.warning("Rejected by pre-simulation check: %s", "; ".join(pre.reasons))
        raise PolicyViolationError(pre.reasons)

    prices = merge_prices(snapshot.default_prices, sim_input.price_overrides)
    collateral_price = resolve_price(sim_input.collateral.symbol, prices)
    debt_price = resolve_price(sim_input.debt.symbol, prices)

    swap_provider = create_swap_provider(
        collateral_price_usd=collateral_price,
        debt_price_usd=debt_price,
        collateral_decimals=sim_input.collateral.decimals,
        debt_decimals=sim_input.debt.decimals,
        swap_model=sim_input.swap_model,
        quote_fetcher=quote_fetcher,
    )

    artifacts = await simulate_looping(sim_input, snapshot, prices, swap_provider, clock=clock)
    result = artifacts.result

    limits = sim_input.risk_limits
    post = post_simulation_check(
        result.summary.hf_now,
        result.summary.gross_leverage,
        min_health_factor=limits.min_hf if limits is not None else None,
        max_leverage=limits.max_leverage if limits is not None else None,
    )
    if not post.ok:
        logger.warning("Post-simulation check flagged result: %s", "; ".join(post.reasons))
    result = replace(result, can_execute=post.ok, risk_reasons=tuple(post.reasons))

    logger.info(
        "Simulation done: loops=%d hf_now=%.4f leverage=%.4f slip_cost_usd=%s can_execute=%s hash=%s",
        result.summary.loops_done,
        result.summary.hf_now,
        result.summary.gross_leverage,
        result.summary.slip_cost_usd,
        result.can_execute,
        result.receipt.provenance_hash[:12],
    )
    return replace(artifacts, result=result)
