"""Looping engine: build a leveraged position by borrow/swap/supply cycles.

Each iteration borrows a fixed fraction of the current collateral value,
swaps the borrowed debt into collateral through the injected
``SwapProvider`` and supplies the output back.  The swap call is the only
suspension point and iterations are strictly sequential.

After the loop the position is projected over the horizon (see
``src.simulation.accrual``) and every stress scenario is evaluated against
the same post-loop totals.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any, Callable

from src.data.constants import DAYS_PER_YEAR, SIM_ENGINE_VERSION
from src.data.interfaces import MarketRates, MarketSnapshot
from src.errors import InvalidInputError, SwapQuoteError
from src.position.loop_state import LoopState
from src.position.swap_providers import SwapProvider, SwapQuoteRequest
from src.protocol.decimal_math import ZERO, non_negative, safe_div, to_decimal
from src.protocol.liquidation import LiquidationModel
from src.simulation.accrual import AccrualParams, build_time_series
from src.simulation.params import SimulationInput
from src.simulation.provenance import build_provenance, hash_provenance
from src.simulation.results import (
    ActionStep,
    BorrowLeg,
    Receipt,
    SimulationArtifacts,
    SimulationResult,
    Summary,
    SupplyLeg,
    SwapLeg,
)
from src.stress.shock_engine import evaluate_scenarios

logger = logging.getLogger(__name__)


def resolve_price(symbol: str, price_map: dict[str, float]) -> Decimal:
    """USD unit price of ``symbol``, looked up as ``SYMBOL`` then ``SYMBOLUSD``.

    Raises:
        InvalidInputError: if neither key is present or the price is not positive.
    """
    key = symbol.upper()
    for candidate in (key, f"{key}USD"):
        if candidate in price_map:
            price = to_decimal(price_map[candidate], f"price[{candidate}]")
            if price <= 0:
                raise InvalidInputError(f"price for {symbol} must be positive, got {price}")
            return price
    raise InvalidInputError(f"no USD price available for {symbol}")


def effective_rates(sim_input: SimulationInput, snapshot_rates: MarketRates) -> tuple[float, float]:
    """Supply/borrow APR: caller overrides win field by field over the snapshot."""
    supply_apr = snapshot_rates.supply_apr
    borrow_apr = snapshot_rates.borrow_apr
    if sim_input.rates is not None:
        if sim_input.rates.supply_apr is not None:
            supply_apr = sim_input.rates.supply_apr
        if sim_input.rates.borrow_apr is not None:
            borrow_apr = sim_input.rates.borrow_apr
    return float(supply_apr), float(borrow_apr)


@dataclass
class LoopOutcome:
    """Totals and trace produced by the acquisition phase."""

    state: LoopState
    loops_done: int = 0
    slip_cost_usd: Decimal = ZERO
    action_plan: list[ActionStep] = field(default_factory=list)
    external_quotes: list[Any] = field(default_factory=list)


async def run_loops(
    sim_input: SimulationInput,
    start_capital: Decimal,
    borrow_fraction: Decimal,
    collateral_price: Decimal,
    debt_price: Decimal,
    swap_provider: SwapProvider,
) -> LoopOutcome:
    """Execute up to ``loop_count`` borrow/swap/supply iterations.

    Stops early only when an iteration's borrow value is exactly zero.
    Provider errors propagate unchanged and no partial outcome is returned.
    """
    outcome = LoopOutcome(state=LoopState(collateral_amount=start_capital))
    collateral_symbol = sim_input.collateral.symbol
    debt_symbol = sim_input.debt.symbol

    for iteration in range(sim_input.loop_count):
        collateral_value = outcome.state.collateral_value(collateral_price)
        borrow_usd = collateral_value * borrow_fraction
        if borrow_usd == 0:
            logger.debug("Borrow value is zero at iteration %d, stopping", iteration)
            break

        borrow_amount = safe_div(borrow_usd, debt_price, "debt price")
        ideal_out = safe_div(borrow_usd, collateral_price, "collateral price")

        quote = await swap_provider.quote(
            SwapQuoteRequest(
                amount_in_debt=borrow_amount,
                ideal_amount_out_collateral=ideal_out,
                borrow_value_usd=borrow_usd,
            )
        )
        if quote.amount_out_collateral < 0:
            raise SwapQuoteError(f"swap provider returned negative output {quote.amount_out_collateral}")

        outcome.state.apply_loop(quote.amount_out_collateral, borrow_amount)
        outcome.slip_cost_usd += (
            non_negative(ideal_out - quote.amount_out_collateral) * collateral_price + quote.fees_usd
        )
        if quote.provenance is not None:
            outcome.external_quotes.append(quote.provenance)

        outcome.action_plan.append(
            ActionStep(
                borrow=BorrowLeg(asset=debt_symbol, amount=borrow_amount),
                swap=SwapLeg(
                    from_asset=debt_symbol,
                    to_asset=collateral_symbol,
                    amount_in=borrow_amount,
                    amount_out=quote.amount_out_collateral,
                    route=quote.route,
                ),
                supply=SupplyLeg(asset=collateral_symbol, amount=quote.amount_out_collateral),
            )
        )
        outcome.loops_done += 1

        logger.debug(
            "Loop %d: borrowed %s %s, received %s %s (ideal %s)",
            iteration + 1,
            borrow_amount,
            debt_symbol,
            quote.amount_out_collateral,
            collateral_symbol,
            ideal_out,
        )

    return outcome


def _validate(sim_input: SimulationInput, lltv: Decimal) -> tuple[Decimal, Decimal]:
    """Return ``(start_capital, borrow_fraction)`` or reject the whole run."""
    start_capital = to_decimal(sim_input.start_capital, "start_capital")
    if start_capital <= 0:
        raise InvalidInputError(f"start_capital must be positive, got {sim_input.start_capital}")
    if not (0 < lltv < 1):
        raise InvalidInputError(f"market lltv must be within (0, 1), got {lltv}")
    if sim_input.horizon_days < 0:
        raise InvalidInputError(f"horizon_days must be non-negative, got {sim_input.horizon_days}")

    borrow_fraction = to_decimal(sim_input.target_ltv, "target_ltv") / lltv
    if borrow_fraction >= 1:
        raise InvalidInputError(
            f"borrow fraction {borrow_fraction} must be below 1 "
            f"(target_ltv {sim_input.target_ltv}, lltv {lltv})"
        )
    return start_capital, borrow_fraction


async def simulate(
    sim_input: SimulationInput,
    snapshot: MarketSnapshot,
    price_map: dict[str, float],
    swap_provider: SwapProvider,
) -> tuple[SimulationResult, list[Any]]:
    """Pure engine run.

    Args:
        sim_input: Validated request.
        snapshot: Resolved market; read only.
        price_map: Merged USD price map (overrides already applied).
        swap_provider: Provider for this run only (its state is consumed).

    Returns:
        The result with an empty receipt, and the external quote
        provenance collected during the loop.
    """
    lltv = to_decimal(snapshot.market.lltv, "lltv")
    start_capital, borrow_fraction = _validate(sim_input, lltv)
    collateral_price = resolve_price(sim_input.collateral.symbol, price_map)
    debt_price = resolve_price(sim_input.debt.symbol, price_map)
    supply_apr, borrow_apr = effective_rates(sim_input, snapshot.rates)

    outcome = await run_loops(
        sim_input, start_capital, borrow_fraction, collateral_price, debt_price, swap_provider
    )
    state = outcome.state

    model = LiquidationModel(lltv)
    collateral_value = state.collateral_value(collateral_price)
    debt_value = state.debt_value(debt_price)

    params = AccrualParams(
        horizon_days=sim_input.horizon_days,
        supply_apr=supply_apr,
        borrow_apr=borrow_apr,
        collateral_price_usd=collateral_price,
        debt_price_usd=debt_price,
        lltv=lltv,
        oracle_lag_seconds=sim_input.oracle_lag_seconds,
    )
    series = build_time_series(state.collateral_amount, state.debt_amount, params)

    equity_start = series[0].equity
    equity_end = series[-1].equity
    if equity_start > 0 and sim_input.horizon_days > 0:
        net_apr = float((equity_end - equity_start) / equity_start) / (
            sim_input.horizon_days / DAYS_PER_YEAR
        )
    else:
        net_apr = supply_apr - borrow_apr

    stress = evaluate_scenarios(
        sim_input.scenarios, series, state.collateral_amount, state.debt_amount, params
    )

    summary = Summary(
        loops_done=outcome.loops_done,
        gross_leverage=model.gross_leverage(collateral_value, debt_value),
        net_apr=net_apr,
        hf_now=model.health_factor(collateral_value, debt_value),
        liq_price={
            sim_input.collateral.symbol: model.liquidation_price(state.collateral_amount, debt_value)
        },
        slip_cost_usd=outcome.slip_cost_usd,
    )
    logger.debug(
        "Simulated %d loops: collateral=%s debt=%s hf=%s",
        outcome.loops_done,
        state.collateral_amount,
        state.debt_amount,
        summary.hf_now,
    )

    result = SimulationResult(
        summary=summary,
        time_series=series,
        stress=stress,
        action_plan=outcome.action_plan,
        protocol_params_used=snapshot.market,
    )
    return result, outcome.external_quotes


async def simulate_looping(
    sim_input: SimulationInput,
    snapshot: MarketSnapshot,
    price_map: dict[str, float],
    swap_provider: SwapProvider,
    clock: Callable[[], int] | None = None,
) -> SimulationArtifacts:
    """Run the engine and stamp the result with its provenance hash.

    Args:
        clock: Returns the provenance timestamp in Unix milliseconds.
            Defaults to the wall clock.
    """
    result, external_quotes = await simulate(sim_input, snapshot, price_map, swap_provider)

    timestamp = clock() if clock is not None else int(time.time() * 1000)
    provenance = build_provenance(
        version=SIM_ENGINE_VERSION,
        sim_input=sim_input,
        market=snapshot.market,
        prices=price_map,
        external_quotes=external_quotes,
        timestamp=timestamp,
    )
    provenance_hash = hash_provenance(provenance)

    stamped = replace(result, receipt=Receipt(payment=None, provenance_hash=provenance_hash))
    return SimulationArtifacts(result=stamped, provenance=provenance)
