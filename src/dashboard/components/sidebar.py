"""Sidebar parameter controls."""

from dataclasses import dataclass

import streamlit as st

from src.data.constants import (
    DEFAULT_HORIZON_DAYS,
    DEFAULT_MAX_LOOPS,
    MAX_HORIZON_DAYS,
    USDC,
    USDC_DECIMALS,
    WETH,
    WETH_DECIMALS,
)
from src.data.interfaces import TokenSpec
from src.simulation.params import (
    OracleSpec,
    RateOverrides,
    RiskLimits,
    SimulationInput,
    SwapModelSpec,
)
from src.stress.scenarios import OracleLagScenario, PriceJumpScenario, RatesShiftScenario


@dataclass
class SidebarParams:
    """User-controlled parameters from the sidebar."""

    sim_input: SimulationInput
    collateral_price: float
    debt_price: float


def render_sidebar(max_loops: int = DEFAULT_MAX_LOOPS) -> SidebarParams:
    """Render sidebar controls and return the simulation request.

    Parameters
    ----------
    max_loops : int
        Upper bound of the loop slider (the active risk policy limit).
    """
    st.sidebar.header("Position Parameters")

    start_capital = st.sidebar.number_input(
        f"Start Capital ({WETH})",
        min_value=0.0001,
        value=10.0,
        step=1.0,
        format="%.4f",
    )
    target_ltv = st.sidebar.slider(
        "Target LTV",
        min_value=0.05,
        max_value=0.85,
        value=0.6,
        step=0.01,
    )
    loops = st.sidebar.slider("Loops", min_value=1, max_value=max_loops, value=3)
    horizon = st.sidebar.slider(
        "Horizon (days)",
        min_value=1,
        max_value=MAX_HORIZON_DAYS,
        value=DEFAULT_HORIZON_DAYS,
    )

    st.sidebar.header("Prices (USD)")
    collateral_price = st.sidebar.number_input(f"{WETH} Price", min_value=1.0, value=3200.0, step=50.0)
    debt_price = st.sidebar.number_input(f"{USDC} Price", min_value=0.5, value=1.0, step=0.01)

    st.sidebar.header("Swap Pool (x * y = k)")
    fee_bps = st.sidebar.slider("Fee (bps)", min_value=0, max_value=100, value=30)
    base_reserve = st.sidebar.number_input(
        f"{WETH} Reserve", min_value=1.0, value=10_000.0, step=1_000.0, format="%.0f"
    )
    quote_reserve = st.sidebar.number_input(
        f"{USDC} Reserve",
        min_value=1.0,
        value=float(base_reserve * collateral_price),
        step=1_000_000.0,
        format="%.0f",
    )

    st.sidebar.header("Rates & Oracle")
    override_rates = st.sidebar.checkbox("Override Market Rates", value=False)
    rates: RateOverrides | None = None
    if override_rates:
        supply = st.sidebar.slider("Supply APR (%)", 0.0, 20.0, 3.25, step=0.05) / 100.0
        borrow = st.sidebar.slider("Borrow APR (%)", 0.0, 30.0, 5.9, step=0.05) / 100.0
        rates = RateOverrides(supply_apr=supply, borrow_apr=borrow)

    lag = st.sidebar.number_input("Oracle Lag (seconds)", min_value=0, value=0, step=600)
    oracle = OracleSpec(lag_seconds=int(lag)) if lag > 0 else None

    st.sidebar.header("Risk Limits")
    min_hf = st.sidebar.number_input("Min Health Factor", min_value=0.0, value=1.05, step=0.05)
    max_leverage = st.sidebar.number_input("Max Leverage", min_value=1.0, value=8.0, step=0.5)

    st.sidebar.header("Stress Scenarios")
    shock = st.sidebar.slider("Price Jump (%)", min_value=-80, max_value=50, value=-20) / 100.0
    shock_day = st.sidebar.slider("Jump Day", min_value=0, max_value=horizon, value=1) if horizon > 1 else 0
    rate_shift = st.sidebar.slider("Borrow APR Shift (bps)", min_value=-500, max_value=2_000, value=300, step=25)
    lag_stress = st.sidebar.number_input("Oracle Lag Stress (seconds)", min_value=0, value=3_600, step=600)

    scenarios = [
        PriceJumpScenario(asset=WETH, shock_pct=shock, at_day=int(shock_day)),
        RatesShiftScenario(borrow_apr_delta_bps=rate_shift),
    ]
    if lag_stress > 0:
        scenarios.append(OracleLagScenario(lag_seconds=int(lag_stress)))

    sim_input = SimulationInput(
        collateral=TokenSpec(symbol=WETH, decimals=WETH_DECIMALS),
        debt=TokenSpec(symbol=USDC, decimals=USDC_DECIMALS),
        start_capital=str(start_capital),
        target_ltv=target_ltv,
        loop_count=int(loops),
        price_overrides={f"{WETH}USD": collateral_price, f"{USDC}USD": debt_price},
        swap_model=SwapModelSpec(fee_bps=fee_bps, base_reserve=base_reserve, quote_reserve=quote_reserve),
        oracle=oracle,
        rates=rates,
        horizon_days=int(horizon),
        scenarios=tuple(scenarios),
        risk_limits=RiskLimits(min_hf=min_hf, max_leverage=max_leverage),
    )

    return SidebarParams(
        sim_input=sim_input,
        collateral_price=collateral_price,
        debt_price=debt_price,
    )
