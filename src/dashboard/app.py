"""Looping Simulator Dashboard: main Streamlit entry point."""

import asyncio
import logging
import os
from pathlib import Path

import streamlit as st

# Load .env file if present (LOOPSIM_MAX_LOOPS, etc.)
_env_path = Path(__file__).resolve().parents[2] / ".env"
if _env_path.exists():
    for line in _env_path.read_text().splitlines():
        line = line.strip()
        if line and not line.startswith("#") and "=" in line:
            key, _, value = line.partition("=")
            os.environ.setdefault(key.strip(), value.strip())

# Bridge Streamlit Cloud secrets into os.environ so RiskPolicy.from_env()
# sees them.
try:
    for key in st.secrets:
        if isinstance(st.secrets[key], str):
            os.environ.setdefault(key, st.secrets[key])
except Exception:
    pass  # No secrets configured

from src.dashboard.components.sidebar import render_sidebar
from src.dashboard.tabs.action_plan import render_action_plan
from src.dashboard.tabs.overview import render_overview
from src.dashboard.tabs.stress_tests import render_stress_tests
from src.dashboard.tabs.time_series import render_time_series
from src.data.constants import WETH
from src.errors import LoopSimError, PolicyViolationError
from src.risk.policy import RiskPolicy
from src.simulation.service import run_simulation

logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))


def main() -> None:
    st.set_page_config(
        page_title="Looping Simulator",
        page_icon="🔁",
        layout="wide",
    )

    st.title("Leveraged Looping Simulator")
    st.caption("Morpho Blue WETH/USDC on Base: borrow, swap, supply")

    policy = RiskPolicy.from_env()
    params = render_sidebar(max_loops=policy.max_loops)

    try:
        artifacts = asyncio.run(run_simulation(params.sim_input, policy=policy))
    except PolicyViolationError as exc:
        st.error("Request rejected by risk policy:")
        for reason in exc.reasons:
            st.markdown(f"- {reason}")
        return
    except LoopSimError as exc:
        st.error(f"Simulation failed: {exc}")
        return

    result = artifacts.result

    tab1, tab2, tab3, tab4 = st.tabs(
        [
            "Position Overview",
            "Time Series",
            "Stress Tests",
            "Action Plan",
        ]
    )

    with tab1:
        limits = params.sim_input.risk_limits
        render_overview(
            result,
            WETH,
            params.collateral_price,
            params.debt_price,
            min_hf=limits.min_hf if limits is not None else None,
        )

    with tab2:
        render_time_series(result, params.collateral_price, params.debt_price)

    with tab3:
        render_stress_tests(result)

    with tab4:
        render_action_plan(result)


if __name__ == "__main__":
    main()
