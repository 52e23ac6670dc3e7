"""Position Overview page: KPI cards, HF gauge and price sensitivity."""

import math
from decimal import Decimal

import streamlit as st

from src.dashboard.components.charts import health_factor_gauge, hf_sensitivity_chart
from src.dashboard.components.metrics_cards import format_ratio, kpi_row
from src.protocol.liquidation import LiquidationModel
from src.simulation.results import SimulationResult


def render_overview(
    result: SimulationResult,
    collateral_symbol: str,
    collateral_price: float,
    debt_price: float,
    min_hf: float | None = None,
) -> None:
    """Render the position overview page."""
    st.header("Position Overview")

    summary = result.summary
    last = result.time_series[-1]

    if result.can_execute is False:
        st.warning("Execution inadvisable: " + "; ".join(result.risk_reasons))
    elif result.can_execute:
        st.success("Within risk limits")

    kpi_row(
        [
            ("Health Factor", format_ratio(summary.hf_now), None),
            ("Gross Leverage", format_ratio(summary.gross_leverage, "x"), None),
            ("Net APR", f"{summary.net_apr*100:.2f}%", None),
            ("Loops Done", str(summary.loops_done), None),
        ]
    )

    st.divider()

    liq_price = summary.liq_price.get(collateral_symbol, float("inf"))
    kpi_row(
        [
            (f"Liquidation Price ({collateral_symbol})", f"${liq_price:,.2f}" if math.isfinite(liq_price) else "-", None),
            ("Slippage + Fees", f"${float(summary.slip_cost_usd):,.2f}", None),
            ("Equity at Horizon", f"${float(last.equity):,.2f}", f"day {last.t}"),
        ]
    )

    st.divider()

    col1, col2 = st.columns([1, 2])
    with col1:
        st.plotly_chart(health_factor_gauge(summary.hf_now, min_hf), use_container_width=True)
    with col2:
        first = result.time_series[0]
        model = LiquidationModel(result.protocol_params_used.lltv)
        df = model.price_sensitivity(
            collateral_amount=first.collateral,
            debt_value=first.debt * Decimal(repr(debt_price)),
            price_range=(collateral_price * 0.3, collateral_price * 1.3),
        )
        st.plotly_chart(
            hf_sensitivity_chart(df, collateral_symbol, collateral_price),
            use_container_width=True,
        )

    st.caption(
        f"Market LLTV {result.protocol_params_used.lltv:.2%} · IRM {result.protocol_params_used.irm} · "
        f"oracle {result.protocol_params_used.oracle_type} · source {result.protocol_params_used.data_source}"
    )
    st.caption(f"Provenance hash: `{result.receipt.provenance_hash}`")
