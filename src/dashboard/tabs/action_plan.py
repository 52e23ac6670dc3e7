"""Action Plan page: the borrow/swap/supply steps of each loop."""

import pandas as pd
import streamlit as st

from src.simulation.results import SimulationResult


def render_action_plan(result: SimulationResult) -> None:
    st.header("Action Plan")

    if not result.action_plan:
        st.info("No loop iterations were executed.")
        return

    rows = []
    for i, step in enumerate(result.action_plan, start=1):
        route = step.swap.route or {}
        impact = route.get("price_impact_pct") if isinstance(route, dict) else None
        rows.append({
            "Loop": i,
            "Borrow": f"{float(step.borrow.amount):,.4f} {step.borrow.asset}",
            "Swap In": f"{float(step.swap.amount_in):,.4f} {step.swap.from_asset}",
            "Swap Out": f"{float(step.swap.amount_out):,.6f} {step.swap.to_asset}",
            "Price Impact": f"{impact:.4f}%" if impact is not None else "-",
            "Supply": f"{float(step.supply.amount):,.6f} {step.supply.asset}",
        })
    st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)

    with st.expander("JSON"):
        st.json([step.to_dict() for step in result.action_plan])
