"""Time Series page: projected position and HF over the horizon."""

import streamlit as st

from src.dashboard.components.charts import hf_time_series_chart, position_time_series_chart
from src.simulation.results import SimulationResult


def render_time_series(result: SimulationResult, collateral_price: float, debt_price: float) -> None:
    st.header("Horizon Projection")

    df = result.time_series_frame()
    st.plotly_chart(
        position_time_series_chart(df, collateral_price, debt_price),
        use_container_width=True,
    )
    st.plotly_chart(hf_time_series_chart(df), use_container_width=True)

    with st.expander("Raw time series"):
        st.dataframe(df, use_container_width=True, hide_index=True)
