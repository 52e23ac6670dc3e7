"""KPI card helpers for the dashboard."""

import math

import streamlit as st


def format_ratio(value: float, suffix: str = "", digits: int = 3) -> str:
    """Format an HF/leverage-style ratio; unbounded values render as ``∞``."""
    if not math.isfinite(value):
        return "∞"
    return f"{value:.{digits}f}{suffix}"


def kpi_row(metrics: list[tuple[str, str, str | None]]) -> None:
    """Display a row of KPI cards.

    Args:
        metrics: List of (label, value, delta) tuples.
    """
    cols = st.columns(len(metrics))
    for col, (label, value, delta) in zip(cols, metrics):
        with col:
            st.metric(label=label, value=value, delta=delta, delta_color="off")
