"""Reusable Plotly chart components."""

import math

import pandas as pd
import plotly.graph_objects as go

_GAUGE_MAX = 3.0
_BANDS = [
    (0.0, 1.0, "rgba(239,68,68,0.2)"),
    (1.0, 1.5, "rgba(245,158,11,0.2)"),
    (1.5, _GAUGE_MAX, "rgba(34,197,94,0.2)"),
]


def _band_color(hf: float) -> str:
    if hf < 1.0:
        return "#ef4444"
    if hf < 1.5:
        return "#f59e0b"
    return "#22c55e"


def health_factor_gauge(hf: float, min_hf: float | None = None) -> go.Figure:
    """Gauge of the post-loop HF, capped at 3 for display.

    The threshold needle marks ``min_hf`` when a policy minimum is set,
    otherwise the liquidation point.
    """
    shown = min(hf, _GAUGE_MAX) if math.isfinite(hf) else _GAUGE_MAX

    fig = go.Figure(
        go.Indicator(
            mode="gauge+number",
            value=shown,
            number={"font": {"size": 40}, "valueformat": ".2f"},
            title={"text": "Health Factor (post-loop)", "font": {"size": 16}},
            domain={"x": [0, 1], "y": [0.15, 1]},
            gauge={
                "axis": {"range": [0, _GAUGE_MAX]},
                "bar": {"color": _band_color(hf)},
                "steps": [{"range": [lo, hi], "color": c} for lo, hi, c in _BANDS],
                "threshold": {
                    "line": {"color": "white", "width": 2},
                    "thickness": 0.75,
                    "value": min_hf if min_hf is not None else 1.0,
                },
            },
        )
    )
    fig.update_layout(template="plotly_dark", height=350, margin=dict(t=40, b=0, l=30, r=30))
    return fig


def hf_sensitivity_chart(df: pd.DataFrame, symbol: str, current_price: float) -> go.Figure:
    """HF against the collateral USD price.

    Args:
        df: DataFrame with columns: collateral_price, health_factor.
        symbol: Collateral symbol for axis labels.
        current_price: Marked with a vertical line.
    """
    fig = go.Figure()

    fig.add_trace(
        go.Scatter(
            x=df["collateral_price"],
            y=df["health_factor"],
            mode="lines",
            name="Health Factor",
            line=dict(color="#3b82f6", width=2),
            hovertemplate="Price: $%{x:,.2f}<br>HF: %{y:.3f}<extra></extra>",
        )
    )

    fig.add_hline(
        y=1.0,
        line_dash="dash",
        line_color="#ef4444",
        annotation_text="Liquidation (HF=1.0)",
    )
    fig.add_vline(
        x=current_price,
        line_dash="dot",
        line_color="#6b7280",
        annotation_text=f"Current: ${current_price:,.0f}",
    )

    fig.update_layout(
        title=f"Health Factor vs {symbol} Price",
        xaxis_title=f"{symbol} Price (USD)",
        yaxis_title="Health Factor",
        template="plotly_dark",
        height=450,
    )

    return fig


def position_time_series_chart(df: pd.DataFrame, collateral_price: float, debt_price: float) -> go.Figure:
    """Collateral value, debt value and equity over the horizon (USD, spot prices).

    Args:
        df: DataFrame with columns: t, collateral, debt, equity.
    """
    fig = go.Figure()

    fig.add_trace(
        go.Scatter(
            x=df["t"],
            y=df["collateral"] * collateral_price,
            name="Collateral Value",
            line=dict(color="#22c55e", width=2),
            hovertemplate="Day %{x}<br>$%{y:,.2f}<extra></extra>",
        )
    )
    fig.add_trace(
        go.Scatter(
            x=df["t"],
            y=df["debt"] * debt_price,
            name="Debt Value",
            line=dict(color="#ef4444", width=2),
            hovertemplate="Day %{x}<br>$%{y:,.2f}<extra></extra>",
        )
    )
    fig.add_trace(
        go.Scatter(
            x=df["t"],
            y=df["equity"],
            name="Equity",
            line=dict(color="#3b82f6", width=2, dash="dash"),
            hovertemplate="Day %{x}<br>$%{y:,.2f}<extra></extra>",
        )
    )

    fig.update_layout(
        title="Position Value Over Horizon",
        xaxis_title="Day",
        yaxis_title="USD",
        hovermode="x unified",
        template="plotly_dark",
        height=450,
    )

    return fig


def hf_time_series_chart(df: pd.DataFrame) -> go.Figure:
    """Health factor per day; infinite points are left as gaps."""
    hf = df["hf"].where(df["hf"].map(math.isfinite))

    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=df["t"],
            y=hf,
            mode="lines+markers",
            name="Health Factor",
            line=dict(color="#f59e0b", width=2),
            hovertemplate="Day %{x}<br>HF: %{y:.4f}<extra></extra>",
        )
    )
    fig.add_hline(y=1.0, line_dash="dash", line_color="#ef4444",
                  annotation_text="Liquidation (HF=1.0)")

    fig.update_layout(
        title="Health Factor Over Horizon",
        xaxis_title="Day",
        yaxis_title="Health Factor",
        template="plotly_dark",
        height=400,
    )

    return fig


def stress_min_hf_chart(labels: list[str], base_min_hf: float, stressed_min_hf: list[float]) -> go.Figure:
    """Grouped bar chart: base vs stressed minimum HF per scenario."""
    def _clip(value: float) -> float | None:
        return value if math.isfinite(value) else None

    fig = go.Figure()

    fig.add_trace(
        go.Bar(
            x=labels,
            y=[_clip(base_min_hf)] * len(labels),
            name="Base Min HF",
            marker_color="#22c55e",
            opacity=0.8,
        )
    )
    fig.add_trace(
        go.Bar(
            x=labels,
            y=[_clip(v) for v in stressed_min_hf],
            name="Stressed Min HF",
            marker_color="#ef4444",
            opacity=0.8,
        )
    )

    fig.add_hline(y=1.0, line_dash="dash", line_color="white",
                  annotation_text="Liquidation (HF=1.0)")

    fig.update_layout(
        title="Stress Scenarios: Minimum Health Factor",
        yaxis_title="Health Factor",
        barmode="group",
        template="plotly_dark",
        height=450,
    )

    return fig
