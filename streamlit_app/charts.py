"""Shared chart helpers: static Altair charts for risk and severity breakdowns."""

from __future__ import annotations

import altair as alt
import pandas as pd
import streamlit as st

CHART_HEIGHT = 260
LABEL_COLOR = "#94A3B8"
GRID_COLOR = "#334155"

RISK_COLORS = {"low": "#3B82F6", "medium": "#F59E0B", "high": "#EF4444"}
SEVERITY_COLORS = {"info": "#3B82F6", "warning": "#F59E0B", "critical": "#EF4444"}

_BASE_CONFIG = {
    "font": "Fira Sans, sans-serif",
    "axis": {
        "labelColor": LABEL_COLOR,
        "titleColor": LABEL_COLOR,
        "gridColor": GRID_COLOR,
        "gridOpacity": 0.2,
        "labelFontSize": 11,
    },
    "title": {"fontSize": 15, "fontWeight": 600, "anchor": "start", "offset": 10},
    "view": {"strokeWidth": 0},
}


def count_bar_chart(
    counts: dict[str, int],
    colors: dict[str, str],
    title: str = "",
    height: int = CHART_HEIGHT,
    y_title: str = "Documents",
) -> None:
    """Render one bar per category, in the order of ``colors``, colored by category."""
    df = pd.DataFrame(
        [{"Category": k, "Count": counts.get(k, 0)} for k in colors]
    )
    if df["Count"].sum() == 0:
        st.info("No data to display.")
        return

    chart = (
        alt.Chart(df)
        .mark_bar(cornerRadiusTopLeft=6, cornerRadiusTopRight=6, size=48)
        .encode(
            x=alt.X("Category:N", sort=list(colors), title=None, axis=alt.Axis(labelAngle=0)),
            y=alt.Y("Count:Q", title=y_title, axis=alt.Axis(tickMinStep=1)),
            color=alt.Color(
                "Category:N",
                scale=alt.Scale(domain=list(colors), range=list(colors.values())),
                legend=None,
            ),
            tooltip=[alt.Tooltip("Category:N"), alt.Tooltip("Count:Q", format=",")],
        )
        .properties(height=height, **({"title": title} if title else {}))
        .configure(**_BASE_CONFIG)
    )
    st.altair_chart(chart, use_container_width=True)


def risk_label(score: float) -> str:
    if score <= 3:
        return "Low Risk"
    if score <= 6:
        return "Medium Risk"
    return "High Risk"


def risk_color(score: float) -> str:
    if score <= 3:
        return RISK_COLORS["low"]
    if score <= 6:
        return RISK_COLORS["medium"]
    return RISK_COLORS["high"]
