"""Render a normalized analysis result (the API's AnalysisResult JSON)."""

from __future__ import annotations

from typing import Any

import pandas as pd
import streamlit as st

from charts import SEVERITY_COLORS, count_bar_chart, risk_color, risk_label

SEVERITY_ICONS = {"critical": "🔴", "warning": "🟠", "info": "🔵"}


def render_scores(results: dict[str, Any]) -> None:
    risk = float(results.get("risk_score", 0))
    confidence = float(results.get("confidence_score", 0))
    col1, col2, col3 = st.columns(3)
    col1.metric("Risk Score", f"{risk:.1f} / 10", risk_label(risk), delta_color="off")
    col1.markdown(
        f"<div style='height:8px;border-radius:4px;background:{risk_color(risk)};"
        f"width:{max(0.0, min(risk / 10, 1.0)) * 100:.0f}%'></div>",
        unsafe_allow_html=True,
    )
    col2.metric("Confidence", f"{confidence:.0%}")
    col3.metric("Processing Time", f"{results.get('processing_time_seconds', 0):.0f}s")


def render_results(results: dict[str, Any]) -> None:
    st.markdown("**Executive Summary**")
    st.write(results.get("executive_summary", ""))
    render_scores(results)

    tabs = st.tabs(["Compliance Flags", "Extracted Clauses", "Precedent Cases", "Recommended Actions"])

    with tabs[0]:
        flags = results.get("compliance_flags", [])
        if not flags:
            st.info("No compliance flags.")
        elif len(flags) > 1:
            counts = {s: sum(1 for f in flags if f["severity"] == s) for s in SEVERITY_COLORS}
            count_bar_chart(counts, SEVERITY_COLORS, title="Flags by Severity", height=180, y_title="Flags")
        for flag in flags:
            icon = SEVERITY_ICONS.get(flag["severity"], "")
            with st.container(border=True):
                st.markdown(f"{icon} **{flag['category']}** · _{flag['severity']}_")
                st.write(flag["description"])
                if flag.get("recommendation"):
                    st.caption(flag["recommendation"])

    with tabs[1]:
        clauses = results.get("extracted_clauses", [])
        if not clauses:
            st.info("No clauses extracted.")
        for clause in clauses:
            label = f"{clause['clause_type']} · page {clause['page_number']} ({clause['risk_level']})"
            with st.expander(label):
                st.write(clause["content"] or "_No clause text._")
                if clause.get("key_concerns"):
                    st.markdown(f"**Concerns:** {clause['key_concerns']}")
                if clause.get("suggested_language"):
                    st.markdown(f"**Suggested language:** {clause['suggested_language']}")

    with tabs[2]:
        cases = results.get("precedent_cases", [])
        if not cases:
            st.info("No precedent cases.")
        else:
            df = pd.DataFrame(cases)[
                ["case_name", "citation", "relevance_score", "jurisdiction", "year", "summary"]
            ]
            st.dataframe(df, use_container_width=True, hide_index=True)

    with tabs[3]:
        actions = results.get("recommended_actions", [])
        if not actions:
            st.info("No recommended actions.")
        for i, action in enumerate(actions, start=1):
            st.markdown(f"{i}. {action}")
