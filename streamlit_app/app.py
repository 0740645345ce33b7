"""Docket — Streamlit entry point."""

import streamlit as st

st.set_page_config(
    page_title="Docket",
    page_icon="⚖️",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    :root {
        --primary-blue: #3B82F6;
        --accent-amber: #F59E0B;
        --danger-red: #EF4444;
        --bg-card: #1E293B;
        --text-muted: #94A3B8;
        --border-slate: #334155;
    }

    h1, h2, h3 {
        font-weight: 600 !important;
    }

    .stButton>button {
        background-color: var(--primary-blue);
        color: white;
        border: none;
        font-weight: 500;
    }

    .stTabs [aria-selected="true"] {
        color: var(--accent-amber);
        border-bottom-color: var(--accent-amber);
    }

    [data-testid="stSidebar"] {
        background-color: var(--bg-card);
    }
</style>
""", unsafe_allow_html=True)

st.title("Legal Research & Contract Analysis")
st.caption("Upload a legal document for AI-powered risk assessment, clause extraction and legal research.")

with st.expander("How it works", expanded=False):
    st.markdown("""
- **Submit** sends the document and your chosen analyses to the analysis workflow.
- The workflow writes its findings to the database once it finishes (usually 1-2 minutes).
- **History** lists every finished analysis, with search, type and risk filters.
- **Inspector** shows how a raw workflow response is read, for debugging new output formats.
""")

st.markdown("---")
st.markdown("Use the sidebar to navigate between pages.")
