"""Page 3: Inspector — preview how a raw workflow response is normalized."""

import json

import streamlit as st

from api_client import detect_family, error_detail, normalize_output
from results_view import render_results

SAMPLE = {
    "output": {
        "Analysis Summary": "Short supply agreement.",
        "Risk Score": 4,
        "Compliance Flags": ["Privacy - CRITICAL missing clause"],
        "Precedent Cases": ["Hadley v Baxendale (1854)"],
    }
}

st.header("Workflow Output Inspector")
st.caption("Paste a raw response from the analysis workflow to see how it will be read.")

raw_text = st.text_area("Raw workflow JSON", value=json.dumps(SAMPLE, indent=2), height=280)

if st.button("Normalize", use_container_width=True):
    try:
        raw = json.loads(raw_text)
    except json.JSONDecodeError as e:
        st.warning(f"Not valid JSON ({e}); it will be treated as an unrecognized payload.")
        raw = raw_text

    try:
        family = detect_family(raw)
        results = normalize_output(raw)
    except Exception as e:
        st.error(f"Normalization request failed: {error_detail(e)}")
    else:
        st.markdown(f"Detected format: **{family.replace('_', ' ')}**")
        render_results(results)
        with st.expander("Normalized JSON"):
            st.json(results)
