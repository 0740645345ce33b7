"""Page 2: History — browse, filter and delete finished analyses."""

import pandas as pd
import streamlit as st

from api_client import (
    delete_document,
    error_detail,
    list_documents,
    refresh_documents,
    reset_and_seed,
    seed_documents,
)
from charts import RISK_COLORS, count_bar_chart
from docket.documents.filters import RISK_BAND_LABELS
from results_view import render_results

TYPE_LABELS = {"all": "All Types", "contract": "Contract", "case_law": "Case Law"}
RISK_LABELS = {"all": "All Risks", **RISK_BAND_LABELS}

header_col, refresh_col = st.columns([5, 1])
with header_col:
    st.header("Analysis History")
with refresh_col:
    if st.button("Refresh", use_container_width=True):
        try:
            refresh_documents()
            st.toast("Documents refreshed")
        except Exception as e:
            st.error(f"Failed to refresh documents: {error_detail(e)}")

# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------
search_col, type_col, risk_col = st.columns([3, 1, 1])
with search_col:
    search = st.text_input("Search", placeholder="Search by client, email or document ID...")
with type_col:
    document_type = st.selectbox("Document Type", list(TYPE_LABELS), format_func=TYPE_LABELS.get)
with risk_col:
    risk_level = st.selectbox("Risk Level", list(RISK_LABELS), format_func=RISK_LABELS.get)

try:
    listing = list_documents(search=search, document_type=document_type, risk_level=risk_level)
except Exception as e:
    st.error(f"Could not load documents: {error_detail(e)}")
    st.info("Start the API server first.")
    st.stop()

if listing.get("error"):
    st.error(listing["error"])

documents = listing["documents"]

if not documents:
    st.info("No documents found. Submit a document, or generate demo data below.")
    with st.expander("Demo data"):
        count = st.number_input("Rows", min_value=1, max_value=500, value=20)
        gen_col, reset_col = st.columns(2)
        if gen_col.button("Generate", use_container_width=True):
            result = seed_documents(int(count))
            st.success(f"Generated {result['generated']} rows.")
            st.rerun()
        if reset_col.button("Reset & Regenerate", use_container_width=True):
            result = reset_and_seed(int(count))
            st.success(f"Database reset. Generated {result['generated']} rows.")
            st.rerun()
    st.stop()

# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------
kpi1, kpi2, kpi3 = st.columns(3)
kpi1.metric("Documents", listing["total"])
kpi2.metric("Contracts", sum(1 for d in documents if d["document_type"] == "contract"))
kpi3.metric("Case Law", sum(1 for d in documents if d["document_type"] == "case_law"))

count_bar_chart(listing["risk_bands"], RISK_COLORS, title="Documents by Risk Band")

# ---------------------------------------------------------------------------
# Table
# ---------------------------------------------------------------------------
rows = []
for doc in documents:
    results = doc.get("results") or {}
    rows.append({
        "Document ID": doc["document_id"],
        "Type": TYPE_LABELS.get(doc["document_type"], doc["document_type"]),
        "Client": doc["client_name"],
        "Email": doc["client_email"],
        "Jurisdiction": doc.get("jurisdiction") or "",
        "Risk": results.get("risk_score"),
        "Status": doc["status"],
        "Created": doc["created_at"],
    })
st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)
st.caption(f"Showing {listing['total']} documents")

# ---------------------------------------------------------------------------
# Detail
# ---------------------------------------------------------------------------
st.subheader("Document Detail")
keys = {f"{d['document_type']}:{d['id']}": d for d in documents}
selected_key = st.selectbox(
    "Select a document to inspect",
    list(keys),
    format_func=lambda k: f"{keys[k]['document_id']} · {keys[k]['client_name']}",
)
doc = keys[selected_key]

meta_col, action_col = st.columns([4, 1])
with meta_col:
    st.markdown(
        f"**{doc['client_name']}** ({doc['client_email'] or 'no email'}) · "
        f"{TYPE_LABELS.get(doc['document_type'])} · {doc.get('jurisdiction') or 'No jurisdiction'}"
    )
with action_col:
    if st.button("Delete", type="secondary", use_container_width=True):
        try:
            delete_document(doc["document_type"], doc["id"])
            st.toast("Document deleted")
            st.rerun()
        except Exception as e:
            st.error(f"Failed to delete document: {error_detail(e)}")

if doc.get("results"):
    render_results(doc["results"])
else:
    st.info("No results available for this document.")
