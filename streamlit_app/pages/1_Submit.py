"""Page 1: Submit — upload a document for analysis."""

import streamlit as st

from api_client import error_detail, submit_document
from results_view import render_results

ANALYSIS_OPTIONS = {
    "risk_assessment": ("Risk Assessment", "Identify potential legal risks"),
    "clause_extraction": ("Clause Extraction", "Extract and categorize clauses"),
    "precedent_search": ("Precedent Search", "Find relevant case precedents"),
    "legislative_update": ("Legislative Update", "Check for regulatory changes"),
}

st.header("Submit Document")

with st.form("document_form"):
    st.subheader("Document Details")
    col1, col2 = st.columns(2)
    with col1:
        document_id = st.text_input("Document ID (optional)", placeholder="DOC-2024-001")
        client_name = st.text_input("Client Name *", placeholder="Acme Corporation")
        case_id = st.text_input("Case ID (optional)", placeholder="CASE-001")
    with col2:
        document_type = st.selectbox(
            "Document Type *",
            ["contract", "case_law"],
            format_func=lambda v: {"contract": "Contract", "case_law": "Case Law"}[v],
        )
        client_email = st.text_input("Client Email *", placeholder="client@company.com")
        jurisdiction = st.text_input("Jurisdiction", placeholder="India")

    st.subheader("Document Upload")
    uploaded = st.file_uploader("Upload a document", type=["pdf", "docx", "doc", "txt"])
    file_url = st.text_input("…or a link to the document", placeholder="https://")

    st.subheader("Analysis Types")
    selected = []
    option_cols = st.columns(2)
    for i, (value, (label, description)) in enumerate(ANALYSIS_OPTIONS.items()):
        with option_cols[i % 2]:
            if st.checkbox(label, value=value == "risk_assessment", help=description):
                selected.append(value)

    submitted = st.form_submit_button("Submit for Analysis", use_container_width=True)

if submitted:
    problems = []
    if not client_name.strip():
        problems.append("Client name is required.")
    if not client_email.strip():
        problems.append("Client email is required.")
    if not selected:
        problems.append("Select at least one analysis type.")
    if uploaded is None and not file_url.strip():
        problems.append("Upload a file or provide a file URL.")

    if problems:
        for p in problems:
            st.warning(p)
    else:
        fields = {
            "document_id": document_id.strip(),
            "document_type": document_type,
            "client_name": client_name.strip(),
            "client_email": client_email.strip(),
            "analysis_types": selected,
        }
        if case_id.strip():
            fields["case_id"] = case_id.strip()
        if jurisdiction.strip():
            fields["jurisdiction"] = jurisdiction.strip()
        if file_url.strip():
            fields["file_url"] = file_url.strip()

        with st.spinner("Sending document to the analysis workflow..."):
            try:
                receipt = submit_document(
                    fields,
                    file_name=uploaded.name if uploaded else None,
                    file_bytes=uploaded.getvalue() if uploaded else None,
                    content_type=uploaded.type if uploaded else None,
                )
            except Exception as e:
                st.error(f"Failed to submit document: {error_detail(e)}")
            else:
                st.success(receipt["message"])
                st.caption(f"Document ID: `{receipt['document_id']}` · mode: {receipt['mode']}")
                if receipt.get("results"):
                    with st.expander("Immediate workflow response", expanded=True):
                        render_results(receipt["results"])

st.info("**Note:** Results will appear in History once processing completes.")
