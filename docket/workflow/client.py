from __future__ import annotations

import json
import logging
from typing import Any, Optional

import httpx

from docket.config import Settings, load_settings
from docket.documents.models import DocumentType
from docket.results.normalizer import normalize
from docket.workflow.models import SubmissionForm, SubmissionReceipt, UploadedFile

logger = logging.getLogger(__name__)


class WorkflowSubmissionError(Exception):
    """The analysis webhook rejected the submission or could not be reached."""

    def __init__(self, detail: str, status_code: Optional[int] = None):
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is None:
            return f"Analysis workflow unreachable: {self.detail}"
        return f"Analysis workflow failed with status {self.status_code}: {self.detail}"


# ---------------------------------------------------------------------------
# Mock implementation
# ---------------------------------------------------------------------------

MOCK_CONTRACT_RESPONSE: list[dict[str, Any]] = [
    {
        "output": {
            "Analysis Summary": "Master services agreement with uncapped indemnity and weak data protection terms.",
            "Risk Score": 7,
            "Confidence Score": 0.82,
            "Compliance Flags": [
                "GDPR - NON-COMPLIANT data transfer clause",
                "Termination - notice period MISSING",
            ],
            "Extracted Clauses": [
                {
                    "clause_type": "Indemnification",
                    "section": "Section 9.2",
                    "risk_level": "high",
                    "clause_text": "Supplier shall indemnify Customer against any and all losses.",
                    "risk_score": 8,
                    "key_concerns": "No liability cap",
                    "suggested_language": "Limit indemnity to direct damages up to fees paid.",
                }
            ],
            "Precedent Cases": ["Hadley v Baxendale (1854) 9 Exch 341"],
            "Recommended Action": "Negotiate a liability cap before signature.",
            "Processing Time": 42,
        }
    }
]

MOCK_RESEARCH_RESPONSE: dict[str, Any] = {
    "json": {
        "output": {
            "research_summary": "Binding authority supports enforceability of the arbitration clause.",
            "applicability_score": 8,
            "case_analysis": [
                {
                    "citation": "Fiona Trust v Privalov, [2007] UKHL 40",
                    "authority_level": "BINDING",
                    "applicability_score": 9,
                    "holding": "Arbitration clauses are construed broadly.",
                    "applicability_to_our_case": "Directly on point for the dispute scope.",
                }
            ],
            "legislative_alert": {"statute": "UNKNOWN", "impact": ""},
            "recommendation": "Move to stay proceedings in favour of arbitration.",
        }
    }
}


def _mock_submit(form: SubmissionForm) -> SubmissionReceipt:
    """Deterministic canned workflow response for local use and tests."""
    raw = (
        MOCK_CONTRACT_RESPONSE
        if form.document_type == DocumentType.CONTRACT
        else MOCK_RESEARCH_RESPONSE
    )
    return SubmissionReceipt(
        document_id=form.document_id,
        document_type=form.document_type,
        status_code=200,
        mode="mock",
        results=normalize(raw),
    )


# ---------------------------------------------------------------------------
# Live implementation
# ---------------------------------------------------------------------------


def _parse_response(response: httpx.Response) -> Any:
    """JSON body of a workflow response, or None when it has none."""
    if not response.content or not response.content.strip():
        return None
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError, ValueError, RecursionError):
        logger.info("Workflow returned a non-JSON body (%d bytes)", len(response.content))
        return None


def _live_submit(
    form: SubmissionForm, file: Optional[UploadedFile], settings: Settings
) -> SubmissionReceipt:
    if not settings.webhook_url:
        raise RuntimeError("DOCKET_WEBHOOK_URL environment variable is required for live mode")

    # (None, value) parts keep the body multipart even when no file is attached.
    parts: dict[str, tuple[Any, ...]] = {
        name: (None, value.encode("utf-8")) for name, value in form.to_form_fields().items()
    }
    if file is not None:
        parts["file"] = (file.filename, file.content, file.content_type)

    logger.info("Sending %s to analysis workflow", form.document_id)
    try:
        response = httpx.post(
            settings.webhook_url,
            files=parts,
            timeout=settings.request_timeout,
        )
    except httpx.HTTPError as exc:
        logger.error("Workflow request failed: %s: %s", type(exc).__name__, exc)
        raise WorkflowSubmissionError(str(exc) or type(exc).__name__) from exc

    if not response.is_success:
        detail = response.text or "Unknown error"
        logger.error("Workflow returned %d: %.200s", response.status_code, detail)
        raise WorkflowSubmissionError(detail, status_code=response.status_code)

    payload = _parse_response(response)
    return SubmissionReceipt(
        document_id=form.document_id,
        document_type=form.document_type,
        status_code=response.status_code,
        mode="live",
        results=normalize(payload) if payload is not None else None,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def submit_document(
    form: SubmissionForm,
    file: Optional[UploadedFile] = None,
    settings: Optional[Settings] = None,
) -> SubmissionReceipt:
    """Send a document to the analysis workflow. Routes to mock or live based on WORKFLOW_MODE."""
    if file is None and not form.file_url:
        raise ValueError("Either a file or a file_url is required")
    settings = settings or load_settings()
    if settings.workflow_mode == "live":
        return _live_submit(form, file, settings)
    return _mock_submit(form)
