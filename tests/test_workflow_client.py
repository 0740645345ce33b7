"""Unit tests for the analysis-workflow submission client."""

from unittest.mock import patch

import httpx
import pytest

from docket.config import Settings
from docket.documents.models import DocumentType
from docket.results.models import Severity
from docket.workflow.client import (
    WorkflowSubmissionError,
    _live_submit,
    _mock_submit,
    submit_document,
)
from docket.workflow.models import SubmissionForm, UploadedFile

WEBHOOK = "https://hooks.test/analyze"
LIVE = Settings(workflow_mode="live", webhook_url=WEBHOOK)
MOCK = Settings(workflow_mode="mock")


def _form(**overrides) -> SubmissionForm:
    data = dict(
        document_id="DOC-1",
        client_name="Acme",
        client_email="legal@acme.test",
        analysis_types=["risk_assessment"],
        file_url="https://files.test/msa.pdf",
    )
    data.update(overrides)
    return SubmissionForm(**data)


def _response(status_code, **kwargs) -> httpx.Response:
    return httpx.Response(status_code, request=httpx.Request("POST", WEBHOOK), **kwargs)


# ---------------------------------------------------------------------------
# Mock mode
# ---------------------------------------------------------------------------


class TestMockSubmit:
    def test_contract_results(self):
        receipt = _mock_submit(_form())
        assert receipt.mode == "mock"
        assert receipt.status_code == 200
        assert receipt.document_id == "DOC-1"
        results = receipt.results
        assert results.risk_score == 7
        assert results.confidence_score == 0.82
        assert [f.severity for f in results.compliance_flags] == [Severity.CRITICAL, Severity.WARNING]
        assert results.extracted_clauses[0].page_number == 92
        assert results.processing_time_seconds == 42

    def test_research_results(self):
        receipt = _mock_submit(_form(document_type="case_law"))
        results = receipt.results
        assert receipt.document_type == DocumentType.CASE_LAW
        assert results.risk_score == 8
        assert results.confidence_score == 0.85
        # Alert with statute UNKNOWN is suppressed.
        assert results.compliance_flags == []
        assert results.precedent_cases[0].case_name == "Fiona Trust v Privalov"
        assert results.precedent_cases[0].jurisdiction == "BINDING"
        assert results.recommended_actions == ["Move to stay proceedings in favour of arbitration."]

    def test_deterministic(self):
        assert _mock_submit(_form()).results == _mock_submit(_form()).results


# ---------------------------------------------------------------------------
# Live mode
# ---------------------------------------------------------------------------


class TestLiveSubmit:
    def test_posts_multipart_fields(self):
        with patch("docket.workflow.client.httpx.post", return_value=_response(200)) as post:
            _live_submit(_form(jurisdiction="India"), None, LIVE)
        args, kwargs = post.call_args
        assert args[0] == WEBHOOK
        assert kwargs["timeout"] == LIVE.request_timeout
        parts = kwargs["files"]
        assert parts["document_type"] == (None, b"Contract")
        assert parts["client_name"] == (None, b"Acme")
        assert parts["analysis_type"] == (None, b'["risk_assessment"]')
        assert parts["jurisdiction"] == (None, b"India")
        assert "case_id" not in parts
        assert "file" not in parts

    def test_attaches_file(self):
        upload = UploadedFile(filename="msa.pdf", content=b"%PDF", content_type="application/pdf")
        with patch("docket.workflow.client.httpx.post", return_value=_response(200)) as post:
            _live_submit(_form(file_url=None), upload, LIVE)
        assert post.call_args.kwargs["files"]["file"] == ("msa.pdf", b"%PDF", "application/pdf")

    def test_json_body_normalized(self):
        body = [{"output": {"Analysis Summary": "ok", "Risk Score": 3}}]
        with patch("docket.workflow.client.httpx.post", return_value=_response(200, json=body)):
            receipt = _live_submit(_form(), None, LIVE)
        assert receipt.mode == "live"
        assert receipt.results.executive_summary == "ok"
        assert receipt.results.risk_score == 3

    def test_empty_body_has_no_results(self):
        with patch("docket.workflow.client.httpx.post", return_value=_response(200)):
            receipt = _live_submit(_form(), None, LIVE)
        assert receipt.results is None
        assert receipt.message.startswith("Document submitted successfully!")

    def test_text_body_has_no_results(self):
        with patch("docket.workflow.client.httpx.post", return_value=_response(200, text="Workflow was started")):
            receipt = _live_submit(_form(), None, LIVE)
        assert receipt.results is None

    def test_error_status_carries_body(self):
        with patch("docket.workflow.client.httpx.post", return_value=_response(500, text="Workflow crashed")):
            with pytest.raises(WorkflowSubmissionError) as excinfo:
                _live_submit(_form(), None, LIVE)
        assert excinfo.value.status_code == 500
        assert str(excinfo.value) == "Analysis workflow failed with status 500: Workflow crashed"

    def test_error_status_without_body(self):
        with patch("docket.workflow.client.httpx.post", return_value=_response(404)):
            with pytest.raises(WorkflowSubmissionError) as excinfo:
                _live_submit(_form(), None, LIVE)
        assert excinfo.value.detail == "Unknown error"

    def test_transport_error(self):
        with patch(
            "docket.workflow.client.httpx.post",
            side_effect=httpx.ConnectError("connection refused"),
        ):
            with pytest.raises(WorkflowSubmissionError) as excinfo:
                _live_submit(_form(), None, LIVE)
        assert excinfo.value.status_code is None
        assert "unreachable" in str(excinfo.value)

    def test_missing_webhook_url(self):
        with pytest.raises(RuntimeError, match="DOCKET_WEBHOOK_URL"):
            _live_submit(_form(), None, Settings(workflow_mode="live"))


# ---------------------------------------------------------------------------
# submit_document routing
# ---------------------------------------------------------------------------


class TestSubmitDocument:
    def test_requires_file_or_url(self):
        with pytest.raises(ValueError):
            submit_document(_form(file_url=None), None, MOCK)

    def test_mock_mode_does_not_call_network(self):
        with patch("docket.workflow.client.httpx.post") as post:
            receipt = submit_document(_form(), None, MOCK)
        post.assert_not_called()
        assert receipt.mode == "mock"

    def test_live_mode_calls_webhook(self):
        with patch("docket.workflow.client.httpx.post", return_value=_response(202)) as post:
            receipt = submit_document(_form(), None, LIVE)
        post.assert_called_once()
        assert receipt.status_code == 202

    def test_settings_from_environment(self, monkeypatch):
        monkeypatch.setenv("WORKFLOW_MODE", "mock")
        receipt = submit_document(_form())
        assert receipt.mode == "mock"
