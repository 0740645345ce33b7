from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from docket.documents.models import AnalysisType, DocumentType
from docket.results.models import AnalysisResult


class SubmissionForm(BaseModel):
    """Document submission as entered on the upload form, validated before sending."""

    document_id: str = Field(default="", validate_default=True)
    document_type: DocumentType = DocumentType.CONTRACT
    client_name: str = Field(min_length=1)
    client_email: str = Field(min_length=3)
    case_id: Optional[str] = None
    jurisdiction: Optional[str] = None
    analysis_types: list[AnalysisType] = Field(min_length=1)
    file_url: Optional[str] = None

    @field_validator("document_id")
    @classmethod
    def default_document_id(cls, v: str) -> str:
        v = v.strip()
        return v or f"DOC-{uuid.uuid4().hex[:12].upper()}"

    @field_validator("client_name")
    @classmethod
    def client_name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("client_name must not be blank")
        return v.strip()

    @field_validator("client_email")
    @classmethod
    def client_email_has_at(cls, v: str) -> str:
        v = v.strip()
        if "@" not in v:
            raise ValueError("client_email must be an email address")
        return v

    @field_validator("case_id", "jurisdiction", "file_url")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("analysis_types")
    @classmethod
    def dedupe_analysis_types(cls, v: list[AnalysisType]) -> list[AnalysisType]:
        return list(dict.fromkeys(v))

    def to_form_fields(self) -> dict[str, str]:
        """Multipart fields in the shape the analysis webhook reads."""
        fields = {
            "document_id": self.document_id,
            "document_type": self.document_type.workflow_label,
            "client_name": self.client_name,
            "client_email": self.client_email,
            "analysis_type": json.dumps([t.value for t in self.analysis_types]),
        }
        if self.case_id:
            fields["case_id"] = self.case_id
        if self.jurisdiction:
            fields["jurisdiction"] = self.jurisdiction
        if self.file_url:
            fields["file_url"] = self.file_url
        return fields


class UploadedFile(BaseModel):
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


class SubmissionReceipt(BaseModel):
    """Outcome of a webhook submission.

    ``results`` holds the normalized workflow response when the workflow
    answered synchronously with JSON; otherwise results arrive later through
    the store.
    """

    document_id: str
    document_type: DocumentType
    submitted_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    status_code: int
    mode: str
    message: str = (
        "Document submitted successfully! Analysis will take 1-2 minutes. "
        "Check the History page for results."
    )
    results: Optional[AnalysisResult] = None
