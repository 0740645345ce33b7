from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from docket.results.models import AnalysisResult


class DocumentType(StrEnum):
    CONTRACT = "contract"
    CASE_LAW = "case_law"

    @property
    def workflow_label(self) -> str:
        """Title Case spelling the analysis workflow expects."""
        return {DocumentType.CONTRACT: "Contract", DocumentType.CASE_LAW: "Case Law"}[self]


class AnalysisType(StrEnum):
    RISK_ASSESSMENT = "risk_assessment"
    CLAUSE_EXTRACTION = "clause_extraction"
    PRECEDENT_SEARCH = "precedent_search"
    LEGISLATIVE_UPDATE = "legislative_update"


class ProcessingStatus(StrEnum):
    QUEUED = "queued"
    EXTRACTING_TEXT = "extracting_text"
    ANALYZING = "analyzing"
    COMPLETED = "completed"
    FAILED = "failed"


class LegalDocument(BaseModel):
    """Immutable document record decoded from a stored analysis row."""

    id: str
    document_id: str
    document_type: DocumentType
    client_name: str
    client_email: str = ""
    case_id: Optional[str] = None
    jurisdiction: Optional[str] = None
    analysis_types: list[AnalysisType] = Field(min_length=1)
    file_name: Optional[str] = None
    file_url: Optional[str] = None
    status: ProcessingStatus
    created_at: datetime
    completed_at: Optional[datetime] = None
    results: Optional[AnalysisResult] = None

    model_config = ConfigDict(frozen=True)
