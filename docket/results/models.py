from __future__ import annotations

from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Severity(StrEnum):
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class ClauseRiskLevel(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ComplianceFlag(BaseModel):
    """A single compliance finding. ``id`` is positional (``flag-<n>`` / ``compliance-<n>``)."""

    id: str
    category: str = "Compliance"
    description: str = ""
    severity: Severity = Severity.WARNING
    recommendation: str = ""

    model_config = ConfigDict(frozen=True)


class ExtractedClause(BaseModel):
    """A clause pulled out of a contract. ``id`` is positional (``clause-<n>``)."""

    id: str
    clause_type: str
    content: str = ""
    page_number: int = Field(default=1, ge=1)
    risk_level: ClauseRiskLevel = ClauseRiskLevel.MEDIUM
    risk_score: Optional[float] = None
    key_concerns: Optional[str] = None
    suggested_language: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class PrecedentCase(BaseModel):
    """A related case. ``jurisdiction`` holds the authority level for legal-research output."""

    id: str
    case_name: str
    citation: str
    relevance_score: float = Field(default=0.8, ge=0, le=1)
    summary: str = ""
    jurisdiction: str = "Unknown"
    year: int

    model_config = ConfigDict(frozen=True)


class AnalysisResult(BaseModel):
    """Canonical analysis outcome consumed by every display surface.

    Every field carries a default so a result decoded from an empty payload
    still renders.
    """

    executive_summary: str = "No summary available"
    risk_score: float = 0.0
    confidence_score: float = 0.0
    compliance_flags: list[ComplianceFlag] = Field(default_factory=list)
    extracted_clauses: list[ExtractedClause] = Field(default_factory=list)
    precedent_cases: list[PrecedentCase] = Field(default_factory=list)
    recommended_actions: list[str] = Field(default_factory=list)
    processing_time_seconds: float = Field(default=0.0, ge=0)

    model_config = ConfigDict(frozen=True)
