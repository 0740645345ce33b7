"""Decode stored analysis rows into LegalDocument records.

Two tables feed the history view and their columns do not overlap:
``contract_analysis`` keeps most of its result data in loosely-typed text
columns (JSON arrays, JSON objects, comma-joined text or a plain sentence,
depending on when the row was written), while ``legal_research`` keeps a
summary, a recommendation and a numeric applicability score. Neither decoder
raises on missing or malformed columns.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Mapping

from docket.documents.models import (
    AnalysisType,
    DocumentType,
    LegalDocument,
    ProcessingStatus,
)
from docket.results.coerce import (
    as_optional_text,
    as_string_list,
    as_text,
    coerce_clause_risk,
    coerce_risk_score,
    is_blank,
    lookup,
    parse_list_field,
    parse_page_number,
    to_float,
)
from docket.results.models import (
    AnalysisResult,
    ComplianceFlag,
    ExtractedClause,
    PrecedentCase,
    Severity,
)

logger = logging.getLogger(__name__)

NO_SUMMARY = "No summary available"
ROW_CONFIDENCE_DEFAULT = 0.85
ROW_RISK_MISSING = 0.0
ROW_RISK_UNKNOWN_WORD = 5.0
ROW_RELEVANCE = 0.8
ROW_FLAG_RECOMMENDATION = "Review this compliance issue"

CONTRACT_ANALYSIS_TYPES = [AnalysisType.RISK_ASSESSMENT, AnalysisType.CLAUSE_EXTRACTION]
RESEARCH_ANALYSIS_TYPES = [AnalysisType.PRECEDENT_SEARCH]


def parse_timestamp(value: Any) -> datetime | None:
    """Parse a stored timestamp; naive values are taken as UTC."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# ---------------------------------------------------------------------------
# Extracted clauses
# ---------------------------------------------------------------------------


def _has_clause_text(item: Any) -> bool:
    return isinstance(item, Mapping) and lookup(item, "Clause Text") is not None


def _structured_clause(item: Any, index: int) -> ExtractedClause | None:
    if not isinstance(item, Mapping):
        return None
    risk_score = lookup(item, "Risk Score")
    return ExtractedClause(
        id=f"clause-{index}",
        clause_type=as_text(lookup(item, "Clause Type", default=f"Clause {index + 1}")),
        content=as_text(lookup(item, "Clause Text", default="")),
        page_number=parse_page_number(lookup(item, "Section", "Page Number", "Page")),
        risk_level=coerce_clause_risk(lookup(item, "Risk Level")),
        risk_score=None if risk_score is None else coerce_risk_score(risk_score, 0.0),
        key_concerns=as_optional_text(lookup(item, "Key Concerns", "Concerns")),
        suggested_language=as_optional_text(lookup(item, "Suggested Language")),
    )


def _named_clause(item: Any, index: int) -> ExtractedClause | None:
    if not isinstance(item, Mapping):
        return None
    return ExtractedClause(
        id=f"clause-{index}",
        clause_type=as_text(
            lookup(item, "Type", "Name", "Title", default=f"Clause {index + 1}")
        ),
        content=as_text(lookup(item, "Text", "Description", "Content", default="")),
        page_number=parse_page_number(lookup(item, "Page", "Page Number")),
        risk_level=coerce_clause_risk(lookup(item, "Risk Level")),
    )


def _text_clause(item: Any, index: int) -> ExtractedClause | None:
    if not isinstance(item, str) or not item.strip():
        return None
    return ExtractedClause(
        id=f"clause-{index}",
        clause_type=f"Clause {index + 1}",
        content=item.strip(),
    )


ClauseBuilder = Callable[[Any, int], ExtractedClause | None]

# Matched against the first element only; the first matching shape decodes
# the whole column.
CLAUSE_SHAPES: list[tuple[str, Callable[[Any], bool], ClauseBuilder]] = [
    ("structured", _has_clause_text, _structured_clause),
    ("named", lambda first: isinstance(first, Mapping), _named_clause),
    ("text", lambda first: isinstance(first, str), _text_clause),
]


def decode_clauses(value: Any) -> list[ExtractedClause]:
    items = parse_list_field(value)
    if not items:
        return []
    first = items[0]
    for name, matches, build in CLAUSE_SHAPES:
        if not matches(first):
            continue
        clauses: list[ExtractedClause] = []
        for item in items:
            clause = build(item, len(clauses))
            if clause is not None:
                clauses.append(clause)
        return clauses
    logger.debug("Unrecognized extracted_clauses shape: %s", type(first).__name__)
    return []


# ---------------------------------------------------------------------------
# Flags and precedents
# ---------------------------------------------------------------------------


def decode_flags(value: Any) -> list[ComplianceFlag]:
    flags = []
    for item in parse_list_field(value):
        if is_blank(item):
            continue
        text = as_text(item)
        flags.append(
            ComplianceFlag(
                id=f"flag-{len(flags)}",
                category=text,
                description=text,
                severity=Severity.WARNING,
                recommendation=ROW_FLAG_RECOMMENDATION,
            )
        )
    return flags


def decode_precedents(value: Any, jurisdiction: str | None) -> list[PrecedentCase]:
    year = datetime.now().year
    cases = []
    for item in parse_list_field(value):
        if is_blank(item):
            continue
        text = as_text(item)
        cases.append(
            PrecedentCase(
                id=f"case-{len(cases)}",
                case_name=text,
                citation=text,
                relevance_score=ROW_RELEVANCE,
                summary=text,
                jurisdiction=jurisdiction or "Unknown",
                year=year,
            )
        )
    return cases


# ---------------------------------------------------------------------------
# Rows
# ---------------------------------------------------------------------------


def _column(row: Mapping[str, Any], name: str) -> Any:
    value = row.get(name)
    return None if is_blank(value) else value


def decode_contract_row(row: Mapping[str, Any]) -> LegalDocument:
    """Decode a ``contract_analysis`` row. Rows only exist once analysis finished."""
    row_id = as_text(_column(row, "id"))
    jurisdiction = as_optional_text(_column(row, "jurisdiction"))
    created_at = parse_timestamp(row.get("created_at")) or datetime.now(timezone.utc)

    results = AnalysisResult(
        executive_summary=as_text(
            _column(row, "analysis_summary") or _column(row, "executive_summary") or NO_SUMMARY
        ),
        risk_score=coerce_risk_score(
            _column(row, "risk_level"), ROW_RISK_MISSING, unknown_word=ROW_RISK_UNKNOWN_WORD
        ),
        confidence_score=to_float(_column(row, "confidence_score"), ROW_CONFIDENCE_DEFAULT),
        compliance_flags=decode_flags(_column(row, "compliance_flags")),
        extracted_clauses=decode_clauses(_column(row, "extracted_clauses")),
        precedent_cases=decode_precedents(_column(row, "precedent_cases"), jurisdiction),
        recommended_actions=as_string_list(_column(row, "recommendations"))[:1],
        processing_time_seconds=0.0,
    )

    return LegalDocument(
        id=row_id,
        document_id=row_id,
        document_type=DocumentType.CONTRACT,
        client_name=as_text(_column(row, "client_name") or "Unknown"),
        client_email=as_text(_column(row, "client_email") or ""),
        jurisdiction=jurisdiction,
        analysis_types=CONTRACT_ANALYSIS_TYPES,
        status=ProcessingStatus.COMPLETED,
        created_at=created_at,
        completed_at=created_at,
        results=results,
    )


def decode_research_row(row: Mapping[str, Any]) -> LegalDocument:
    """Decode a ``legal_research`` row. Applicability score doubles as the risk score."""
    row_id = as_text(_column(row, "id"))
    created_at = parse_timestamp(row.get("created_at")) or datetime.now(timezone.utc)

    results = AnalysisResult(
        executive_summary=as_text(_column(row, "research_summary") or NO_SUMMARY),
        risk_score=to_float(_column(row, "applicability_score"), 0.0),
        confidence_score=ROW_CONFIDENCE_DEFAULT,
        compliance_flags=[],
        extracted_clauses=[],
        precedent_cases=[],
        recommended_actions=as_string_list(_column(row, "recommendations"))[:1],
        processing_time_seconds=0.0,
    )

    return LegalDocument(
        id=row_id,
        document_id=row_id,
        document_type=DocumentType.CASE_LAW,
        client_name=as_text(_column(row, "client_name") or "Unknown"),
        client_email=as_text(_column(row, "client_email") or ""),
        jurisdiction=as_optional_text(_column(row, "jurisdiction")),
        analysis_types=RESEARCH_ANALYSIS_TYPES,
        status=ProcessingStatus.COMPLETED,
        created_at=created_at,
        completed_at=created_at,
        results=results,
    )
