"""Normalize raw analysis-workflow responses into an AnalysisResult.

The workflow is not versioned: the same logical field may come back as
"Risk Score" or "risk_score", nested under ``json``/``data``/``output``, and
lists may arrive JSON-encoded. Two output families are known (legal research
and contract analysis); anything else gets a generic best-effort result.
``normalize`` never raises.
"""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime
from typing import Any, Callable, Mapping

from docket.results.coerce import (
    as_optional_text,
    as_string_list,
    as_text,
    coerce_clause_risk,
    coerce_risk_score,
    has_any,
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

UNWRAP_KEYS = ("json", "data", "output")

RESEARCH_SIGNATURE = (
    "Research Summary",
    "Case Analysis",
    "Applicability Score",
    "Recommendations",
)
CONTRACT_SIGNATURE = (
    "Analysis Summary",
    "Extracted Clauses",
    "Risk Score",
)

CONTRACT_SUMMARY_DEFAULT = "Analysis completed successfully."
CONTRACT_ACTION_DEFAULT = "Review the analysis and take appropriate action"
CONTRACT_CONFIDENCE_DEFAULT = 0.8
COMPLIANCE_RECOMMENDATION = "Review and address this compliance issue"
PRECEDENT_RELEVANCE = 0.8

RESEARCH_SUMMARY_DEFAULT = "Legal research completed successfully."
RESEARCH_ACTION_DEFAULT = "Review the research findings and proceed accordingly"
RESEARCH_CONFIDENCE = 0.85
RESEARCH_APPLICABILITY_DEFAULT = 5.0
LEGISLATIVE_SENTINEL = "UNKNOWN"

FALLBACK_SUMMARY = "Analysis completed but results format is unexpected."
FALLBACK_ACTION = "Please review the analysis"

_PARENTHESIZED = re.compile(r"\(([^)]+)\)")


def _current_year() -> int:
    return datetime.now().year


# ---------------------------------------------------------------------------
# Unwrapping
# ---------------------------------------------------------------------------


def unwrap(raw: Any) -> dict[str, Any]:
    """Peel the transport envelope off a workflow response.

    Applied in order against the current value: JSON-decode a string, take the
    first element of a list, then descend into ``json``, ``data`` and
    ``output`` when present.
    """
    value = raw
    if isinstance(value, (str, bytes)):
        try:
            value = json.loads(value)
        except (json.JSONDecodeError, UnicodeDecodeError, ValueError, RecursionError):
            return {}
    if isinstance(value, list):
        value = value[0] if value else {}
    for key in UNWRAP_KEYS:
        if isinstance(value, Mapping) and value.get(key) is not None:
            value = value[key]
    if not isinstance(value, Mapping):
        return {}
    return dict(value)


# ---------------------------------------------------------------------------
# Contract analysis family
# ---------------------------------------------------------------------------


def infer_severity(flag: str) -> Severity:
    upper = flag.upper()
    if "CRITICAL" in upper or "NON-COMPLIANT" in upper:
        return Severity.CRITICAL
    if "INCOMPLETE" in upper or "MISSING" in upper:
        return Severity.WARNING
    if "COMPLIANT" in upper:
        return Severity.INFO
    return Severity.WARNING


def _contract_flag(item: Any, index: int) -> ComplianceFlag:
    flag = as_text(item)
    head, sep, rest = flag.partition(" - ")
    return ComplianceFlag(
        id=f"compliance-{index}",
        category=head if head.strip() else "Compliance",
        description=rest if sep and rest else flag,
        severity=infer_severity(flag),
        recommendation=COMPLIANCE_RECOMMENDATION,
    )


def _contract_clause(item: Any, index: int) -> ExtractedClause:
    if not isinstance(item, Mapping):
        return ExtractedClause(
            id=f"clause-{index}",
            clause_type=f"Clause {index + 1}",
            content=as_text(item),
        )
    risk_score = lookup(item, "Risk Score")
    return ExtractedClause(
        id=f"clause-{index}",
        clause_type=as_text(lookup(item, "Clause Type", default=f"Clause {index + 1}")),
        content=as_text(lookup(item, "Clause Text", "Content", default="")),
        page_number=parse_page_number(lookup(item, "Section", "Page Number")),
        risk_level=coerce_clause_risk(lookup(item, "Risk Level")),
        risk_score=None if risk_score is None else coerce_risk_score(risk_score, 0.0),
        key_concerns=as_optional_text(lookup(item, "Key Concerns")),
        suggested_language=as_optional_text(lookup(item, "Suggested Language")),
    )


def _contract_precedent(item: Any, index: int) -> PrecedentCase:
    text = as_text(item)
    match = _PARENTHESIZED.search(text)
    citation = match.group(1) if match else text
    name = _PARENTHESIZED.sub("", text, count=1).strip()
    return PrecedentCase(
        id=f"case-{index}",
        case_name=name or text,
        citation=citation,
        relevance_score=PRECEDENT_RELEVANCE,
        summary=f"Relevant precedent: {text}",
        jurisdiction="Unknown",
        year=_current_year(),
    )


def decode_contract_output(output: Mapping[str, Any]) -> AnalysisResult:
    flags = parse_list_field(lookup(output, "Compliance Flags"))
    clauses = parse_list_field(lookup(output, "Extracted Clauses"))
    precedents = parse_list_field(lookup(output, "Precedent Cases"))

    actions = as_string_list(lookup(output, "Recommended Action", "Recommendations"))

    return AnalysisResult(
        executive_summary=as_text(
            lookup(
                output,
                "Analysis Summary",
                "Executive Summary",
                default=CONTRACT_SUMMARY_DEFAULT,
            )
        ),
        risk_score=coerce_risk_score(lookup(output, "Risk Score"), 0.0),
        confidence_score=to_float(
            lookup(output, "Confidence Score"), CONTRACT_CONFIDENCE_DEFAULT
        ),
        compliance_flags=[_contract_flag(f, i) for i, f in enumerate(flags)],
        extracted_clauses=[_contract_clause(c, i) for i, c in enumerate(clauses)],
        precedent_cases=[_contract_precedent(p, i) for i, p in enumerate(precedents)],
        recommended_actions=actions or [CONTRACT_ACTION_DEFAULT],
        processing_time_seconds=max(0.0, to_float(lookup(output, "Processing Time"), 0.0)),
    )


# ---------------------------------------------------------------------------
# Legal research family
# ---------------------------------------------------------------------------


def _research_precedent(item: Any, index: int) -> PrecedentCase:
    if not isinstance(item, Mapping):
        item = {"citation": as_text(item)}
    citation = lookup(item, "Citation")
    if citation is None:
        case_name = "Unknown Case"
    else:
        citation = as_text(citation)
        case_name = citation.split(",", 1)[0].strip() or citation
    # A score of 0 means the workflow did not rate the case.
    applicability = (
        to_float(lookup(item, "Applicability Score"), RESEARCH_APPLICABILITY_DEFAULT)
        or RESEARCH_APPLICABILITY_DEFAULT
    )
    # Authority level (BINDING/PERSUASIVE/SECONDARY) is carried in the
    # jurisdiction field; stored rows already rely on this mapping.
    return PrecedentCase(
        id=f"case-{index}",
        case_name=case_name,
        citation=citation if citation is not None else "No citation",
        relevance_score=min(1.0, max(0.0, applicability / 10)),
        summary=as_text(
            lookup(
                item,
                "Holding",
                "Applicability to Our Case",
                default="No summary available",
            )
        ),
        jurisdiction=as_text(lookup(item, "Authority Level", default="Unknown")),
        year=_current_year(),
    )


def _legislative_flags(alert: Any) -> list[ComplianceFlag]:
    if not isinstance(alert, Mapping) or not alert:
        return []
    if alert.get("statute") == LEGISLATIVE_SENTINEL or alert.get("Statute") == LEGISLATIVE_SENTINEL:
        return []
    statute = as_text(lookup(alert, "Statute", default="Unspecified statute"))
    impact = as_text(lookup(alert, "Impact", default="No impact details provided"))
    return [
        ComplianceFlag(
            id="compliance-0",
            category="Legislative Update",
            description=f"{statute}: {impact}",
            severity=Severity.WARNING,
            recommendation="Review recent legislative changes",
        )
    ]


def decode_research_output(output: Mapping[str, Any]) -> AnalysisResult:
    cases = parse_list_field(lookup(output, "Case Analysis"))
    actions = as_string_list(lookup(output, "Recommendations", "Recommendation"))

    return AnalysisResult(
        executive_summary=as_text(
            lookup(output, "Research Summary", default=RESEARCH_SUMMARY_DEFAULT)
        ),
        # Applicability (1-10) stands in for the risk score so both families
        # render through the same risk card; 0 is unrated, like a missing score.
        risk_score=coerce_risk_score(
            lookup(output, "Applicability Score"), RESEARCH_APPLICABILITY_DEFAULT
        )
        or RESEARCH_APPLICABILITY_DEFAULT,
        confidence_score=RESEARCH_CONFIDENCE,
        compliance_flags=_legislative_flags(lookup(output, "Legislative Alert")),
        extracted_clauses=[],
        precedent_cases=[_research_precedent(c, i) for i, c in enumerate(cases)],
        recommended_actions=actions or [RESEARCH_ACTION_DEFAULT],
        processing_time_seconds=0.0,
    )


# ---------------------------------------------------------------------------
# Generic fallback
# ---------------------------------------------------------------------------


def decode_generic_output(output: Mapping[str, Any]) -> AnalysisResult:
    actions = as_string_list(lookup(output, "Recommendations", "Recommendation"))
    return AnalysisResult(
        executive_summary=as_text(
            lookup(output, "Research Summary", "Analysis Summary", default=FALLBACK_SUMMARY)
        ),
        risk_score=coerce_risk_score(lookup(output, "Risk Score", "Applicability Score"), 0.0),
        confidence_score=to_float(lookup(output, "Confidence Score"), 0.0),
        recommended_actions=actions[:1] or [FALLBACK_ACTION],
        processing_time_seconds=0.0,
    )


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

Decoder = Callable[[Mapping[str, Any]], AnalysisResult]

# Evaluated top to bottom. "Recommendations" belongs to the research
# signature, so research must stay ahead of contract.
FAMILIES: list[tuple[str, tuple[str, ...], Decoder]] = [
    ("legal_research", RESEARCH_SIGNATURE, decode_research_output),
    ("contract_analysis", CONTRACT_SIGNATURE, decode_contract_output),
]


def detect_family(output: Mapping[str, Any]) -> str | None:
    for name, signature, _ in FAMILIES:
        if has_any(output, signature):
            return name
    return None


def normalize(raw: Any) -> AnalysisResult:
    """Convert any workflow response into an AnalysisResult. Never raises."""
    try:
        output = unwrap(raw)
    except Exception:
        logger.exception("Could not unwrap workflow output")
        output = {}
    for name, signature, decoder in FAMILIES:
        if not has_any(output, signature):
            continue
        logger.debug("Detected %s workflow output", name)
        try:
            return decoder(output)
        except Exception:
            logger.exception("Failed to decode %s workflow output, falling back", name)
            break

    if is_blank(output):
        logger.warning("Empty workflow output, using generic result")
    else:
        logger.warning(
            "Unknown workflow output format (keys: %s), attempting generic transformation",
            ", ".join(sorted(str(k) for k in output)[:10]),
        )
    try:
        return decode_generic_output(output)
    except Exception:
        logger.exception("Generic workflow output decode failed")
        return AnalysisResult(
            executive_summary=FALLBACK_SUMMARY,
            recommended_actions=[FALLBACK_ACTION],
        )
