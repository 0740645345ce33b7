"""Unit tests for the workflow-output normalizer."""

import json
from datetime import datetime

import pytest

from docket.results.models import AnalysisResult, ClauseRiskLevel, Severity
from docket.results.normalizer import (
    CONTRACT_ACTION_DEFAULT,
    CONTRACT_SUMMARY_DEFAULT,
    FALLBACK_ACTION,
    FALLBACK_SUMMARY,
    RESEARCH_ACTION_DEFAULT,
    RESEARCH_SUMMARY_DEFAULT,
    detect_family,
    infer_severity,
    normalize,
    unwrap,
)

CONTRACT_OUTPUT = {
    "Analysis Summary": "y",
    "Risk Score": 4,
    "Compliance Flags": ["Privacy - CRITICAL missing clause"],
}

RESEARCH_OUTPUT = {
    "Research Summary": "x",
    "Applicability Score": 7,
}


# ---------------------------------------------------------------------------
# Unwrapping
# ---------------------------------------------------------------------------


class TestUnwrap:
    def test_plain_dict(self):
        assert unwrap({"a": 1}) == {"a": 1}

    def test_list_takes_first(self):
        assert unwrap([{"a": 1}, {"b": 2}]) == {"a": 1}

    def test_empty_list(self):
        assert unwrap([]) == {}

    def test_json_then_output(self):
        assert unwrap({"json": {"output": {"a": 1}}}) == {"a": 1}

    def test_data(self):
        assert unwrap({"data": {"a": 1}}) == {"a": 1}

    def test_sequential_json_data_output(self):
        raw = [{"json": {"data": {"output": {"a": 1}}}}]
        assert unwrap(raw) == {"a": 1}

    def test_order_is_fixed(self):
        # ``output`` is checked after ``data``, so an output sibling of data is not used.
        raw = {"data": {"a": 1}, "output": {"b": 2}}
        assert unwrap(raw) == {"a": 1}

    def test_json_string(self):
        assert unwrap(json.dumps({"output": {"a": 1}})) == {"a": 1}

    def test_non_json_string(self):
        assert unwrap("not json") == {}

    def test_scalar(self):
        assert unwrap(42) == {}

    def test_none(self):
        assert unwrap(None) == {}


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


class TestDetectFamily:
    @pytest.mark.parametrize(
        "key",
        ["Research Summary", "case_analysis", "Applicability Score", "Recommendations", "recommendations"],
    )
    def test_research_signature(self, key):
        assert detect_family({key: "v"}) == "legal_research"

    @pytest.mark.parametrize("key", ["Analysis Summary", "extracted_clauses", "risk_score"])
    def test_contract_signature(self, key):
        assert detect_family({key: "v"}) == "contract_analysis"

    def test_research_checked_first(self):
        assert detect_family({"Analysis Summary": "a", "Recommendations": "r"}) == "legal_research"

    def test_unknown(self):
        assert detect_family({"foo": "bar"}) is None

    def test_zero_score_counts_as_present(self):
        assert detect_family({"Risk Score": 0}) == "contract_analysis"


# ---------------------------------------------------------------------------
# Generic fallback
# ---------------------------------------------------------------------------


class TestGenericFallback:
    def test_empty_object(self):
        result = normalize({})
        assert isinstance(result, AnalysisResult)
        assert result.compliance_flags == []
        assert result.extracted_clauses == []
        assert result.precedent_cases == []
        assert result.recommended_actions == [FALLBACK_ACTION]
        assert result.risk_score == 0
        assert result.confidence_score == 0
        assert result.executive_summary == FALLBACK_SUMMARY

    @pytest.mark.parametrize("raw", [None, [], "", "garbage", 3, [None], {"output": None}])
    def test_never_raises(self, raw):
        result = normalize(raw)
        assert result.recommended_actions == [FALLBACK_ACTION]

    def test_unknown_shape_keeps_confidence(self):
        result = normalize({"Confidence Score": 0.4, "recommendation": "Call the client"})
        assert result.confidence_score == 0.4
        assert result.recommended_actions == ["Call the client"]


# ---------------------------------------------------------------------------
# Legal research family
# ---------------------------------------------------------------------------


class TestResearchOutput:
    def test_basic_scores(self):
        result = normalize(RESEARCH_OUTPUT)
        assert result.risk_score == 7
        assert result.confidence_score == 0.85
        assert result.extracted_clauses == []
        assert result.executive_summary == "x"

    def test_defaults(self):
        result = normalize({"Case Analysis": "[]"})
        assert result.executive_summary == RESEARCH_SUMMARY_DEFAULT
        assert result.risk_score == 5
        assert result.recommended_actions == [RESEARCH_ACTION_DEFAULT]
        assert result.processing_time_seconds == 0

    def test_case_analysis_to_precedents(self):
        result = normalize({
            "output": {
                "research_summary": "s",
                "case_analysis": [
                    {
                        "citation": "Smith v Jones, [2001] UKHL 1",
                        "authority_level": "BINDING",
                        "applicability_score": 9,
                        "holding": "Held X.",
                    },
                    {
                        "Citation": "Doe v Roe",
                        "Authority Level": "PERSUASIVE",
                        "Applicability to Our Case": "Similar facts.",
                    },
                    {},
                ],
            }
        })
        first, second, third = result.precedent_cases
        assert first.id == "case-0"
        assert first.case_name == "Smith v Jones"
        assert first.citation == "Smith v Jones, [2001] UKHL 1"
        assert first.relevance_score == pytest.approx(0.9)
        assert first.summary == "Held X."
        assert first.jurisdiction == "BINDING"
        assert first.year == datetime.now().year

        assert second.case_name == "Doe v Roe"
        assert second.relevance_score == pytest.approx(0.5)
        assert second.summary == "Similar facts."
        assert second.jurisdiction == "PERSUASIVE"

        assert third.case_name == "Unknown Case"
        assert third.citation == "No citation"
        assert third.summary == "No summary available"
        assert third.jurisdiction == "Unknown"

    def test_legislative_alert_flag(self):
        result = normalize({
            "Research Summary": "s",
            "Legislative Alert": {"Statute": "Data Act 2025", "Impact": "New consent rules"},
        })
        assert len(result.compliance_flags) == 1
        flag = result.compliance_flags[0]
        assert flag.category == "Legislative Update"
        assert flag.severity == Severity.WARNING
        assert "Data Act 2025" in flag.description
        assert "New consent rules" in flag.description

    @pytest.mark.parametrize("key", ["statute", "Statute"])
    def test_unknown_statute_suppressed(self, key):
        result = normalize({"Research Summary": "s", "legislative_alert": {key: "UNKNOWN"}})
        assert result.compliance_flags == []

    def test_sentinel_is_case_sensitive(self):
        result = normalize({"Research Summary": "s", "legislative_alert": {"statute": "unknown"}})
        assert len(result.compliance_flags) == 1

    def test_recommendations_list(self):
        result = normalize({"Recommendations": ["File motion", "Notify client"]})
        assert result.recommended_actions == ["File motion", "Notify client"]

    def test_case_analysis_as_json_string(self):
        raw = {"Research Summary": "s", "Case Analysis": json.dumps([{"citation": "A v B, 1"}])}
        result = normalize(raw)
        assert result.precedent_cases[0].case_name == "A v B"


# ---------------------------------------------------------------------------
# Contract analysis family
# ---------------------------------------------------------------------------


class TestContractOutput:
    def test_flag_category_and_severity(self):
        result = normalize(CONTRACT_OUTPUT)
        assert result.risk_score == 4
        assert len(result.compliance_flags) == 1
        flag = result.compliance_flags[0]
        assert flag.severity == Severity.CRITICAL
        assert flag.category == "Privacy"
        assert flag.description == "CRITICAL missing clause"
        assert flag.recommendation == "Review and address this compliance issue"

    def test_flag_without_delimiter(self):
        result = normalize({"Analysis Summary": "y", "Compliance Flags": ["Fully COMPLIANT"]})
        flag = result.compliance_flags[0]
        assert flag.category == "Fully COMPLIANT"
        assert flag.description == "Fully COMPLIANT"
        assert flag.severity == Severity.INFO

    def test_flag_keeps_later_delimiters(self):
        result = normalize({"Risk Score": 1, "compliance_flags": ["A - b - c"]})
        assert result.compliance_flags[0].category == "A"
        assert result.compliance_flags[0].description == "b - c"

    def test_flag_empty_category(self):
        result = normalize({"Risk Score": 1, "compliance_flags": [" - detail"]})
        assert result.compliance_flags[0].category == "Compliance"

    def test_defaults(self):
        result = normalize({"Extracted Clauses": "[]"})
        assert result.executive_summary == CONTRACT_SUMMARY_DEFAULT
        assert result.risk_score == 0
        assert result.confidence_score == 0.8
        assert result.recommended_actions == [CONTRACT_ACTION_DEFAULT]
        assert result.processing_time_seconds == 0

    def test_clauses(self):
        result = normalize({
            "output": {
                "analysis_summary": "s",
                "extracted_clauses": [
                    {
                        "clause_type": "Indemnity",
                        "section": "Section 12",
                        "risk_level": "HIGH",
                        "clause_text": "Supplier indemnifies.",
                        "key_concerns": "Uncapped",
                    },
                    {"Clause Text": "Governed by English law.", "Section": "n/a"},
                ],
            }
        })
        first, second = result.extracted_clauses
        assert first.id == "clause-0"
        assert first.clause_type == "Indemnity"
        assert first.page_number == 12
        assert first.risk_level == ClauseRiskLevel.HIGH
        assert first.content == "Supplier indemnifies."
        assert first.key_concerns == "Uncapped"
        assert second.clause_type == "Clause 2"
        assert second.page_number == 1
        assert second.risk_level == ClauseRiskLevel.MEDIUM

    def test_precedent_strings(self):
        result = normalize({
            "Risk Score": 3,
            "Precedent Cases": ["Hadley v Baxendale (1854) 9 Exch 341", "No parens here"],
        })
        first, second = result.precedent_cases
        assert first.citation == "1854"
        assert first.case_name == "Hadley v Baxendale  9 Exch 341"
        assert first.relevance_score == 0.8
        assert first.jurisdiction == "Unknown"
        assert first.year == datetime.now().year
        assert second.citation == "No parens here"
        assert second.case_name == "No parens here"

    def test_precedent_only_parenthesized(self):
        result = normalize({"Risk Score": 3, "Precedent Cases": ["(2020) EWHC 1"]})
        case = result.precedent_cases[0]
        assert case.citation == "2020"
        assert case.case_name == "EWHC 1"

    def test_scalar_fields(self):
        result = normalize({
            "Analysis Summary": "s",
            "Confidence Score": "0.65",
            "Recommended Action": "Renegotiate",
            "Processing Time": 12.5,
        })
        assert result.confidence_score == 0.65
        assert result.recommended_actions == ["Renegotiate"]
        assert result.processing_time_seconds == 12.5

    def test_textual_risk_tier(self):
        assert normalize({"Risk Score": "High"}).risk_score == 8

    def test_negative_processing_time_clamped(self):
        assert normalize({"Risk Score": 1, "Processing Time": -3}).processing_time_seconds == 0

    def test_flags_as_json_string(self):
        raw = {"Risk Score": 2, "Compliance Flags": json.dumps(["A - MISSING b"])}
        assert normalize(raw).compliance_flags[0].severity == Severity.WARNING


class TestSeverity:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("CRITICAL gap", Severity.CRITICAL),
            ("non-compliant", Severity.CRITICAL),
            ("incomplete schedule", Severity.WARNING),
            ("Missing signature", Severity.WARNING),
            ("compliant", Severity.INFO),
            ("needs a look", Severity.WARNING),
        ],
    )
    def test_inference(self, text, expected):
        assert infer_severity(text) == expected


class TestDeterministicIds:
    def test_flag_ids_stable(self):
        raw = {"Risk Score": 5, "Compliance Flags": ["A - x", "B - y", "C - z"]}
        first = [f.id for f in normalize(raw).compliance_flags]
        second = [f.id for f in normalize(raw).compliance_flags]
        assert first == second == ["compliance-0", "compliance-1", "compliance-2"]

    def test_clause_and_case_ids(self):
        raw = {
            "Risk Score": 5,
            "Extracted Clauses": [{"clause_text": "a"}, {"clause_text": "b"}],
            "Precedent Cases": ["X (1)", "Y (2)"],
        }
        result = normalize(raw)
        assert [c.id for c in result.extracted_clauses] == ["clause-0", "clause-1"]
        assert [c.id for c in result.precedent_cases] == ["case-0", "case-1"]


class TestHostileInput:
    def test_deeply_nested_string(self):
        result = normalize("[" * 200_000 + "]" * 200_000)
        assert result.recommended_actions == [FALLBACK_ACTION]

    def test_huge_risk_score_keeps_contract_fields(self):
        raw = '{"Analysis Summary": "y", "Risk Score": 1' + "0" * 400 + "}"
        result = normalize(raw)
        assert result.executive_summary == "y"
        assert result.risk_score == 0

    def test_deeply_nested_flags_field(self):
        raw = {"Analysis Summary": "y", "Compliance Flags": "[" * 100_000 + "]" * 100_000}
        result = normalize(raw)
        assert result.executive_summary == "y"
        assert result.compliance_flags == []


class TestUnratedApplicability:
    def test_zero_top_level_score_reads_as_default(self):
        result = normalize({"Research Summary": "x", "Applicability Score": 0})
        assert result.risk_score == 5

    def test_zero_case_score_reads_as_default(self):
        result = normalize({
            "Research Summary": "x",
            "Case Analysis": [{"citation": "A v B", "applicability_score": 0}],
        })
        assert result.precedent_cases[0].relevance_score == pytest.approx(0.5)
