from __future__ import annotations

from collections import Counter
from typing import Iterable

from docket.documents.models import LegalDocument

ALL = "all"
RISK_BANDS = ("low", "medium", "high")
LOW_RISK_MAX = 3
MEDIUM_RISK_MAX = 6

# Display names for the history filter; bounds come from the thresholds above.
RISK_BAND_LABELS = {
    "low": f"Low (up to {LOW_RISK_MAX})",
    "medium": f"Medium (above {LOW_RISK_MAX}, up to {MEDIUM_RISK_MAX})",
    "high": f"High (above {MEDIUM_RISK_MAX})",
}


def risk_band(score: float) -> str:
    """Band a 0-10 risk score: <=3 low, <=6 medium, else high."""
    if score <= LOW_RISK_MAX:
        return "low"
    if score <= MEDIUM_RISK_MAX:
        return "medium"
    return "high"


def matches_search(document: LegalDocument, query: str) -> bool:
    """Case-insensitive substring match on document id, client name or client email."""
    needle = query.strip().lower()
    if not needle:
        return True
    haystacks = (document.document_id, document.client_name, document.client_email)
    return any(needle in (h or "").lower() for h in haystacks)


def matches_risk_level(document: LegalDocument, risk_level: str) -> bool:
    if risk_level == ALL:
        return True
    # No score to compare against: excluded from every specific band.
    if document.results is None:
        return False
    return risk_band(document.results.risk_score) == risk_level


def filter_documents(
    documents: Iterable[LegalDocument],
    search: str = "",
    document_type: str = ALL,
    risk_level: str = ALL,
) -> list[LegalDocument]:
    """Apply the history-view filters. Pure; order is preserved."""
    kept = []
    for doc in documents:
        if not matches_search(doc, search):
            continue
        if document_type != ALL and doc.document_type != document_type:
            continue
        if not matches_risk_level(doc, risk_level):
            continue
        kept.append(doc)
    return kept


def summarize_bands(documents: Iterable[LegalDocument]) -> dict[str, int]:
    """Count documents per risk band; documents without results are skipped."""
    counter: Counter[str] = Counter({band: 0 for band in RISK_BANDS})
    for doc in documents:
        if doc.results is not None:
            counter[risk_band(doc.results.risk_score)] += 1
    return {band: counter[band] for band in RISK_BANDS}
