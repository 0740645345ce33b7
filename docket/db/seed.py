from __future__ import annotations

import json
import random
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from docket.db.database import CONTRACT_ANALYSIS, LEGAL_RESEARCH
from docket.db.store import SQLiteStore

CLIENTS = [
    ("Acme Corporation", "legal@acme.example"),
    ("Globex Ltd", "counsel@globex.example"),
    ("Initech", "contracts@initech.example"),
    ("Umbrella Holdings", "gc@umbrella.example"),
    ("Stark Industries", "legal@stark.example"),
]

JURISDICTIONS = ["India", "England and Wales", "Delaware", "Singapore", None]

CONTRACT_SUMMARIES = [
    "Supply agreement with one-sided termination rights and no liability cap.",
    "Standard NDA; mutual obligations, five-year term, no unusual clauses.",
    "SaaS subscription terms with auto-renewal and broad data-processing rights.",
    "Lease agreement with escalating rent and restrictive assignment clause.",
]

RISK_LEVELS = ["2", "4.5", "7", "9.5", "Low", "Medium", "High", "critical", "unknown-word", None]

FLAGS = [
    "GDPR - NON-COMPLIANT cross-border transfer",
    "Termination - notice period MISSING",
    "Anti-bribery - COMPLIANT",
    "Data retention - schedule INCOMPLETE",
]

PRECEDENTS = [
    "Hadley v Baxendale (1854) 9 Exch 341",
    "Carlill v Carbolic Smoke Ball Co (1893) 1 QB 256",
    "Photo Production Ltd v Securicor (1980) AC 827",
]

CLAUSES = [
    {
        "clause_type": "Limitation of Liability",
        "section": "Section 12.1",
        "risk_level": "high",
        "clause_text": "Neither party's liability shall be limited in any way.",
        "risk_score": 8,
        "key_concerns": "Uncapped exposure",
        "suggested_language": "Cap liability at twelve months of fees.",
    },
    {
        "clause_type": "Governing Law",
        "section": "Section 20",
        "risk_level": "low",
        "clause_text": "This agreement is governed by the laws of England and Wales.",
    },
]

RESEARCH_SUMMARIES = [
    "Binding appellate authority supports the limitation defence.",
    "Persuasive authority only; the point is unsettled in this jurisdiction.",
    "Secondary sources suggest the clause would be read narrowly.",
]


def _created_at() -> str:
    offset = timedelta(minutes=random.randint(0, 60 * 24 * 30))
    return (datetime.now(timezone.utc) - offset).isoformat()


def _list_column(items: list[Any]) -> Optional[str]:
    """Render a list the way rows have been written over time: JSON, CSV, or one sentence."""
    style = random.choice(["json", "csv", "sentence", "empty"])
    if style == "empty" or not items:
        return None
    if style == "json":
        return json.dumps(items)
    if style == "csv":
        return ", ".join(str(i) for i in items)
    return str(items[0])


def generate_contract_row() -> dict[str, Any]:
    """A contract_analysis row using one of the historical column encodings."""
    client_name, client_email = random.choice(CLIENTS)
    clause_style = random.choice(["structured", "named", "strings", "empty"])
    if clause_style == "structured":
        clauses: Optional[str] = json.dumps(random.sample(CLAUSES, k=random.randint(1, 2)))
    elif clause_style == "named":
        clauses = json.dumps([{"type": "Payment", "text": "Net 30 from invoice.", "page": "p. 4"}])
    elif clause_style == "strings":
        clauses = json.dumps(["Confidentiality survives termination.", "Fees exclude VAT."])
    else:
        clauses = None

    return {
        "id": uuid.uuid4().hex,
        "client_name": client_name,
        "client_email": client_email,
        "document_type": "Contract",
        "jurisdiction": random.choice(JURISDICTIONS),
        "confidence_score": random.choice(["0.9", "0.75", "n/a", None]),
        "recommendations": random.choice(
            ["Negotiate a liability cap.", "Request a data processing addendum.", None]
        ),
        "risk_level": random.choice(RISK_LEVELS),
        "precedent_cases": _list_column(random.sample(PRECEDENTS, k=2)),
        "analysis_summary": random.choice(CONTRACT_SUMMARIES + [None]),
        "compliance_flags": _list_column(random.sample(FLAGS, k=2)),
        "extracted_clauses": clauses,
        "created_at": _created_at(),
    }


def generate_research_row() -> dict[str, Any]:
    client_name, client_email = random.choice(CLIENTS)
    return {
        "client_name": client_name,
        "client_email": client_email,
        "document_type": "Case Law",
        "jurisdiction": random.choice(JURISDICTIONS),
        "created_at": _created_at(),
        "research_summary": random.choice(RESEARCH_SUMMARIES),
        "recommendations": random.choice(
            ["File a motion to dismiss.", "Seek a stay pending arbitration.", None]
        ),
        "applicability_score": random.choice([2, 5, 7.5, 9, None]),
    }


async def seed_documents(store: SQLiteStore, count: int = 20) -> list[str]:
    """Insert ``count`` random rows split across both tables. Returns the row ids."""
    store.init()
    ids: list[str] = []
    for _ in range(count):
        if random.random() < 0.6:
            ids.append(await store.insert(CONTRACT_ANALYSIS, generate_contract_row()))
        else:
            ids.append(await store.insert(LEGAL_RESEARCH, generate_research_row()))
    return ids


async def reset_and_seed(store: SQLiteStore, count: int = 20) -> list[str]:
    """Reset the database and seed with fresh data."""
    store.init()
    await store.reset()
    return await seed_documents(store, count)
