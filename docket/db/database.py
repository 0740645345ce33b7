from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Generator

from docket.config import DEFAULT_DB_PATH

CONTRACT_ANALYSIS = "contract_analysis"
LEGAL_RESEARCH = "legal_research"
TABLES = (CONTRACT_ANALYSIS, LEGAL_RESEARCH)

SCHEMA = """
CREATE TABLE IF NOT EXISTS contract_analysis (
    id TEXT PRIMARY KEY,
    client_name TEXT,
    client_email TEXT,
    document_type TEXT,
    jurisdiction TEXT,
    comparable_firm_cases TEXT,
    confidence_score TEXT,
    recommendations TEXT,
    risk_level TEXT,
    precedent_cases TEXT,
    analysis_summary TEXT,
    executive_summary TEXT,
    compliance_flags TEXT,
    extracted_clauses TEXT,
    created_at TEXT
);

CREATE TABLE IF NOT EXISTS legal_research (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    client_name TEXT,
    client_email TEXT,
    document_type TEXT,
    jurisdiction TEXT,
    created_at TEXT NOT NULL,
    research_summary TEXT,
    recommendations TEXT,
    applicability_score REAL
);
"""

CONTRACT_COLUMNS = (
    "id",
    "client_name",
    "client_email",
    "document_type",
    "jurisdiction",
    "comparable_firm_cases",
    "confidence_score",
    "recommendations",
    "risk_level",
    "precedent_cases",
    "analysis_summary",
    "executive_summary",
    "compliance_flags",
    "extracted_clauses",
    "created_at",
)

RESEARCH_COLUMNS = (
    "client_name",
    "client_email",
    "document_type",
    "jurisdiction",
    "created_at",
    "research_summary",
    "recommendations",
    "applicability_score",
)


def _db_path() -> Path:
    env = os.environ.get("DOCKET_DB_PATH")
    if env:
        return Path(env)
    return DEFAULT_DB_PATH


def _check_table(table: str) -> str:
    if table not in TABLES:
        raise ValueError(f"Unknown table: {table}")
    return table


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@contextmanager
def get_conn(db_path: Path | None = None) -> Generator[sqlite3.Connection, None, None]:
    path = db_path or _db_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db(db_path: Path | None = None) -> None:
    with get_conn(db_path) as conn:
        conn.executescript(SCHEMA)


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


def insert_contract_row(row: dict[str, Any], db_path: Path | None = None) -> str:
    """Insert a contract_analysis row. ``id`` is required; unknown keys are ignored."""
    values = {col: row.get(col) for col in CONTRACT_COLUMNS}
    if not values["id"]:
        raise ValueError("contract_analysis rows need an id")
    values["id"] = str(values["id"])
    values["created_at"] = values["created_at"] or _now()
    placeholders = ", ".join("?" for _ in CONTRACT_COLUMNS)
    with get_conn(db_path) as conn:
        conn.execute(
            f"INSERT INTO contract_analysis ({', '.join(CONTRACT_COLUMNS)}) VALUES ({placeholders})",
            tuple(values[col] for col in CONTRACT_COLUMNS),
        )
    return values["id"]


def insert_research_row(row: dict[str, Any], db_path: Path | None = None) -> str:
    """Insert a legal_research row and return its generated id."""
    values = {col: row.get(col) for col in RESEARCH_COLUMNS}
    values["created_at"] = values["created_at"] or _now()
    placeholders = ", ".join("?" for _ in RESEARCH_COLUMNS)
    with get_conn(db_path) as conn:
        cursor = conn.execute(
            f"INSERT INTO legal_research ({', '.join(RESEARCH_COLUMNS)}) VALUES ({placeholders})",
            tuple(values[col] for col in RESEARCH_COLUMNS),
        )
        return str(cursor.lastrowid)


def insert_row(table: str, row: dict[str, Any], db_path: Path | None = None) -> str:
    if _check_table(table) == CONTRACT_ANALYSIS:
        return insert_contract_row(row, db_path)
    return insert_research_row(row, db_path)


def delete_row(table: str, row_id: str, db_path: Path | None = None) -> int:
    """Delete one row by id. Returns the number of rows removed (0 or 1)."""
    _check_table(table)
    with get_conn(db_path) as conn:
        cursor = conn.execute(f"DELETE FROM {table} WHERE id = ?", (row_id,))
        return cursor.rowcount


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


def select_rows(table: str, db_path: Path | None = None) -> list[dict[str, Any]]:
    """All rows of ``table``, newest first."""
    _check_table(table)
    with get_conn(db_path) as conn:
        rows = conn.execute(
            f"SELECT * FROM {table} ORDER BY created_at DESC"
        ).fetchall()
        return [dict(r) for r in rows]


def count_rows(table: str, db_path: Path | None = None) -> int:
    _check_table(table)
    with get_conn(db_path) as conn:
        return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]


# ---------------------------------------------------------------------------
# Reset
# ---------------------------------------------------------------------------


def reset_db(db_path: Path | None = None) -> None:
    with get_conn(db_path) as conn:
        conn.execute("DELETE FROM contract_analysis")
        conn.execute("DELETE FROM legal_research")
