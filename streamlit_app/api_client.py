"""Thin HTTP client for the FastAPI backend."""

from __future__ import annotations

import json
import os
from typing import Any, Optional

import httpx

BASE_URL = os.environ.get("DOCKET_API_URL", "http://localhost:8000")


def _url(path: str) -> str:
    return f"{BASE_URL}{path}"


def _headers() -> dict[str, str]:
    key = os.environ.get("DOCKET_API_KEY")
    if key:
        return {"X-API-Key": key}
    return {}


def error_detail(exc: Exception) -> str:
    """Best human-readable message for a failed call, preferring the API's problem detail."""
    if isinstance(exc, httpx.HTTPStatusError):
        try:
            return exc.response.json().get("detail", exc.response.text)
        except ValueError:
            return exc.response.text or str(exc)
    return str(exc)


def submit_document(
    fields: dict[str, Any],
    file_name: Optional[str] = None,
    file_bytes: Optional[bytes] = None,
    content_type: Optional[str] = None,
) -> dict[str, Any]:
    data = dict(fields)
    data["analysis_types"] = json.dumps(fields.get("analysis_types", []))
    files = None
    if file_name and file_bytes is not None:
        files = {"file": (file_name, file_bytes, content_type or "application/octet-stream")}
    resp = httpx.post(
        _url("/documents/submit"), data=data, files=files, headers=_headers(), timeout=120
    )
    resp.raise_for_status()
    return resp.json()


def list_documents(
    search: str = "", document_type: str = "all", risk_level: str = "all"
) -> dict[str, Any]:
    resp = httpx.get(
        _url("/documents"),
        params={"search": search, "document_type": document_type, "risk_level": risk_level},
        headers=_headers(),
        timeout=10,
    )
    resp.raise_for_status()
    return resp.json()


def refresh_documents() -> dict[str, Any]:
    resp = httpx.post(_url("/documents/refresh"), headers=_headers(), timeout=30)
    resp.raise_for_status()
    return resp.json()


def delete_document(document_type: str, document_id: str) -> None:
    resp = httpx.delete(
        _url(f"/documents/{document_type}/{document_id}"), headers=_headers(), timeout=10
    )
    resp.raise_for_status()


def normalize_output(raw: Any) -> dict[str, Any]:
    resp = httpx.post(_url("/results/normalize"), json=raw, headers=_headers(), timeout=10)
    resp.raise_for_status()
    return resp.json()


def detect_family(raw: Any) -> str:
    resp = httpx.post(_url("/results/detect"), json=raw, headers=_headers(), timeout=10)
    resp.raise_for_status()
    return resp.json()["family"]


def seed_documents(count: int = 20) -> dict[str, Any]:
    resp = httpx.post(_url("/seed"), json={"count": count}, headers=_headers(), timeout=30)
    resp.raise_for_status()
    return resp.json()


def reset_and_seed(count: int = 20) -> dict[str, Any]:
    resp = httpx.post(_url("/seed/reset"), json={"count": count}, headers=_headers(), timeout=30)
    resp.raise_for_status()
    return resp.json()
