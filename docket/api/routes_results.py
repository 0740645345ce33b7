from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Request

from docket.results.models import AnalysisResult
from docket.results.normalizer import detect_family, normalize, unwrap

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/results", tags=["results"])


async def _read_payload(request: Request):
    body = await request.body()
    if not body.strip():
        return None
    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError):
        logger.info("Normalize request body is not JSON (%d bytes)", len(body))
        return body.decode("utf-8", errors="replace")


@router.post("/normalize", response_model=AnalysisResult, status_code=200)
async def normalize_endpoint(request: Request) -> AnalysisResult:
    """Normalize a raw analysis-workflow response. Any body is accepted."""
    return normalize(await _read_payload(request))


@router.post("/detect", status_code=200)
async def detect_endpoint(request: Request) -> dict:
    """Report which output family a raw workflow response would be decoded as."""
    payload = await _read_payload(request)
    return {"family": detect_family(unwrap(payload)) or "generic"}
