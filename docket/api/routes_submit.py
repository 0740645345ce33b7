from __future__ import annotations

import json
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from docket.api.deps import get_settings
from docket.config import Settings
from docket.workflow.client import submit_document
from docket.workflow.models import SubmissionForm, SubmissionReceipt, UploadedFile

router = APIRouter(prefix="/documents", tags=["submission"])


def _parse_analysis_types(raw: str) -> list[str]:
    """Accept a JSON array or comma-separated values."""
    try:
        parsed = json.loads(raw)
    except (json.JSONDecodeError, ValueError):
        return [part.strip() for part in raw.split(",") if part.strip()]
    if isinstance(parsed, list):
        return [str(p) for p in parsed]
    return [str(parsed)]


@router.post("/submit", response_model=SubmissionReceipt, status_code=202)
async def submit(
    client_name: str = Form(...),
    client_email: str = Form(...),
    analysis_types: str = Form(..., description="JSON array or comma-separated analysis types"),
    document_type: str = Form("contract"),
    document_id: str = Form(""),
    case_id: Optional[str] = Form(None),
    jurisdiction: Optional[str] = Form(None),
    file_url: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    settings: Settings = Depends(get_settings),
) -> SubmissionReceipt:
    """Validate the upload form and hand the document to the analysis workflow."""
    try:
        form = SubmissionForm(
            document_id=document_id,
            document_type=document_type,
            client_name=client_name,
            client_email=client_email,
            case_id=case_id,
            jurisdiction=jurisdiction,
            analysis_types=_parse_analysis_types(analysis_types),
            file_url=file_url,
        )
    except ValidationError as exc:
        raise RequestValidationError(exc.errors()) from exc

    uploaded = None
    if file is not None and file.filename:
        uploaded = UploadedFile(
            filename=file.filename,
            content=await file.read(),
            content_type=file.content_type or "application/octet-stream",
        )

    if uploaded is None and not form.file_url:
        raise HTTPException(status_code=400, detail="Either a file or a file_url is required")

    return await run_in_threadpool(submit_document, form, uploaded, settings)
