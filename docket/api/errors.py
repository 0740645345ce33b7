from __future__ import annotations

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from docket.db.store import StoreError
from docket.workflow.client import WorkflowSubmissionError

logger = logging.getLogger(__name__)


class ProblemDetail(BaseModel):
    """RFC 7807 Problem Details response."""

    type: str = "about:blank"
    title: str
    status: int
    detail: str
    instance: str | None = None
    errors: list[dict] | None = None


def _problem(status: int, problem: ProblemDetail) -> JSONResponse:
    return JSONResponse(status_code=status, content=problem.model_dump(exclude_none=True))


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    detail_parts = []
    error_list = []
    for err in exc.errors():
        loc = " -> ".join(str(l) for l in err["loc"] if l not in ("body", "query", "path"))
        msg = err["msg"]
        detail_parts.append(f"{loc}: {msg}")
        error_list.append({"field": loc, "message": msg, "type": err["type"]})

    problem = ProblemDetail(
        type="urn:docket:error:validation",
        title="Validation Error",
        status=422,
        detail="; ".join(detail_parts),
        instance=str(request.url),
        errors=error_list,
    )
    return _problem(422, problem)


async def store_exception_handler(request: Request, exc: StoreError) -> JSONResponse:
    logger.error("Store failure on %s: %s", request.url.path, exc)
    problem = ProblemDetail(
        type="urn:docket:error:store",
        title="Store Unavailable",
        status=503,
        detail=str(exc),
        instance=str(request.url),
    )
    return _problem(503, problem)


async def workflow_exception_handler(
    request: Request, exc: WorkflowSubmissionError
) -> JSONResponse:
    problem = ProblemDetail(
        type="urn:docket:error:workflow",
        title="Workflow Submission Failed",
        status=502,
        detail=str(exc),
        instance=str(request.url),
    )
    return _problem(502, problem)
