from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from docket.api.errors import (
    store_exception_handler,
    validation_exception_handler,
    workflow_exception_handler,
)
from docket.api.routes_documents import router as documents_router
from docket.api.routes_results import router as results_router
from docket.api.routes_seed import router as seed_router
from docket.api.routes_submit import router as submit_router
from docket.config import configure_logging, load_settings
from docket.db.store import SQLiteStore, StoreError
from docket.documents.collection import DocumentCollection
from docket.documents.repository import DocumentRepository
from docket.workflow.client import WorkflowSubmissionError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = load_settings()
    configure_logging(settings)
    store = SQLiteStore(settings.db_path)
    store.init()
    collection = DocumentCollection(DocumentRepository(store))

    app.state.settings = settings
    app.state.store = store
    app.state.documents = collection

    await collection.mount()
    logger.info("Document feed mounted on %s", settings.db_path)
    try:
        yield
    finally:
        collection.unmount()
        logger.info("Document feed released")


app = FastAPI(
    title="Docket",
    version="0.1.0",
    description="Legal document analysis intake and history",
    lifespan=lifespan,
)

app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StoreError, store_exception_handler)
app.add_exception_handler(WorkflowSubmissionError, workflow_exception_handler)
app.include_router(submit_router)
app.include_router(documents_router)
app.include_router(results_router)
app.include_router(seed_router)


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}
