from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel

from fastapi import APIRouter, Depends, HTTPException, Response

from docket.api.deps import get_collection
from docket.documents.collection import DocumentCollection
from docket.documents.filters import filter_documents, summarize_bands
from docket.documents.models import DocumentType, LegalDocument

router = APIRouter(prefix="/documents", tags=["documents"])


class DocumentListResponse(BaseModel):
    total: int
    documents: list[LegalDocument]
    risk_bands: dict[str, int]
    error: Optional[str] = None


def _list_response(
    collection: DocumentCollection,
    search: str = "",
    document_type: str = "all",
    risk_level: str = "all",
) -> DocumentListResponse:
    documents = filter_documents(
        collection.documents,
        search=search,
        document_type=document_type,
        risk_level=risk_level,
    )
    return DocumentListResponse(
        total=len(documents),
        documents=documents,
        risk_bands=summarize_bands(documents),
        error=collection.error,
    )


@router.get("", response_model=DocumentListResponse, status_code=200)
async def list_documents(
    search: str = "",
    document_type: Literal["all", "contract", "case_law"] = "all",
    risk_level: Literal["all", "low", "medium", "high"] = "all",
    collection: DocumentCollection = Depends(get_collection),
) -> DocumentListResponse:
    """Current document snapshot, filtered by search text, type and risk band."""
    return _list_response(collection, search, document_type, risk_level)


@router.post("/refresh", response_model=DocumentListResponse, status_code=200)
async def refresh_documents(
    collection: DocumentCollection = Depends(get_collection),
) -> DocumentListResponse:
    """Re-fetch both tables and return the unfiltered list."""
    await collection.refresh()
    await collection.settle()
    return _list_response(collection)


@router.get("/{document_type}/{document_id}", response_model=LegalDocument, status_code=200)
async def get_document(
    document_type: DocumentType,
    document_id: str,
    collection: DocumentCollection = Depends(get_collection),
) -> LegalDocument:
    document = collection.get(document_id, document_type)
    if document is None:
        raise HTTPException(status_code=404, detail=f"Document {document_id} not found")
    return document


@router.delete("/{document_type}/{document_id}", status_code=204)
async def delete_document(
    document_type: DocumentType,
    document_id: str,
    collection: DocumentCollection = Depends(get_collection),
) -> Response:
    """Delete the backing row; the list is re-fetched afterwards."""
    removed = await collection.delete(document_id, document_type)
    await collection.settle()
    if not removed:
        raise HTTPException(status_code=404, detail=f"Document {document_id} not found")
    return Response(status_code=204)
