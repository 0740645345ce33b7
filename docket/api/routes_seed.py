from __future__ import annotations

from pydantic import BaseModel, Field

from fastapi import APIRouter, Depends

from docket.api.deps import get_collection, get_store
from docket.db.seed import reset_and_seed, seed_documents
from docket.db.store import SQLiteStore
from docket.documents.collection import DocumentCollection

router = APIRouter(tags=["seed"])


class SeedRequest(BaseModel):
    count: int = Field(default=20, ge=1, le=500)


class SeedResponse(BaseModel):
    generated: int
    row_ids: list[str]


@router.post("/seed", response_model=SeedResponse, status_code=201)
async def seed_data(
    request: SeedRequest,
    store: SQLiteStore = Depends(get_store),
    collection: DocumentCollection = Depends(get_collection),
) -> SeedResponse:
    """Insert random analysis rows for demo purposes."""
    ids = await seed_documents(store, count=request.count)
    await collection.refresh()
    await collection.settle()
    return SeedResponse(generated=len(ids), row_ids=ids)


@router.post("/seed/reset", response_model=SeedResponse, status_code=201)
async def reset_and_seed_data(
    request: SeedRequest,
    store: SQLiteStore = Depends(get_store),
    collection: DocumentCollection = Depends(get_collection),
) -> SeedResponse:
    """Clear both tables and seed fresh random rows."""
    ids = await reset_and_seed(store, count=request.count)
    await collection.refresh()
    await collection.settle()
    return SeedResponse(generated=len(ids), row_ids=ids)
