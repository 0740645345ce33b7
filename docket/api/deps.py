from __future__ import annotations

from fastapi import Request

from docket.config import Settings
from docket.db.store import SQLiteStore
from docket.documents.collection import DocumentCollection


def get_collection(request: Request) -> DocumentCollection:
    return request.app.state.documents


def get_store(request: Request) -> SQLiteStore:
    return request.app.state.store


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
