from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Mapping, Protocol

from docket.db.database import CONTRACT_ANALYSIS, LEGAL_RESEARCH
from docket.documents.decoder import decode_contract_row, decode_research_row
from docket.documents.models import DocumentType, LegalDocument

logger = logging.getLogger(__name__)

RowDecoder = Callable[[Mapping[str, Any]], LegalDocument]

# Table per document type, with the decoder for that table's row shape.
SOURCES: dict[DocumentType, tuple[str, RowDecoder]] = {
    DocumentType.CONTRACT: (CONTRACT_ANALYSIS, decode_contract_row),
    DocumentType.CASE_LAW: (LEGAL_RESEARCH, decode_research_row),
}


class Unsubscribable(Protocol):
    def unsubscribe(self) -> None: ...


class DocumentStore(Protocol):
    async def select(self, table: str) -> list[dict[str, Any]]: ...

    async def delete(self, table: str, row_id: str) -> int: ...

    def subscribe(self, table: str, callback: Callable[[Any], None]) -> Unsubscribable: ...


class DocumentRepository:
    """Reads, merges and deletes analysis records across both backing tables."""

    def __init__(self, store: DocumentStore):
        self.store = store

    async def _fetch_table(self, table: str, decode: RowDecoder) -> list[LegalDocument]:
        try:
            rows = await self.store.select(table)
        except Exception:
            logger.exception("Error fetching %s, treating as empty", table)
            return []
        logger.debug("Fetched %d rows from %s", len(rows), table)
        documents = []
        for row in rows:
            try:
                documents.append(decode(row))
            except Exception:
                logger.exception("Skipping undecodable %s row %s", table, row.get("id"))
        return documents

    async def fetch_all(self) -> list[LegalDocument]:
        """Every document from both tables, newest first.

        A failing table contributes no rows instead of failing the fetch.
        """
        batches = await asyncio.gather(
            *(self._fetch_table(table, decode) for table, decode in SOURCES.values())
        )
        documents = [doc for batch in batches for doc in batch]
        documents.sort(key=lambda d: d.created_at, reverse=True)
        logger.info("Loaded %d documents", len(documents))
        return documents

    async def delete(self, document_id: str, document_type: DocumentType | str) -> bool:
        """Delete the backing row. Store errors propagate; False when no row matched."""
        table, _ = SOURCES[DocumentType(document_type)]
        removed = await self.store.delete(table, document_id)
        if not removed:
            logger.warning("No %s row with id %s to delete", table, document_id)
        return bool(removed)

    def subscribe(self, callback: Callable[[Any], None]) -> Callable[[], None]:
        """Listen for any row change on either table. Returns the release function."""
        subs = [self.store.subscribe(table, callback) for table, _ in SOURCES.values()]

        def unsubscribe() -> None:
            for sub in subs:
                sub.unsubscribe()

        return unsubscribe
