from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Optional

from docket.documents.models import DocumentType, LegalDocument
from docket.documents.repository import DocumentRepository

logger = logging.getLogger(__name__)

LOAD_ERROR = "Failed to load documents"


class DocumentCollection:
    """Owns the in-memory document list and keeps it in step with the store.

    Every refresh replaces the whole list. Refreshes may overlap (manual,
    after a delete, or triggered by the change feed); each one takes a token
    and only the most recently issued token may publish its result, so a slow
    stale fetch can never overwrite a newer one.
    """

    def __init__(self, repository: DocumentRepository):
        self.repository = repository
        self.documents: list[LegalDocument] = []
        self.loading = False
        self.error: Optional[str] = None
        self._latest_token = 0
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._pending: set[asyncio.Task] = set()

    @property
    def mounted(self) -> bool:
        return self._unsubscribe is not None

    def get(self, document_id: str, document_type: DocumentType | str) -> Optional[LegalDocument]:
        for doc in self.documents:
            if doc.id == document_id and doc.document_type == document_type:
                return doc
        return None

    async def refresh(self) -> list[LegalDocument]:
        self._latest_token += 1
        token = self._latest_token
        self.loading = True
        try:
            documents = await self.repository.fetch_all()
        except Exception:
            logger.exception("Error fetching documents")
            if token == self._latest_token:
                self.documents = []
                self.error = LOAD_ERROR
                self.loading = False
            return self.documents

        if token != self._latest_token:
            logger.debug("Discarding stale fetch %d (latest is %d)", token, self._latest_token)
            return self.documents

        self.documents = documents
        self.error = None
        self.loading = False
        return documents

    async def settle(self) -> list[LegalDocument]:
        """Wait until refreshes queued by the change feed have finished.

        Callers that just wrote to the store use this to read their own write:
        the write's feed notification takes a newer token than their refresh.
        """
        await asyncio.sleep(0)
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
        return self.documents

    async def delete(self, document_id: str, document_type: DocumentType | str) -> bool:
        """Delete one document and re-fetch. Store failures propagate to the caller."""
        try:
            removed = await self.repository.delete(document_id, document_type)
        except Exception:
            logger.exception("Error deleting %s %s", document_type, document_id)
            raise
        await self.refresh()
        return removed

    # ------------------------------------------------------------------
    # Change-feed lifetime
    # ------------------------------------------------------------------

    async def mount(self) -> None:
        """Subscribe to both tables and load the first snapshot."""
        if self.mounted:
            return
        self._loop = asyncio.get_running_loop()
        self._unsubscribe = self.repository.subscribe(self._on_change)
        await self.refresh()

    def unmount(self) -> None:
        """Release the subscription and drop queued refreshes. Safe to call twice."""
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        try:
            if unsubscribe is not None:
                unsubscribe()
        finally:
            for task in list(self._pending):
                task.cancel()
            self._pending.clear()
            self._loop = None

    async def __aenter__(self) -> DocumentCollection:
        await self.mount()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self.unmount()

    def _on_change(self, event: Any) -> None:
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        logger.debug("Change detected (%s), refreshing documents", event)
        try:
            loop.call_soon_threadsafe(self._schedule_refresh)
        except RuntimeError:
            logger.warning("Event loop closed, dropping change notification")

    def _schedule_refresh(self) -> None:
        if not self.mounted:
            return
        task = asyncio.ensure_future(self.refresh())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
