"""Async store client over the SQLite tables, with a per-table change feed.

The repository only talks to this client, so tests can hand it any object
with the same ``select`` / ``delete`` / ``subscribe`` surface.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
import threading
from enum import StrEnum
from pathlib import Path
from typing import Any, Callable

from pydantic import BaseModel

from docket.db import database

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """A read or write against the backing store failed."""

    def __init__(self, operation: str, table: str, cause: Exception):
        super().__init__(f"{operation} on {table} failed: {cause}")
        self.operation = operation
        self.table = table
        self.cause = cause


class ChangeKind(StrEnum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class ChangeEvent(BaseModel):
    table: str
    kind: ChangeKind
    row_id: str | None = None


ChangeCallback = Callable[[ChangeEvent], None]


class Subscription:
    """Handle for one change-feed listener. ``unsubscribe`` is idempotent."""

    def __init__(self, feed: ChangeFeed, table: str, callback: ChangeCallback):
        self._feed = feed
        self.table = table
        self.callback = callback
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self.active = False
            self._feed.remove(self)


class ChangeFeed:
    """In-process fan-out of row events, keyed by table."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscriptions: dict[str, list[Subscription]] = {}

    def add(self, table: str, callback: ChangeCallback) -> Subscription:
        sub = Subscription(self, table, callback)
        with self._lock:
            self._subscriptions.setdefault(table, []).append(sub)
        return sub

    def remove(self, sub: Subscription) -> None:
        with self._lock:
            subs = self._subscriptions.get(sub.table, [])
            if sub in subs:
                subs.remove(sub)

    def subscriber_count(self, table: str | None = None) -> int:
        with self._lock:
            if table is not None:
                return len(self._subscriptions.get(table, []))
            return sum(len(s) for s in self._subscriptions.values())

    def publish(self, event: ChangeEvent) -> None:
        with self._lock:
            subs = list(self._subscriptions.get(event.table, []))
        for sub in subs:
            try:
                sub.callback(event)
            except Exception:
                logger.exception("Change listener for %s failed", event.table)


class SQLiteStore:
    """Store client bound to one SQLite file. Blocking calls run in a worker thread."""

    def __init__(self, db_path: Path | None = None, feed: ChangeFeed | None = None):
        self.db_path = db_path
        self.feed = feed or ChangeFeed()

    def init(self) -> None:
        database.init_db(self.db_path)

    async def _run(self, operation: str, table: str, fn: Callable[..., Any], *args: Any) -> Any:
        try:
            return await asyncio.to_thread(fn, *args, self.db_path)
        except sqlite3.Error as exc:
            logger.error("Store %s on %s failed: %s", operation, table, exc)
            raise StoreError(operation, table, exc) from exc

    async def select(self, table: str) -> list[dict[str, Any]]:
        """Rows of ``table`` ordered newest first."""
        return await self._run("select", table, database.select_rows, table)

    async def insert(self, table: str, row: dict[str, Any]) -> str:
        row_id = await self._run("insert", table, database.insert_row, table, row)
        self.feed.publish(ChangeEvent(table=table, kind=ChangeKind.INSERT, row_id=row_id))
        return row_id

    async def delete(self, table: str, row_id: str) -> int:
        removed = await self._run("delete", table, database.delete_row, table, row_id)
        if removed:
            self.feed.publish(ChangeEvent(table=table, kind=ChangeKind.DELETE, row_id=row_id))
        return removed

    async def reset(self) -> None:
        await self._run("reset", "*", database.reset_db)
        for table in database.TABLES:
            self.feed.publish(ChangeEvent(table=table, kind=ChangeKind.DELETE))

    def subscribe(self, table: str, callback: ChangeCallback) -> Subscription:
        return self.feed.add(table, callback)
