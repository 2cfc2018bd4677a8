"""
Record Store — thin CRUD wrapper over the Supabase tables.

Every dashboard screen reads and writes through these primitives:
fetch_all, fetch_one, insert, update, upsert, delete. Client errors are
re-raised as RecordSourceError so callers can tell a failed fetch apart
from an empty one.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from supabase import AsyncClient, acreate_client

from whatscommerce.config import settings

logger = logging.getLogger(__name__)

_client: AsyncClient | None = None


async def get_supabase_client() -> AsyncClient:
    """Shared service-role client, created on first use."""
    global _client
    if _client is None:
        try:
            _client = await acreate_client(
                settings.supabase_url, settings.supabase_service_key
            )
        except Exception as e:
            logger.error("Failed to create Supabase client: %s", e)
            raise
    return _client


async def close_supabase() -> None:
    global _client
    _client = None


class RecordSourceError(Exception):
    """A read or write against the record source failed."""

    def __init__(self, table: str, operation: str, cause: Exception | None = None):
        self.table = table
        self.operation = operation
        self.cause = cause
        super().__init__(f"{operation} on {table} failed: {cause}")


def _apply_filters(query: Any, filters: dict[str, Any] | None) -> Any:
    for column, value in (filters or {}).items():
        query = query.eq(column, value)
    return query


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class RecordStore:
    """CRUD primitives bound to one async Supabase client."""

    def __init__(self, client: Any) -> None:
        self._client = client

    async def fetch_all(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        desc: bool = True,
        nulls_last: bool = False,
        columns: str = "*",
    ) -> list[dict[str, Any]]:
        """Fetch every row matching the equality filters."""
        try:
            query = _apply_filters(self._client.table(table).select(columns), filters)
            if order_by:
                if nulls_last:
                    query = query.order(order_by, desc=desc, nullsfirst=False)
                else:
                    query = query.order(order_by, desc=desc)
            result = await query.execute()
        except Exception as e:
            logger.exception("Records: fetch_all on %s failed", table)
            raise RecordSourceError(table, "fetch_all", e) from e
        return list(result.data or [])

    async def fetch_one(
        self, table: str, filters: dict[str, Any]
    ) -> dict[str, Any] | None:
        """Fetch the first row matching the filters, or None."""
        try:
            query = _apply_filters(self._client.table(table).select("*"), filters)
            result = await query.limit(1).execute()
        except Exception as e:
            logger.exception("Records: fetch_one on %s failed", table)
            raise RecordSourceError(table, "fetch_one", e) from e
        return result.data[0] if result.data else None

    async def insert(self, table: str, record: dict[str, Any]) -> dict[str, Any]:
        """Insert a row and return it as stored."""
        try:
            result = await self._client.table(table).insert(record).execute()
        except Exception as e:
            logger.exception("Records: insert into %s failed", table)
            raise RecordSourceError(table, "insert", e) from e
        if not result.data:
            raise RecordSourceError(table, "insert")
        return result.data[0]

    async def update(
        self,
        table: str,
        record_id: str,
        patch: dict[str, Any],
        filters: dict[str, Any] | None = None,
        touch: bool = True,
    ) -> dict[str, Any] | None:
        """Update one row by id. Returns the updated row, or None if nothing matched.

        Extra `filters` narrow the match (e.g. to the owning account).
        """
        payload = dict(patch)
        if touch:
            payload["updated_at"] = _now_iso()
        try:
            query = self._client.table(table).update(payload).eq("id", record_id)
            result = await _apply_filters(query, filters).execute()
        except Exception as e:
            logger.exception("Records: update on %s failed", table)
            raise RecordSourceError(table, "update", e) from e
        return result.data[0] if result.data else None

    async def upsert(
        self, table: str, record: dict[str, Any], on_conflict: str = "id"
    ) -> dict[str, Any]:
        """Insert or replace a row keyed on `on_conflict`."""
        payload = {**record, "updated_at": _now_iso()}
        try:
            result = await (
                self._client.table(table)
                .upsert(payload, on_conflict=on_conflict)
                .execute()
            )
        except Exception as e:
            logger.exception("Records: upsert on %s failed", table)
            raise RecordSourceError(table, "upsert", e) from e
        if not result.data:
            raise RecordSourceError(table, "upsert")
        return result.data[0]

    async def delete(
        self, table: str, record_id: str, filters: dict[str, Any] | None = None
    ) -> None:
        """Delete one row by id."""
        try:
            query = self._client.table(table).delete().eq("id", record_id)
            await _apply_filters(query, filters).execute()
        except Exception as e:
            logger.exception("Records: delete on %s failed", table)
            raise RecordSourceError(table, "delete", e) from e


async def get_record_store() -> RecordStore:
    """Record store bound to the shared Supabase client."""
    return RecordStore(await get_supabase_client())
