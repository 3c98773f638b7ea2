"""
Supabase-backed record store.

This adapter implements the RecordStore port using a provided Supabase client.
It is duck-typed to avoid a hard dependency during testing. The client is
expected to expose `.table(name)` returning a postgrest query builder with
`select/insert/update/delete`, `eq/is_`, `order`, `limit` and `execute()`.

Change notifications:
    Successful writes made through this adapter are published to the shared
    in-process `ChangeFeed`. Writes from other processes are picked up when a
    panel refreshes.

Security:
    The caller must initialize the client with a server-side key. Error details
    from the backend are logged by class name only and surfaced as codes.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional, Sequence

from .feed import ChangeFeed
from .ports import (
    EVENT_DELETE,
    EVENT_INSERT,
    EVENT_UPDATE,
    ChangeCallback,
    ChangeEvent,
    RecordStoreError,
    Row,
    SubscriptionHandle,
)


logger = logging.getLogger("portal.records")

_UNIQUE_VIOLATION = "23505"


def _apply_filters(query: Any, filters: Optional[Mapping[str, Any]]) -> Any:
    for key, value in (filters or {}).items():
        if value is None:
            query = query.is_(key, "null")
        else:
            query = query.eq(key, value)
    return query


class SupabaseRecordStore:
    """RecordStore using a supabase client for table operations."""

    def __init__(self, client: Any, feed: Optional[ChangeFeed] = None):
        self._client = client
        self.feed = feed or ChangeFeed()

    # --- Helpers ------------------------------------------------------------------

    def _table(self, table: str) -> Any:
        c = self._client
        if hasattr(c, "table"):
            return c.table(table)
        if hasattr(c, "from_"):
            return c.from_(table)
        raise RuntimeError("invalid_supabase_client")

    @staticmethod
    def _execute(query: Any, op: str, table: str) -> list[Row]:
        try:
            res = query.execute()
        except Exception as exc:
            code = "duplicate_key" if str(getattr(exc, "code", "")) == _UNIQUE_VIOLATION else "store_error"
            logger.warning("Record store %s on %s failed: %s", op, table, exc.__class__.__name__)
            raise RecordStoreError(code, f"{op}:{table}") from exc
        data = getattr(res, "data", None)
        if data is None and isinstance(res, dict):
            data = res.get("data")
        if data is None:
            return []
        if isinstance(data, dict):
            return [data]
        return [dict(r) for r in data]

    def _publish(self, table: str, kind: str, rows: Iterable[Row]) -> None:
        for r in rows:
            self.feed.publish(ChangeEvent(table, kind, r))

    # --- Protocol methods ---------------------------------------------------------

    def select(
        self,
        table: str,
        filters: Optional[Mapping[str, Any]] = None,
        *,
        columns: Optional[Sequence[str]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[Row]:
        query = self._table(table).select(",".join(columns) if columns else "*")
        query = _apply_filters(query, filters)
        if order_by:
            query = query.order(order_by, desc=descending)
        if limit is not None:
            query = query.limit(int(limit))
        return self._execute(query, "select", table)

    def insert(self, table: str, row: Mapping[str, Any]) -> Row:
        rows = self._execute(self._table(table).insert(dict(row)), "insert", table)
        stored = rows[0] if rows else dict(row)
        self._publish(table, EVENT_INSERT, [stored])
        return stored

    def update(self, table: str, filters: Mapping[str, Any], patch: Mapping[str, Any]) -> list[Row]:
        if not filters:
            raise RecordStoreError("unfiltered_update")
        query = _apply_filters(self._table(table).update(dict(patch)), filters)
        rows = self._execute(query, "update", table)
        self._publish(table, EVENT_UPDATE, rows)
        return rows

    def delete(self, table: str, filters: Mapping[str, Any]) -> int:
        if not filters:
            raise RecordStoreError("unfiltered_delete")
        query = _apply_filters(self._table(table).delete(), filters)
        rows = self._execute(query, "delete", table)
        self._publish(table, EVENT_DELETE, rows)
        return len(rows)

    def subscribe(self, table: str, events: str | Iterable[str], callback: ChangeCallback) -> SubscriptionHandle:
        return self.feed.subscribe(table, events, callback)

    def unsubscribe(self, handle: SubscriptionHandle) -> None:
        self.feed.unsubscribe(handle)

    def open_subscriptions(self) -> int:
        return self.feed.open_subscriptions()


__all__ = ["SupabaseRecordStore"]
