"""
Ports for the hosted record store and file store.

Keep these small and framework-agnostic so tests can supply simple fakes. The
portal consumes whatever schema the store exposes (`profiles.role`,
`companies.*`, `students.resume_status`, ...); it owns no wire format.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Optional, Protocol, Sequence
import itertools


EVENT_INSERT = "INSERT"
EVENT_UPDATE = "UPDATE"
EVENT_DELETE = "DELETE"
EVENT_ALL = "*"
ALL_EVENTS = frozenset({EVENT_INSERT, EVENT_UPDATE, EVENT_DELETE})

Row = dict[str, Any]


class RecordStoreError(Exception):
    """Raised when the record store rejects or cannot perform an operation."""

    def __init__(self, code: str, detail: str | None = None):
        super().__init__(code)
        self.code = code
        self.detail = detail


@dataclass(frozen=True)
class ChangeEvent:
    table: str
    kind: str
    row: Mapping[str, Any]


ChangeCallback = Callable[[ChangeEvent], None]

_HANDLE_IDS = itertools.count(1)


@dataclass(frozen=True)
class SubscriptionHandle:
    table: str
    events: frozenset[str]
    id: int = field(default_factory=lambda: next(_HANDLE_IDS))


def normalize_events(events: str | Iterable[str]) -> frozenset[str]:
    """Turn an event mask ("*", "INSERT", or an iterable) into a set of kinds."""
    if isinstance(events, str):
        events = [events]
    out: set[str] = set()
    for ev in events:
        ev_u = (ev or "").strip().upper()
        if ev_u == EVENT_ALL:
            return ALL_EVENTS
        if ev_u not in ALL_EVENTS:
            raise ValueError("invalid_event_mask")
        out.add(ev_u)
    if not out:
        raise ValueError("invalid_event_mask")
    return frozenset(out)


class RecordStore(Protocol):
    """CRUD plus push-subscriptions on named tables."""

    def select(
        self,
        table: str,
        filters: Optional[Mapping[str, Any]] = None,
        *,
        columns: Optional[Sequence[str]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[Row]: ...

    def insert(self, table: str, row: Mapping[str, Any]) -> Row: ...

    def update(self, table: str, filters: Mapping[str, Any], patch: Mapping[str, Any]) -> list[Row]: ...

    def delete(self, table: str, filters: Mapping[str, Any]) -> int: ...

    def subscribe(self, table: str, events: str | Iterable[str], callback: ChangeCallback) -> SubscriptionHandle: ...

    def unsubscribe(self, handle: SubscriptionHandle) -> None: ...

    def open_subscriptions(self) -> int: ...


class FileStore(Protocol):
    """Binary uploads into a bucket; returns a URL for the stored object."""

    def upload(self, *, bucket: str, path: str, data: bytes, content_type: str) -> str: ...


class NullFileStore:
    """Fallback adapter that signals the file store is not configured."""

    def upload(self, *, bucket: str, path: str, data: bytes, content_type: str) -> str:
        raise RuntimeError("file_store_not_configured")


__all__ = [
    "ALL_EVENTS",
    "ChangeCallback",
    "ChangeEvent",
    "EVENT_ALL",
    "EVENT_DELETE",
    "EVENT_INSERT",
    "EVENT_UPDATE",
    "FileStore",
    "NullFileStore",
    "RecordStore",
    "RecordStoreError",
    "Row",
    "SubscriptionHandle",
    "normalize_events",
]
