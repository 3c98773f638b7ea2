"""
In-process change feed: fan-out of row changes to table subscribers.

Record store adapters publish a `ChangeEvent` after every successful write.
Panels subscribe per table and event mask and refresh when notified.
Unsubscribing is idempotent; the number of open subscriptions is observable so
leaks after unmount can be detected.
"""
from __future__ import annotations

import logging
import threading
from typing import Iterable

from .ports import ChangeCallback, ChangeEvent, SubscriptionHandle, normalize_events


logger = logging.getLogger("portal.records")


class ChangeFeed:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subs: dict[int, tuple[SubscriptionHandle, ChangeCallback]] = {}

    def subscribe(self, table: str, events: str | Iterable[str], callback: ChangeCallback) -> SubscriptionHandle:
        if not table:
            raise ValueError("invalid_table")
        handle = SubscriptionHandle(table=table, events=normalize_events(events))
        with self._lock:
            self._subs[handle.id] = (handle, callback)
        return handle

    def unsubscribe(self, handle: SubscriptionHandle) -> None:
        with self._lock:
            self._subs.pop(handle.id, None)

    def open_subscriptions(self) -> int:
        with self._lock:
            return len(self._subs)

    def publish(self, event: ChangeEvent) -> None:
        with self._lock:
            targets = [
                cb for handle, cb in self._subs.values()
                if handle.table == event.table and event.kind in handle.events
            ]
        for cb in targets:
            try:
                cb(event)
            except Exception as exc:
                # One failing subscriber must not block delivery to the others.
                logger.warning(
                    "Change subscriber failed for %s/%s: %s",
                    event.table,
                    event.kind,
                    exc.__class__.__name__,
                )


__all__ = ["ChangeFeed"]
