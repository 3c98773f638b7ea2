"""
Scoped ownership of push-subscriptions.

Why:
    A panel must release every subscription it opened when it unmounts, on
    every path, including failures half-way through mounting. Acquiring through
    a scope and closing the scope replaces "remember to call unsubscribe".

Behavior:
    - `acquire()` opens a subscription on the store and registers its release
      on an ExitStack.
    - `close()` releases everything in reverse order; calling it again is a
      no-op. A closed scope refuses new acquisitions.
    - The scope is a context manager, so `with SubscriptionScope(store):`
      releases on exceptions as well.
"""
from __future__ import annotations

from contextlib import ExitStack
from typing import Iterable

from .ports import ChangeCallback, SubscriptionHandle


class SubscriptionScope:
    def __init__(self, store):
        self._store = store
        self._stack = ExitStack()
        self._handles: list[SubscriptionHandle] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def handles(self) -> tuple[SubscriptionHandle, ...]:
        return tuple(self._handles)

    def acquire(self, table: str, events: str | Iterable[str], callback: ChangeCallback) -> SubscriptionHandle:
        if self._closed:
            raise RuntimeError("subscription_scope_closed")
        handle = self._store.subscribe(table, events, callback)
        self._handles.append(handle)
        self._stack.callback(self._release, handle)
        return handle

    def _release(self, handle: SubscriptionHandle) -> None:
        self._store.unsubscribe(handle)
        if handle in self._handles:
            self._handles.remove(handle)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._stack.close()

    def __enter__(self) -> "SubscriptionScope":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


__all__ = ["SubscriptionScope"]
