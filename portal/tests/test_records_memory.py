"""
In-memory record store, change feed and subscription scopes.
"""
from __future__ import annotations

import pytest

from portal.records.feed import ChangeFeed
from portal.records.memory import InMemoryFileStore, InMemoryRecordStore, seed_demo_records
from portal.records.ports import EVENT_DELETE, EVENT_INSERT, EVENT_UPDATE, ChangeEvent, RecordStoreError, normalize_events
from portal.records.subscriptions import SubscriptionScope


def test_select_filters_orders_limits_and_projects():
    store = seed_demo_records(InMemoryRecordStore())

    rows = store.select("profiles", {"role": "student"}, columns=("id",), order_by="created_at", descending=True, limit=2)

    assert rows == [{"id": "5"}, {"id": "4"}]


def test_rows_are_copied_in_and_out():
    store = InMemoryRecordStore()
    row = {"id": "x", "tags": ["a"]}
    store.insert("t", row)
    row["tags"].append("b")
    fetched = store.select("t")[0]
    fetched["tags"].append("c")

    assert store.select("t")[0]["tags"] == ["a"]


def test_duplicate_id_and_unfiltered_writes_are_rejected():
    store = InMemoryRecordStore()
    store.insert("t", {"id": "x"})

    with pytest.raises(RecordStoreError) as dup:
        store.insert("t", {"id": "x"})
    with pytest.raises(RecordStoreError):
        store.update("t", {}, {"a": 1})
    with pytest.raises(RecordStoreError):
        store.delete("t", {})

    assert dup.value.code == "duplicate_key"


def test_writes_publish_change_events_by_mask():
    store = InMemoryRecordStore()
    seen: list[ChangeEvent] = []
    store.subscribe("t", [EVENT_INSERT, EVENT_DELETE], seen.append)

    store.insert("t", {"id": "x", "v": 1})
    store.update("t", {"id": "x"}, {"v": 2})
    store.delete("t", {"id": "x"})
    store.insert("other", {"id": "y"})

    assert [(e.table, e.kind) for e in seen] == [("t", EVENT_INSERT), ("t", EVENT_DELETE)]


def test_failing_subscriber_does_not_block_others():
    feed = ChangeFeed()
    seen = []

    def boom(event):
        raise RuntimeError("subscriber failed")

    feed.subscribe("t", "*", boom)
    feed.subscribe("t", "*", seen.append)
    feed.publish(ChangeEvent("t", EVENT_UPDATE, {}))

    assert len(seen) == 1


def test_unsubscribe_is_idempotent():
    feed = ChangeFeed()
    handle = feed.subscribe("t", "*", lambda e: None)

    feed.unsubscribe(handle)
    feed.unsubscribe(handle)

    assert feed.open_subscriptions() == 0


def test_normalize_events_rejects_unknown_kinds():
    assert normalize_events("insert") == frozenset({EVENT_INSERT})
    with pytest.raises(ValueError):
        normalize_events("TRUNCATE")
    with pytest.raises(ValueError):
        normalize_events([])


def test_scope_releases_everything_once():
    store = InMemoryRecordStore()
    scope = SubscriptionScope(store)
    scope.acquire("a", "*", lambda e: None)
    scope.acquire("b", EVENT_UPDATE, lambda e: None)
    assert store.open_subscriptions() == 2

    scope.close()
    scope.close()

    assert store.open_subscriptions() == 0
    assert scope.closed and scope.handles == ()
    with pytest.raises(RuntimeError):
        scope.acquire("c", "*", lambda e: None)


def test_scope_context_manager_releases_on_error():
    store = InMemoryRecordStore()

    with pytest.raises(ValueError):
        with SubscriptionScope(store) as scope:
            scope.acquire("a", "*", lambda e: None)
            raise ValueError("mount failed")

    assert store.open_subscriptions() == 0


def test_memory_file_store_returns_memory_url():
    files = InMemoryFileStore()

    url = files.upload(bucket="resumes", path="/3/x.pdf", data=b"%PDF-1", content_type="application/pdf")

    assert url == "memory://resumes/3/x.pdf"
    assert files.objects[("resumes", "3/x.pdf")] == (b"%PDF-1", "application/pdf")
