import threading

import pytest

from viewtrail.domain.errors import DuplicateId
from viewtrail.infrastructure.database.stores.memory_store import MemoryStore


def test_entries_listed_in_upload_order(make_entry):
    store = MemoryStore()
    for name in ("c", "a", "b"):
        store.append(make_entry(name))
    assert [e.id for e in store.load()] == ["c", "a", "b"]


def test_duplicate_and_unknown_ids(make_entry, make_view):
    store = MemoryStore()
    store.append(make_entry("a"))
    with pytest.raises(DuplicateId):
        store.append(make_entry("a"))
    assert store.append_view("nope", make_view()) is False
    assert store.get("a").views == ()


def test_concurrent_view_appends(make_entry, make_view):
    store = MemoryStore()
    store.append(make_entry("a"))
    threads = [threading.Thread(target=store.append_view, args=("a", make_view(n))) for n in range(50)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(store.get("a").views) == 50
