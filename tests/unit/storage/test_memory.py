"""
Module: test_memory.py
Description: Unit tests for MemoryStore.
"""

from hookme.models.event import WebhookEvent
from hookme.storage.memory import MemoryStore


class TestMemoryStore:

    def test_set_get_has(self, sample_event):
        store = MemoryStore()
        store.set(sample_event.id, sample_event)

        assert store.has(sample_event.id)
        assert sample_event.id in store
        assert store.get(sample_event.id) is sample_event
        assert store.get("missing") is None

    def test_delete_missing_is_noop(self):
        store = MemoryStore()
        store.delete("missing")
        assert len(store) == 0

    def test_get_all_is_ordered_snapshot(self):
        store = MemoryStore()
        for event_id in ("b", "a", "c"):
            store.set(event_id, WebhookEvent(id=event_id, provider="telegram", payload={}))

        snapshot = store.get_all()
        store.delete("a")

        assert list(snapshot) == ["b", "a", "c"]
        assert list(store.get_all()) == ["b", "c"]

    def test_clear(self, sample_event):
        store = MemoryStore()
        store.set(sample_event.id, sample_event)

        store.clear()

        assert len(store) == 0
