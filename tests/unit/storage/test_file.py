"""
Module: test_file.py
Description: Unit tests for FileStore persistence across instances.
"""

import json

import pytest

from hookme.models.event import WebhookEvent
from hookme.storage.file import FileStore


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "caches.json"


class TestFileStore:

    def test_new_file_is_empty(self, store_path):
        store = FileStore(store_path)

        assert len(store) == 0
        assert not store_path.exists()

    def test_set_writes_entries_file(self, store_path, sample_event):
        store = FileStore(store_path)
        store.set(sample_event.id, sample_event)

        entries = json.loads(store_path.read_text())

        assert entries[0][0] == sample_event.id
        assert entries[0][1]["provider"] == "telegram"
        assert entries[0][1]["payload"] == sample_event.payload

    def test_survives_reopen(self, store_path):
        first = FileStore(store_path)
        events = [WebhookEvent(provider="telegram", payload={"n": n, "ratio": 0.5}) for n in range(3)]
        for event in events:
            first.set(event.id, event)
        first.delete(events[1].id)

        reopened = FileStore(store_path)

        assert list(reopened.get_all()) == [events[0].id, events[2].id]
        restored = reopened.get(events[0].id)
        assert restored.payload == {"n": 0, "ratio": 0.5}
        assert restored.created_at == events[0].created_at

    def test_clear_persists(self, store_path, sample_event):
        store = FileStore(store_path)
        store.set(sample_event.id, sample_event)
        store.clear()

        assert len(FileStore(store_path)) == 0

    def test_empty_file_loads_as_empty(self, store_path):
        store_path.write_text("")

        assert len(FileStore(store_path)) == 0

    def test_corrupt_file_rejected(self, store_path):
        store_path.write_text("{not json")

        with pytest.raises(ValueError, match="invalid store file"):
            FileStore(store_path)

    def test_creates_parent_directories(self, tmp_path, sample_event):
        path = tmp_path / "nested" / "dir" / "caches.json"
        store = FileStore(path)
        store.set(sample_event.id, sample_event)

        assert path.exists()

    def test_empty_path_rejected(self):
        with pytest.raises(ValueError, match="path must be a non-empty path"):
            FileStore("")
