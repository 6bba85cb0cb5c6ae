"""
Unit tests for the event cache
"""

import pytest

from database.event_store import EventStore


@pytest.fixture
def store(tmp_path):
    return EventStore(cache_dir=str(tmp_path / "events"))


class TestEventStore:
    """Tests for EventStore"""

    def test_miss(self, store):
        assert store.get("amcup1", "123") is None
        assert store.list_events() == []

    def test_put_and_get(self, store):
        document = store.put("amcup1", "123", {"eventName": "AmCup #1", "standings": {}})
        assert document["slot"] == "amcup1"
        assert document["eventId"] == "123"
        assert "scraped_at" in document

        cached = store.get("amcup1", "123")
        assert cached == document

    def test_put_does_not_modify_input(self, store):
        data = {"eventName": "AmCup #1"}
        store.put("amcup1", "123", data)
        assert data == {"eventName": "AmCup #1"}

    def test_key_format(self, store):
        store.put("amcup1", "123", {"eventName": "AmCup #1"})
        assert (store.cache_dir / "amcup_event_amcup1_123.json").exists()

    def test_key_sanitized(self, store):
        store.put("amcup1", "../x", {"eventName": "AmCup #1"})
        files = list(store.cache_dir.iterdir())
        assert len(files) == 1
        assert files[0].parent == store.cache_dir

    def test_list_sorted_by_slot(self, store):
        store.put("amcup3", "3", {"eventName": "AmCup #3"})
        store.put("amcup1", "1", {"eventName": "AmCup #1"})
        store.put("amcup2", "2", {"eventName": "AmCup #2"})
        assert [e["slot"] for e in store.list_events()] == ["amcup1", "amcup2", "amcup3"]

    def test_failed_write_keeps_previous_document(self, store, monkeypatch):
        store.put("amcup1", "1", {"eventName": "AmCup #1", "version": 1})

        def failing_dump(obj, f, **kwargs):
            f.write('{"eventName": "AmCup')
            raise OSError("disk full")

        monkeypatch.setattr("database.event_store.json.dump", failing_dump)
        with pytest.raises(OSError):
            store.put("amcup1", "1", {"eventName": "AmCup #1", "version": 2})
        monkeypatch.undo()

        assert store.get("amcup1", "1")["version"] == 1
        assert [p.name for p in store.cache_dir.iterdir()] == ["amcup_event_amcup1_1.json"]

    def test_corrupt_file_ignored(self, store):
        store.put("amcup1", "1", {"eventName": "AmCup #1"})
        (store.cache_dir / "amcup_event_amcup2_2.json").write_text("{not json", encoding="utf-8")

        assert store.get("amcup2", "2") is None
        assert [e["slot"] for e in store.list_events()] == ["amcup1"]

    def test_delete(self, store):
        store.put("amcup1", "1", {"eventName": "AmCup #1"})
        assert store.delete("amcup1", "1") is True
        assert store.delete("amcup1", "1") is False
        assert store.get("amcup1", "1") is None

    def test_clear(self, store):
        store.put("amcup1", "1", {"eventName": "AmCup #1"})
        store.put("amcup2", "2", {"eventName": "AmCup #2"})
        assert store.clear() == 2
        assert store.list_events() == []
        assert store.clear() == 0
