"""Tests for the file-based document store."""

import json
from datetime import datetime, timezone

import pytest

from greenlog.adapters.file_store import FileDocumentStore
from greenlog.errors import DocumentNotFoundError


@pytest.fixture
def store(tmp_path):
    return FileDocumentStore(tmp_path / "data")


class TestFileDocumentStore:
    def test_creates_data_dir(self, tmp_path):
        FileDocumentStore(tmp_path / "nested" / "data")
        assert (tmp_path / "nested" / "data").is_dir()

    def test_create_and_get(self, store):
        doc_id = store.create("tasks", {"userId": "u1", "title": "Water", "dueDate": datetime(2024, 3, 1)})

        doc = store.get("tasks", doc_id)

        assert doc["id"] == doc_id
        assert doc["title"] == "Water"
        assert doc["dueDate"] == datetime(2024, 3, 1, tzinfo=timezone.utc)
        assert isinstance(doc["createdAt"], datetime)

    def test_create_drops_none_values(self, store):
        doc_id = store.create("tasks", {"userId": "u1", "plantId": None})

        raw = json.loads((store.data_dir / "tasks.json").read_text())

        assert "plantId" not in raw[doc_id]

    def test_get_missing(self, store):
        assert store.get("tasks", "nope") is None

    def test_list_by_user(self, store):
        store.create("notes", {"userId": "u1", "content": "a"})
        store.create("notes", {"userId": "u2", "content": "b"})

        docs = store.list_by_user("notes", "u1")

        assert [d["content"] for d in docs] == ["a"]

    def test_list_empty_collection(self, store):
        assert store.list_by_user("plants", "u1") == []

    def test_nested_dates_decoded(self, store):
        doc_id = store.create(
            "tasks",
            {"userId": "u1", "recurrence": {"type": "daily", "interval": 1, "endDate": datetime(2024, 6, 1)}},
        )

        doc = store.get("tasks", doc_id)

        assert doc["recurrence"]["endDate"] == datetime(2024, 6, 1, tzinfo=timezone.utc)

    def test_zulu_dates_decoded(self, store):
        (store.data_dir / "notes.json").write_text(
            json.dumps({"n1": {"userId": "u1", "createdAt": "2024-03-01T09:00:00Z"}})
        )

        assert store.get("notes", "n1")["createdAt"] == datetime(2024, 3, 1, 9, tzinfo=timezone.utc)

    def test_unparseable_date_left_as_string(self, store):
        (store.data_dir / "notes.json").write_text(json.dumps({"n1": {"userId": "u1", "createdAt": "yesterday"}}))

        assert store.get("notes", "n1")["createdAt"] == "yesterday"

    def test_update_merges_and_removes_none(self, store):
        doc_id = store.create("tasks", {"userId": "u1", "status": "pending", "plantId": "p1"})

        store.update("tasks", doc_id, {"status": "completed", "plantId": None})
        doc = store.get("tasks", doc_id)

        assert doc["status"] == "completed"
        assert "plantId" not in doc
        assert doc["userId"] == "u1"

    def test_update_missing_document(self, store):
        with pytest.raises(DocumentNotFoundError):
            store.update("tasks", "nope", {"status": "completed"})
