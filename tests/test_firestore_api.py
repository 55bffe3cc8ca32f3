"""Tests for the Firestore REST adapter."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
import requests

from greenlog.adapters.firestore_api import (
    FirestoreAdapter,
    decode_document,
    decode_value,
    encode_fields,
    encode_value,
)
from greenlog.config import Config
from greenlog.errors import AuthenticationError, DocumentNotFoundError, DocumentStoreError

DOCS = "https://firestore.googleapis.com/v1/projects/garden/databases/(default)/documents"


def response(status_code: int = 200, payload=None, text: str = ""):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = payload
    resp.text = text
    return resp


@pytest.fixture
def config():
    return Config(store_backend="firestore", firestore_project_id="garden", firestore_id_token="tok")


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def adapter(config, session):
    return FirestoreAdapter(config, session=session)


class TestValueCodec:
    def test_encode_scalars(self):
        assert encode_value("x") == {"stringValue": "x"}
        assert encode_value(3) == {"integerValue": "3"}
        assert encode_value(1.5) == {"doubleValue": 1.5}
        assert encode_value(True) == {"booleanValue": True}
        assert encode_value(None) == {"nullValue": None}

    def test_encode_naive_datetime_as_utc(self):
        assert encode_value(datetime(2024, 1, 1, 10)) == {"timestampValue": "2024-01-01T10:00:00Z"}

    def test_encode_nested(self):
        encoded = encode_value({"tags": ["a"], "n": 1})
        assert encoded == {
            "mapValue": {
                "fields": {
                    "tags": {"arrayValue": {"values": [{"stringValue": "a"}]}},
                    "n": {"integerValue": "1"},
                }
            }
        }

    def test_encode_fields_skips_none(self):
        assert encode_fields({"a": "x", "b": None}) == {"a": {"stringValue": "x"}}

    def test_encode_unsupported(self):
        with pytest.raises(TypeError):
            encode_value(object())

    def test_decode_timestamp_with_nanoseconds(self):
        value = decode_value({"timestampValue": "2024-01-01T10:00:00.123456789Z"})
        assert value == datetime(2024, 1, 1, 10, 0, 0, 123456, tzinfo=timezone.utc)

    def test_decode_empty_array(self):
        assert decode_value({"arrayValue": {}}) == []

    def test_decode_document(self):
        doc = decode_document(
            {
                "name": "projects/garden/databases/(default)/documents/tasks/abc",
                "fields": {
                    "title": {"stringValue": "Water"},
                    "recurrence": {
                        "mapValue": {"fields": {"type": {"stringValue": "daily"}, "interval": {"integerValue": "2"}}}
                    },
                },
            }
        )
        assert doc == {"id": "abc", "title": "Water", "recurrence": {"type": "daily", "interval": 2}}


class TestFirestoreAdapter:
    def test_documents_url(self, adapter):
        assert adapter.documents_url == DOCS

    def test_missing_token(self, session):
        adapter = FirestoreAdapter(Config(firestore_project_id="garden"), session=session)

        with pytest.raises(AuthenticationError):
            adapter.get("tasks", "t1")
        session.request.assert_not_called()

    def test_list_by_user_runs_query(self, adapter, session):
        session.request.return_value = response(
            payload=[
                {"readTime": "2024-01-01T00:00:00Z"},
                {
                    "document": {
                        "name": f"{DOCS}/spaces/s1",
                        "fields": {"userId": {"stringValue": "u1"}, "name": {"stringValue": "Tent A"}},
                    }
                },
            ]
        )

        docs = adapter.list_by_user("spaces", "u1")

        assert docs == [{"id": "s1", "userId": "u1", "name": "Tent A"}]
        method, url = session.request.call_args.args
        assert (method, url) == ("POST", f"{DOCS}:runQuery")
        query = session.request.call_args.kwargs["json"]["structuredQuery"]
        assert query["from"] == [{"collectionId": "spaces"}]
        assert query["where"]["fieldFilter"]["value"] == {"stringValue": "u1"}
        assert session.request.call_args.kwargs["headers"] == {"Authorization": "Bearer tok"}

    def test_get_not_found_returns_none(self, adapter, session):
        session.request.return_value = response(404, text="missing")
        assert adapter.get("tasks", "t1") is None

    def test_create_returns_new_id(self, adapter, session):
        session.request.return_value = response(payload={"name": f"{DOCS}/tasks/new1"})

        doc_id = adapter.create("tasks", {"userId": "u1", "plantId": None})

        assert doc_id == "new1"
        fields = session.request.call_args.kwargs["json"]["fields"]
        assert "plantId" not in fields
        assert "createdAt" in fields and "updatedAt" in fields

    def test_update_sends_mask(self, adapter, session):
        session.request.return_value = response(payload={})

        adapter.update("tasks", "t1", {"status": "completed"})

        method, url = session.request.call_args.args
        assert (method, url) == ("PATCH", f"{DOCS}/tasks/t1")
        params = session.request.call_args.kwargs["params"]
        assert ("updateMask.fieldPaths", "status") in params
        assert ("updateMask.fieldPaths", "updatedAt") in params

    def test_update_missing_document(self, adapter, session):
        session.request.return_value = response(404)
        with pytest.raises(DocumentNotFoundError):
            adapter.update("tasks", "t1", {"status": "completed"})

    def test_unauthorized(self, adapter, session):
        session.request.return_value = response(401, text="expired")
        with pytest.raises(AuthenticationError):
            adapter.list_by_user("notes", "u1")

    def test_server_error(self, adapter, session):
        session.request.return_value = response(503, text="unavailable")
        with pytest.raises(DocumentStoreError) as exc:
            adapter.create("tasks", {"userId": "u1"})
        assert exc.value.status_code == 503

    def test_connection_error(self, adapter, session):
        session.request.side_effect = requests.ConnectionError("down")
        with pytest.raises(DocumentStoreError):
            adapter.list_by_user("notes", "u1")
