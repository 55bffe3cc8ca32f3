"""File-based document store adapter."""

import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path

from greenlog.errors import DocumentNotFoundError

logger = logging.getLogger(__name__)

# Keys holding timestamps, at any nesting depth (recurrence.endDate included)
DATE_FIELDS = {
    "createdAt",
    "updatedAt",
    "timestamp",
    "dueDate",
    "completedAt",
    "endDate",
    "plantedDate",
    "expectedHarvestDate",
    "actualHarvestDate",
}


def _encode(value):
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()
    raise TypeError(f"Cannot serialize {type(value).__name__}")


def _parse_stamp(value: str):
    """Datetime for an ISO string; unparseable strings are returned unchanged."""
    try:
        stamp = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    if stamp.tzinfo is None:
        stamp = stamp.replace(tzinfo=timezone.utc)
    return stamp


def _decode(doc: dict) -> dict:
    decoded = {}
    for key, value in doc.items():
        if isinstance(value, dict):
            value = _decode(value)
        elif key in DATE_FIELDS and isinstance(value, str):
            value = _parse_stamp(value)
        decoded[key] = value
    return decoded


class FileDocumentStore:
    """
    File-based document store.

    Implements DocumentStore protocol. Each collection is a JSON file
    mapping document ids to documents.
    """

    def __init__(self, data_dir: Path | str):
        self.data_dir = Path(data_dir).expanduser()
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _path_for(self, collection: str) -> Path:
        return self.data_dir / f"{collection}.json"

    def _load(self, collection: str) -> dict[str, dict]:
        path = self._path_for(collection)
        if not path.exists():
            return {}
        return json.loads(path.read_text())

    def _save(self, collection: str, docs: dict[str, dict]) -> None:
        path = self._path_for(collection)
        path.write_text(json.dumps(docs, indent=2, default=_encode))

    def list_by_user(self, collection: str, user_id: str) -> list[dict]:
        """List every document in a collection owned by a user."""
        return [
            _decode({**doc, "id": doc_id})
            for doc_id, doc in self._load(collection).items()
            if doc.get("userId") == user_id
        ]

    def get(self, collection: str, doc_id: str) -> dict | None:
        """Fetch one document. Returns None if not found."""
        doc = self._load(collection).get(doc_id)
        if doc is None:
            return None
        return _decode({**doc, "id": doc_id})

    def create(self, collection: str, record: dict) -> str:
        """Create a document with createdAt/updatedAt set. Returns its id."""
        docs = self._load(collection)
        doc_id = uuid.uuid4().hex
        now = datetime.now(timezone.utc)
        clean = {k: v for k, v in record.items() if v is not None and k != "id"}
        docs[doc_id] = {**clean, "createdAt": now, "updatedAt": now}
        self._save(collection, docs)
        logger.debug(f"Created {collection}/{doc_id}")
        return doc_id

    def update(self, collection: str, doc_id: str, changes: dict) -> None:
        """
        Merge changes into a document.

        Keys whose value is None are removed from the document.
        """
        docs = self._load(collection)
        if doc_id not in docs:
            raise DocumentNotFoundError(f"Not found: {collection}/{doc_id}")

        doc = docs[doc_id]
        for key, value in changes.items():
            if value is None:
                doc.pop(key, None)
            else:
                doc[key] = value
        doc["updatedAt"] = datetime.now(timezone.utc)
        self._save(collection, docs)
