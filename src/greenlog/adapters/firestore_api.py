"""Firestore REST adapter - HTTP client for the hosted document store."""

import logging
import re
from datetime import date, datetime, timezone

import requests

from greenlog.config import Config, load_config
from greenlog.errors import AuthenticationError, DocumentNotFoundError, DocumentStoreError

logger = logging.getLogger(__name__)

API_BASE = "https://firestore.googleapis.com/v1"

# Firestore returns nanosecond precision; datetime only holds microseconds
_FRACTION_PATTERN = re.compile(r"\.(\d{6})\d+")


def encode_value(value) -> dict:
    """Encode a Python value as a Firestore typed value."""
    if value is None:
        return {"nullValue": None}
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        stamp = value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
        return {"timestampValue": stamp}
    if isinstance(value, date):
        return encode_value(datetime(value.year, value.month, value.day))
    if isinstance(value, (list, tuple)):
        return {"arrayValue": {"values": [encode_value(v) for v in value]}}
    if isinstance(value, dict):
        return {"mapValue": {"fields": encode_fields(value)}}
    raise TypeError(f"Cannot encode {type(value).__name__} for Firestore")


def encode_fields(record: dict) -> dict:
    """Encode a document, leaving out None values (Firestore rejects undefined)."""
    return {key: encode_value(value) for key, value in record.items() if value is not None}


def decode_value(value: dict):
    """Decode a Firestore typed value into a native Python value."""
    if "nullValue" in value:
        return None
    if "booleanValue" in value:
        return value["booleanValue"]
    if "integerValue" in value:
        return int(value["integerValue"])
    if "doubleValue" in value:
        return float(value["doubleValue"])
    if "stringValue" in value:
        return value["stringValue"]
    if "timestampValue" in value:
        stamp = _FRACTION_PATTERN.sub(r".\1", value["timestampValue"])
        return datetime.fromisoformat(stamp.replace("Z", "+00:00"))
    if "arrayValue" in value:
        return [decode_value(v) for v in value["arrayValue"].get("values", [])]
    if "mapValue" in value:
        return decode_fields(value["mapValue"].get("fields", {}))
    if "referenceValue" in value:
        return value["referenceValue"]
    logger.warning(f"Unsupported Firestore value: {sorted(value)}")
    return None


def decode_fields(fields: dict) -> dict:
    return {key: decode_value(value) for key, value in fields.items()}


def decode_document(document: dict) -> dict:
    """Turn a Firestore document resource into a plain dict with an ``id``."""
    doc = decode_fields(document.get("fields", {}))
    doc["id"] = document["name"].rsplit("/", 1)[-1]
    return doc


class FirestoreAdapter:
    """
    Firestore REST adapter.

    Implements DocumentStore protocol. Handles authentication, value
    encoding and HTTP calls. No business logic - just I/O.
    """

    def __init__(self, config: Config | None = None, session: requests.Session | None = None):
        self.config = config or load_config()
        self._session = session or requests.Session()

    @property
    def documents_url(self) -> str:
        return (
            f"{API_BASE}/projects/{self.config.firestore_project_id}"
            f"/databases/{self.config.firestore_database}/documents"
        )

    def _headers(self) -> dict:
        if not self.config.firestore_id_token:
            raise AuthenticationError("No Firestore ID token. Set FIRESTORE_ID_TOKEN in greenlog.conf.")
        return {"Authorization": f"Bearer {self.config.firestore_id_token}"}

    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        """Make an authenticated request, mapping failures to DocumentStoreError."""
        headers = self._headers()
        try:
            resp = self._session.request(method, url, headers=headers, timeout=30, **kwargs)
        except requests.RequestException as e:
            raise DocumentStoreError(f"Firestore request failed: {e}")

        if resp.status_code in (401, 403):
            raise AuthenticationError(f"Firestore rejected credentials: {resp.text}", resp.status_code)
        if resp.status_code == 404:
            raise DocumentNotFoundError(f"Not found: {url}", resp.status_code)
        if resp.status_code >= 400:
            logger.error(f"Firestore {method} {url} failed: {resp.status_code} {resp.text}")
            raise DocumentStoreError(f"Firestore error {resp.status_code}: {resp.text}", resp.status_code)
        return resp

    def list_by_user(self, collection: str, user_id: str) -> list[dict]:
        """List documents in a collection whose userId matches."""
        query = {
            "structuredQuery": {
                "from": [{"collectionId": collection}],
                "where": {
                    "fieldFilter": {
                        "field": {"fieldPath": "userId"},
                        "op": "EQUAL",
                        "value": {"stringValue": user_id},
                    }
                },
            }
        }
        resp = self._request("POST", f"{self.documents_url}:runQuery", json=query)
        # Results without a "document" key only report readTime
        return [decode_document(row["document"]) for row in resp.json() if "document" in row]

    def get(self, collection: str, doc_id: str) -> dict | None:
        """Fetch one document. Returns None if not found."""
        try:
            resp = self._request("GET", f"{self.documents_url}/{collection}/{doc_id}")
        except DocumentNotFoundError:
            return None
        return decode_document(resp.json())

    def create(self, collection: str, record: dict) -> str:
        """Create a document with createdAt/updatedAt set. Returns its id."""
        now = datetime.now(timezone.utc)
        body = {"fields": encode_fields({**record, "createdAt": now, "updatedAt": now})}
        resp = self._request("POST", f"{self.documents_url}/{collection}", json=body)
        doc_id = resp.json()["name"].rsplit("/", 1)[-1]
        logger.debug(f"Created {collection}/{doc_id}")
        return doc_id

    def update(self, collection: str, doc_id: str, changes: dict) -> None:
        """
        Merge changes into a document.

        Keys whose value is None are removed from the document.
        """
        changes = {**changes, "updatedAt": datetime.now(timezone.utc)}
        params = [("updateMask.fieldPaths", key) for key in changes]
        params.append(("currentDocument.exists", "true"))
        body = {"fields": encode_fields(changes)}
        self._request("PATCH", f"{self.documents_url}/{collection}/{doc_id}", params=params, json=body)
