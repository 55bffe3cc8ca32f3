"""Document store interface."""

from typing import Protocol

NOTES = "notes"
TASKS = "tasks"
PLANTS = "plants"
SPACES = "spaces"


class DocumentStore(Protocol):
    """
    Interface for the hosted document store.

    Documents are plain dicts with camelCase keys and an ``id`` key.
    Timestamps come back as native datetimes.
    """

    def list_by_user(self, collection: str, user_id: str) -> list[dict]:
        """List every document in a collection owned by a user."""
        ...

    def get(self, collection: str, doc_id: str) -> dict | None:
        """Fetch one document. Returns None if not found."""
        ...

    def create(self, collection: str, record: dict) -> str:
        """Create a document and return its new id."""
        ...

    def update(self, collection: str, doc_id: str, changes: dict) -> None:
        """Merge changes into an existing document."""
        ...
