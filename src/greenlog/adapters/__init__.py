"""Adapters - I/O implementations of ports."""

from .firestore_api import FirestoreAdapter
from .file_store import FileDocumentStore

__all__ = [
    "FirestoreAdapter",
    "FileDocumentStore",
]
