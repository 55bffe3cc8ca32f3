"""Ports - interfaces/protocols for external dependencies."""

from .document_store import DocumentStore, NOTES, TASKS, PLANTS, SPACES

__all__ = [
    "DocumentStore",
    "NOTES",
    "TASKS",
    "PLANTS",
    "SPACES",
]
