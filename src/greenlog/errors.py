"""Exceptions raised by greenlog."""


class GreenlogError(Exception):
    """Base class for all greenlog errors."""

    pass


class RecordError(GreenlogError, ValueError):
    """Raised when a document cannot be turned into a record."""

    pass


class DocumentStoreError(GreenlogError):
    """Raised when the document store rejects or fails a request."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(DocumentStoreError):
    """Raised when the document store refuses our credentials."""

    pass


class DocumentNotFoundError(DocumentStoreError):
    """Raised when a document does not exist."""

    pass


class TaskAlreadyCompletedError(GreenlogError):
    """Raised when completing a task that is already completed."""

    pass
