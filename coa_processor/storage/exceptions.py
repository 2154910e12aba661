class StorageError(Exception):
    """Base exception for all document store errors."""


class DocumentNotFoundError(StorageError):
    """Raised when a document cannot be found in the store."""
