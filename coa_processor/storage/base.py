from abc import ABC, abstractmethod
from typing import Any


class BaseDocumentStore(ABC):
    """Keyed JSON documents grouped into named collections."""

    @abstractmethod
    def get(self, collection: str, key: str) -> dict[str, Any] | None:
        """Return a copy of the document, or None if it does not exist."""
        raise NotImplementedError

    @abstractmethod
    def set(self, collection: str, key: str, data: dict[str, Any]) -> None:
        """Create or replace a document."""
        raise NotImplementedError

    @abstractmethod
    def update(self, collection: str, key: str, changes: dict[str, Any]) -> None:
        """Shallow-merge ``changes`` into an existing document.

        Raises:
            DocumentNotFoundError: if the document does not exist.
        """
        raise NotImplementedError

    def close(self) -> None:
        """Release backing resources. No-op unless the store holds any."""
