import copy
import threading
from typing import Any

from coa_processor.storage.base import BaseDocumentStore
from coa_processor.storage.exceptions import DocumentNotFoundError


class InMemoryDocumentStore(BaseDocumentStore):
    """Process-local store for development and tests."""

    def __init__(self, documents: dict[str, dict[str, dict[str, Any]]] | None = None) -> None:
        self._documents: dict[str, dict[str, dict[str, Any]]] = copy.deepcopy(documents or {})
        self._lock = threading.Lock()

    def get(self, collection: str, key: str) -> dict[str, Any] | None:
        with self._lock:
            document = self._documents.get(collection, {}).get(key)
            return copy.deepcopy(document) if document is not None else None

    def set(self, collection: str, key: str, data: dict[str, Any]) -> None:
        with self._lock:
            self._documents.setdefault(collection, {})[key] = copy.deepcopy(data)

    def update(self, collection: str, key: str, changes: dict[str, Any]) -> None:
        with self._lock:
            document = self._documents.get(collection, {}).get(key)
            if document is None:
                raise DocumentNotFoundError(f"Document {collection}/{key} not found")
            document.update(copy.deepcopy(changes))
