from coa_processor.storage.base import BaseDocumentStore
from coa_processor.storage.memory import InMemoryDocumentStore
from coa_processor.storage.repositories import AccountRepository, BrandingRepository

__all__ = [
    "AccountRepository",
    "BaseDocumentStore",
    "BrandingRepository",
    "InMemoryDocumentStore",
]
