from coa_processor.config.settings import Settings
from coa_processor.storage.base import BaseDocumentStore
from coa_processor.storage.connection import open_pool
from coa_processor.storage.memory import InMemoryDocumentStore
from coa_processor.storage.postgres import PostgresDocumentStore


class DocumentStoreFactory:
    """Creates the document store named by ``settings.storage_backend``."""

    @classmethod
    def create(cls, settings: Settings) -> BaseDocumentStore:
        backend = settings.storage_backend.strip().lower()
        if backend == "memory":
            return InMemoryDocumentStore()
        if backend == "postgres":
            return PostgresDocumentStore(open_pool(settings))
        raise ValueError(f"Unknown storage backend '{backend}'. Choose from: ['memory', 'postgres']")
