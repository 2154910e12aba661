from unittest.mock import patch

import pytest

from coa_processor.config.settings import Settings
from coa_processor.storage.factory import DocumentStoreFactory
from coa_processor.storage.memory import InMemoryDocumentStore
from coa_processor.storage.postgres import PostgresDocumentStore


class TestDocumentStoreFactory:
    def test_creates_memory_store(self) -> None:
        store = DocumentStoreFactory.create(Settings(storage_backend="memory"))
        assert isinstance(store, InMemoryDocumentStore)

    def test_creates_postgres_store_over_its_own_pool(self) -> None:
        settings = Settings(storage_backend="Postgres")
        with patch("coa_processor.storage.factory.open_pool") as mock_open:
            store = DocumentStoreFactory.create(settings)
        mock_open.assert_called_once_with(settings)
        assert isinstance(store, PostgresDocumentStore)

        store.close()
        mock_open.return_value.close.assert_called_once_with()

    def test_unknown_backend_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown storage backend"):
            DocumentStoreFactory.create(Settings(storage_backend="redis"))
