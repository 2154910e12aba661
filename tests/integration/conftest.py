import os
import uuid
from collections.abc import Generator

import psycopg
import pytest
from psycopg_pool import ConnectionPool

from coa_processor.config.settings import Settings
from coa_processor.storage.connection import open_pool
from coa_processor.storage.postgres import PostgresDocumentStore
from coa_processor.storage.repositories import USERS_COLLECTION


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "coa_processor_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[ConnectionPool, None, None]:
    try:
        psycopg.connect(
            host=test_settings.db_host,
            port=test_settings.db_port,
            dbname=test_settings.db_database,
            user=test_settings.db_username,
            password=test_settings.db_password,
            connect_timeout=3,
        ).close()
    except psycopg.Error as e:
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run.")
    pool = open_pool(test_settings)
    try:
        PostgresDocumentStore(pool).ensure_schema()
        yield pool
    finally:
        pool.close()


@pytest.fixture
def store(integration_pool: ConnectionPool) -> PostgresDocumentStore:
    return PostgresDocumentStore(integration_pool)


def _delete(pool: ConnectionPool, query: str, params: tuple[str, ...]) -> None:
    with pool.connection() as conn:
        with conn.cursor() as cur:
            cur.execute(query, params)
        conn.commit()


@pytest.fixture
def collection(integration_pool: ConnectionPool) -> Generator[str, None, None]:
    """A throwaway collection name, deleted after the test."""
    name = f"test-{uuid.uuid4()}"
    yield name
    _delete(integration_pool, "DELETE FROM documents WHERE collection = %s", (name,))


@pytest.fixture
def user_id(integration_pool: ConnectionPool) -> Generator[str, None, None]:
    """A throwaway user key in the ``users`` collection, deleted after the test."""
    key = f"it-{uuid.uuid4()}"
    yield key
    _delete(
        integration_pool,
        "DELETE FROM documents WHERE collection = %s AND key = %s",
        (USERS_COLLECTION, key),
    )
