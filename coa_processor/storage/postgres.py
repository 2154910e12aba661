from typing import Any

from psycopg.types.json import Jsonb
from psycopg_pool import ConnectionPool

from coa_processor.storage.base import BaseDocumentStore
from coa_processor.storage.exceptions import DocumentNotFoundError

CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS documents (
    collection TEXT NOT NULL,
    key TEXT NOT NULL,
    data JSONB NOT NULL,
    updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
    PRIMARY KEY (collection, key)
)
"""


class PostgresDocumentStore(BaseDocumentStore):
    """Document store backed by a single JSONB table.

    Connections are borrowed from ``pool``; ``close`` closes the pool.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def close(self) -> None:
        self._pool.close()

    def ensure_schema(self) -> None:
        with self._pool.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(CREATE_TABLE_SQL)
            conn.commit()

    def get(self, collection: str, key: str) -> dict[str, Any] | None:
        with self._pool.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "SELECT data FROM documents WHERE collection = %s AND key = %s",
                    (collection, key),
                )
                row = cur.fetchone()

        if row is None:
            return None
        data: dict[str, Any] = row[0]
        return data

    def set(self, collection: str, key: str, data: dict[str, Any]) -> None:
        with self._pool.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO documents (collection, key, data)
                    VALUES (%s, %s, %s)
                    ON CONFLICT (collection, key)
                    DO UPDATE SET data = EXCLUDED.data, updated_at = now()
                    """,
                    (collection, key, Jsonb(data)),
                )
            conn.commit()

    def update(self, collection: str, key: str, changes: dict[str, Any]) -> None:
        """Shallow-merge ``changes`` with the JSONB ``||`` operator.

        Raises:
            DocumentNotFoundError: if the document does not exist.
        """
        with self._pool.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE documents
                    SET data = data || %s, updated_at = now()
                    WHERE collection = %s AND key = %s
                    """,
                    (Jsonb(changes), collection, key),
                )
                if cur.rowcount == 0:
                    raise DocumentNotFoundError(f"Document {collection}/{key} not found")
            conn.commit()
