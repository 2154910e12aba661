from psycopg.conninfo import make_conninfo
from psycopg_pool import ConnectionPool

from coa_processor.config.settings import Settings
from coa_processor.logging.logger import Log


def build_conninfo(settings: Settings) -> str:
    return make_conninfo(
        host=settings.db_host,
        port=settings.db_port,
        dbname=settings.db_database,
        user=settings.db_username,
        password=settings.db_password,
        application_name="coa_processor",
    )


def open_pool(settings: Settings, min_size: int = 1, max_size: int = 10) -> ConnectionPool:
    """Open a connection pool for the document store. The caller closes it."""
    pool = ConnectionPool(build_conninfo(settings), min_size=min_size, max_size=max_size, open=True)
    Log.info(f"Connection pool opened for {settings.db_host}:{settings.db_port}/{settings.db_database}")
    return pool
