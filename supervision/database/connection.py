from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import psycopg
from psycopg.conninfo import make_conninfo
from psycopg_pool import ConnectionPool

from supervision.config.settings import Settings
from supervision.logging.logger import Log

SCHEMA_PATH = Path(__file__).parent / "schema.sql"

# API threads share the pool with the workers
EXTRA_API_CONNECTIONS = 4

_pool: ConnectionPool | None = None


def init_pool(settings: Settings) -> None:
    """Open the process-wide pool, sized for the workers plus API threads."""
    global _pool  # noqa: PLW0603
    conninfo = make_conninfo(
        host=settings.db_host,
        port=settings.db_port,
        dbname=settings.db_database,
        user=settings.db_username,
        password=settings.db_password,
    )
    max_size = settings.worker_count + EXTRA_API_CONNECTIONS
    _pool = ConnectionPool(conninfo, min_size=1, max_size=max_size, name="supervision", open=True)
    Log.info(f"Database pool opened for {settings.db_host}/{settings.db_database} (max {max_size})")


def close_pool() -> None:
    global _pool  # noqa: PLW0603
    if _pool is None:
        return
    _pool.close()
    _pool = None


@contextmanager
def get_connection() -> Generator[psycopg.Connection[Any], None, None]:
    """Borrow a pooled connection; commit and rollback are up to the caller."""
    if _pool is None:
        raise RuntimeError("Database pool is not open, call init_pool() first")
    with _pool.connection() as conn:
        yield conn


def ensure_schema(schema_path: Path | None = None) -> None:
    """Create tables and indexes that do not exist yet."""
    path = schema_path or SCHEMA_PATH
    ddl = path.read_text(encoding="utf-8")
    with get_connection() as conn:
        conn.execute(ddl)
        conn.commit()
    Log.info(f"Database schema ensured from {path.name}")
