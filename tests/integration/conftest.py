import os
from collections.abc import Generator
from typing import Any

import psycopg
import pytest

from supervision.config.settings import Settings
from supervision.database.connection import close_pool, ensure_schema, get_connection, init_pool

CLEANUP_SQL = {
    "inspection_documents": "DELETE FROM inspection_documents WHERE id = %s::uuid",
    "document_blobs": "DELETE FROM document_blobs WHERE ref = %s",
}


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "supervision_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        with get_connection() as conn:
            conn.execute("SELECT 1")
        ensure_schema()
    except Exception as e:
        close_pool()
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run integration tests")
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def integration_cleanup(integration_pool: None) -> Generator[list[tuple[str, str]], None, None]:
    cleanup: list[tuple[str, str]] = []
    yield cleanup
    if not cleanup:
        return
    with get_connection() as conn:
        for table, key in cleanup:
            conn.execute(CLEANUP_SQL[table], (key,))
        conn.commit()
