import os
from collections.abc import Generator
from typing import Any

import psycopg
import pytest

from ledger.config.settings import Settings
from ledger.database.connection import close_pool, get_connection, init_pool

SCHEMA = """
CREATE TABLE IF NOT EXISTS client_folders (
    id BIGSERIAL PRIMARY KEY,
    name TEXT NOT NULL,
    client_email TEXT,
    trustee_id TEXT NOT NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS documents (
    id BIGSERIAL PRIMARY KEY,
    record_number TEXT NOT NULL UNIQUE,
    title TEXT NOT NULL,
    submitter_name TEXT NOT NULL,
    user_id TEXT NOT NULL,
    file_name TEXT NOT NULL,
    file_path TEXT NOT NULL,
    mime_type TEXT NOT NULL,
    is_public BOOLEAN NOT NULL DEFAULT FALSE,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    client_name TEXT,
    client_email TEXT,
    private_note TEXT,
    trustee_id TEXT,
    trustee_name TEXT,
    folder_id BIGINT REFERENCES client_folders (id) ON DELETE SET NULL
);
"""

# Test rows live on a day no real upload will ever use.
TEST_RECORD_PREFIX = "SR-19991231-"


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "sovereign_ledger_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        with get_connection() as conn:
            conn.execute(SCHEMA)
            conn.commit()
    except Exception as e:
        close_pool()
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run.")
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture(autouse=True)
def integration_cleanup(request: pytest.FixtureRequest) -> Generator[None, None, None]:
    """Remove rows written under the test trustee/user ids and test day."""
    yield
    if "db_conn" not in request.fixturenames:
        return
    with get_connection() as conn:
        with conn.cursor() as cur:
            cur.execute(
                "DELETE FROM documents WHERE user_id LIKE %s OR record_number LIKE %s",
                ("it-%", f"{TEST_RECORD_PREFIX}%"),
            )
            cur.execute("DELETE FROM client_folders WHERE trustee_id LIKE %s", ("it-%",))
        conn.commit()
