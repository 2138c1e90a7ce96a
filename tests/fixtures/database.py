"""In-memory and on-disk snapshot store fixtures."""

import duckdb
import pytest
from pathlib import Path
from typing import Generator

from insight_engine.store import initialize_store, load_sample_data


@pytest.fixture
def in_memory_db() -> Generator[duckdb.DuckDBPyConnection, None, None]:
    """
    In-memory DuckDB with the empty snapshot schema.

    Usage:
        @pytest.mark.fast
        @pytest.mark.unit
        def test_tables(in_memory_db):
            assert "employees" in existing_tables(in_memory_db)
    """
    conn = duckdb.connect(":memory:")
    initialize_store(conn)
    yield conn
    conn.close()


@pytest.fixture
def populated_test_db() -> Generator[duckdb.DuckDBPyConnection, None, None]:
    """
    In-memory DuckDB seeded with the demo dataset.

    Contains 5 departments, 11 employees (one former), 4 projects and
    4 training programs, consistent as of SAMPLE_AS_OF.
    """
    conn = duckdb.connect(":memory:")
    load_sample_data(conn)
    yield conn
    conn.close()


@pytest.fixture
def sample_db_path(tmp_path: Path) -> Path:
    """
    DuckDB file with the demo dataset, for loader and CLI tests.

    The connection is closed before the test runs so the file can be
    reopened by the code under test.
    """
    db_path = tmp_path / "workforce.duckdb"
    conn = duckdb.connect(str(db_path))
    try:
        load_sample_data(conn)
    finally:
        conn.close()
    return db_path
