"""Unit tests for the DuckDB snapshot store schema."""

from __future__ import annotations

import duckdb
import pytest

from insight_engine.exceptions import StoreSchemaError
from insight_engine.store import (
    TABLE_COLUMNS,
    TABLE_NAMES,
    create_table_sql,
    existing_tables,
    initialize_store,
    insert_records,
    validate_store,
)
from insight_engine.snapshot import COLLECTIONS


class TestSchema:
    def test_one_table_per_collection(self):
        assert set(TABLE_NAMES) == set(COLLECTIONS)
        assert set(TABLE_NAMES.values()) == set(TABLE_COLUMNS)

    def test_columns_match_model_fields(self):
        for collection, table in TABLE_NAMES.items():
            columns = {name for name, _ in TABLE_COLUMNS[table]}
            assert columns == set(COLLECTIONS[collection].model_fields), table

    def test_create_sql(self):
        sql = create_table_sql("salary_history")
        assert sql.startswith("CREATE TABLE IF NOT EXISTS salary_history")
        assert "amount DECIMAL(10,2) NOT NULL" in sql


class TestStore:
    def test_initialize(self, in_memory_db):
        assert existing_tables(in_memory_db) == sorted(TABLE_COLUMNS)
        assert set(validate_store(in_memory_db).values()) == {0}

    def test_missing_tables(self, in_memory_db):
        in_memory_db.execute("DROP TABLE attendance")
        with pytest.raises(StoreSchemaError) as exc_info:
            validate_store(in_memory_db)
        assert "attendance" in exc_info.value.message

    def test_fresh_drops_rows(self, populated_test_db):
        assert validate_store(populated_test_db)["employees"] == 11
        initialize_store(populated_test_db, fresh=True)
        assert validate_store(populated_test_db)["employees"] == 0

    def test_insert_records(self, in_memory_db):
        inserted = insert_records(
            in_memory_db,
            {"departments": [{"department_id": 1, "name": "IT", "budget": 1000}], "attendance": []},
        )
        assert inserted == {"departments": 1, "attendance": 0}
        row = in_memory_db.execute("SELECT name, manager_id FROM departments").fetchone()
        assert row == ("IT", None)

    def test_check_constraints(self, in_memory_db):
        with pytest.raises(duckdb.ConstraintException):
            insert_records(
                in_memory_db,
                {"reviews": [{"review_id": 1, "employee_id": 1, "rating": 7,
                              "review_date": "2025-01-01"}]},
            )
