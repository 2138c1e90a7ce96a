"""
DuckDB schema of the snapshot store.

One table per snapshot collection. Column names match the entity model
fields so rows load without renaming.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Tuple

import duckdb

from ..exceptions import StoreSchemaError

logger = logging.getLogger(__name__)

# Snapshot collection -> store table
TABLE_NAMES: Dict[str, str] = {
    "departments": "departments",
    "positions": "positions",
    "employees": "employees",
    "salary_records": "salary_history",
    "reviews": "performance_reviews",
    "projects": "projects",
    "assignments": "employee_projects",
    "training_programs": "training_programs",
    "training_records": "training_records",
    "leave_requests": "leave_requests",
    "attendance": "attendance",
}

TABLE_COLUMNS: Dict[str, List[Tuple[str, str]]] = {
    "departments": [
        ("department_id", "INTEGER PRIMARY KEY"),
        ("name", "VARCHAR NOT NULL"),
        ("manager_id", "INTEGER"),
        ("location", "VARCHAR"),
        ("budget", "DECIMAL(12,2) DEFAULT 0 CHECK (budget >= 0)"),
    ],
    "positions": [
        ("position_id", "INTEGER PRIMARY KEY"),
        ("title", "VARCHAR NOT NULL"),
        ("min_salary", "DECIMAL(10,2) DEFAULT 0"),
        ("max_salary", "DECIMAL(10,2) DEFAULT 0"),
        ("department_id", "INTEGER"),
    ],
    "employees": [
        ("employee_id", "INTEGER PRIMARY KEY"),
        ("employee_code", "VARCHAR"),
        ("first_name", "VARCHAR NOT NULL"),
        ("last_name", "VARCHAR NOT NULL"),
        ("email", "VARCHAR"),
        ("hire_date", "DATE NOT NULL"),
        ("termination_date", "DATE"),
        ("status", "VARCHAR DEFAULT 'Active'"),
        ("department_id", "INTEGER"),
        ("position_id", "INTEGER"),
        ("manager_id", "INTEGER"),
    ],
    "salary_history": [
        ("salary_id", "INTEGER PRIMARY KEY"),
        ("employee_id", "INTEGER NOT NULL"),
        ("amount", "DECIMAL(10,2) NOT NULL CHECK (amount >= 0)"),
        ("effective_from", "DATE NOT NULL"),
        ("effective_to", "DATE"),
        ("change_reason", "VARCHAR"),
    ],
    "performance_reviews": [
        ("review_id", "INTEGER PRIMARY KEY"),
        ("employee_id", "INTEGER NOT NULL"),
        ("reviewer_id", "INTEGER"),
        ("rating", "DOUBLE NOT NULL CHECK (rating BETWEEN 1 AND 5)"),
        ("review_date", "DATE NOT NULL"),
        ("comments", "VARCHAR"),
    ],
    "projects": [
        ("project_id", "INTEGER PRIMARY KEY"),
        ("name", "VARCHAR NOT NULL"),
        ("budget", "DECIMAL(12,2) DEFAULT 0"),
        ("start_date", "DATE"),
        ("end_date", "DATE"),
        ("status", "VARCHAR DEFAULT 'Planned'"),
        ("manager_id", "INTEGER"),
    ],
    "employee_projects": [
        ("assignment_id", "INTEGER PRIMARY KEY"),
        ("employee_id", "INTEGER NOT NULL"),
        ("project_id", "INTEGER NOT NULL"),
        ("role_name", "VARCHAR"),
        ("allocation_percent", "DOUBLE DEFAULT 100"),
        ("assigned_on", "DATE NOT NULL"),
        ("released_on", "DATE"),
    ],
    "training_programs": [
        ("program_id", "INTEGER PRIMARY KEY"),
        ("name", "VARCHAR NOT NULL"),
        ("cost", "DECIMAL(10,2) DEFAULT 0"),
        ("duration_hours", "DOUBLE"),
    ],
    "training_records": [
        ("record_id", "INTEGER PRIMARY KEY"),
        ("employee_id", "INTEGER NOT NULL"),
        ("program_id", "INTEGER NOT NULL"),
        ("status", "VARCHAR DEFAULT 'Enrolled'"),
        ("score", "DOUBLE"),
        ("completion_date", "DATE"),
    ],
    "leave_requests": [
        ("leave_id", "INTEGER PRIMARY KEY"),
        ("employee_id", "INTEGER NOT NULL"),
        ("leave_type", "VARCHAR NOT NULL"),
        ("start_date", "DATE NOT NULL"),
        ("end_date", "DATE NOT NULL"),
        ("reason", "VARCHAR"),
        ("approval_status", "VARCHAR DEFAULT 'Pending'"),
        ("approved_by", "INTEGER"),
    ],
    "attendance": [
        ("attendance_id", "INTEGER PRIMARY KEY"),
        ("employee_id", "INTEGER NOT NULL"),
        ("attendance_date", "DATE NOT NULL"),
        ("status", "VARCHAR DEFAULT 'Present'"),
        ("check_in", "TIME"),
        ("check_out", "TIME"),
    ],
}


def create_table_sql(table: str) -> str:
    columns = ",\n    ".join(f"{name} {ddl}" for name, ddl in TABLE_COLUMNS[table])
    return f"CREATE TABLE IF NOT EXISTS {table} (\n    {columns}\n)"


def initialize_store(conn: duckdb.DuckDBPyConnection, fresh: bool = False) -> None:
    """Create every snapshot table; ``fresh`` drops existing ones first."""
    for table in TABLE_COLUMNS:
        if fresh:
            conn.execute(f"DROP TABLE IF EXISTS {table}")
        conn.execute(create_table_sql(table))
    logger.info(f"Initialized {len(TABLE_COLUMNS)} snapshot tables (fresh={fresh})")


def existing_tables(conn: duckdb.DuckDBPyConnection) -> List[str]:
    rows = conn.execute(
        "SELECT table_name FROM information_schema.tables WHERE table_schema = 'main'"
    ).fetchall()
    return sorted(row[0] for row in rows)


def validate_store(conn: duckdb.DuckDBPyConnection) -> Dict[str, int]:
    """Row count per snapshot table.

    Raises:
        StoreSchemaError: If any snapshot table is missing.
    """
    present = set(existing_tables(conn))
    missing = [table for table in TABLE_COLUMNS if table not in present]
    if missing:
        raise StoreSchemaError(
            f"Snapshot store is missing {len(missing)} tables: {', '.join(missing)}",
            missing_tables=missing,
        )
    return {
        table: conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
        for table in TABLE_COLUMNS
    }


def insert_records(
    conn: duckdb.DuckDBPyConnection,
    records: Mapping[str, Iterable[Mapping[str, Any]]],
) -> Dict[str, int]:
    """Insert plain row dicts keyed by snapshot collection name."""
    inserted: Dict[str, int] = {}
    for collection, rows in records.items():
        table = TABLE_NAMES[collection]
        columns = [name for name, _ in TABLE_COLUMNS[table]]
        values = [tuple(row.get(column) for column in columns) for row in rows]
        if values:
            placeholders = ", ".join("?" for _ in columns)
            conn.executemany(
                f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})",
                values,
            )
        inserted[collection] = len(values)
        logger.debug(f"Inserted {len(values)} rows into {table}")
    return inserted
