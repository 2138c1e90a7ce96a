"""DuckDB snapshot store: schema, loader and demo dataset."""

from .loader import SnapshotLoader, frame_to_records, load_snapshot
from .sample_data import SAMPLE_AS_OF, load_sample_data, sample_records
from .schema import (
    TABLE_COLUMNS,
    TABLE_NAMES,
    create_table_sql,
    existing_tables,
    initialize_store,
    insert_records,
    validate_store,
)

__all__ = [
    "SnapshotLoader",
    "frame_to_records",
    "load_snapshot",
    "SAMPLE_AS_OF",
    "load_sample_data",
    "sample_records",
    "TABLE_COLUMNS",
    "TABLE_NAMES",
    "create_table_sql",
    "existing_tables",
    "initialize_store",
    "insert_records",
    "validate_store",
]
