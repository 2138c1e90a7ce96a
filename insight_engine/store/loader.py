"""Load a Snapshot from the DuckDB store through polars."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import duckdb
import polars as pl

from ..config import get_database_path
from ..exceptions import StoreError
from ..snapshot import Snapshot
from .schema import TABLE_COLUMNS, TABLE_NAMES, validate_store

logger = logging.getLogger(__name__)


def frame_to_records(frame: pl.DataFrame) -> List[Dict[str, Any]]:
    """Row dicts with nulls dropped so model defaults apply."""
    return [
        {key: value for key, value in row.items() if value is not None}
        for row in frame.iter_rows(named=True)
    ]


class SnapshotLoader:
    """Reads the eleven snapshot tables and builds an immutable Snapshot."""

    def __init__(self, db_path: Optional[Union[str, Path]] = None):
        self.db_path = Path(db_path) if db_path is not None else get_database_path()

    def connect(self) -> duckdb.DuckDBPyConnection:
        if not self.db_path.exists():
            raise StoreError(f"Snapshot store not found: {self.db_path}")
        return duckdb.connect(str(self.db_path))

    def read_tables(self, conn: duckdb.DuckDBPyConnection) -> Dict[str, pl.DataFrame]:
        """One polars frame per snapshot collection, ordered by primary key."""
        validate_store(conn)
        frames: Dict[str, pl.DataFrame] = {}
        for collection, table in TABLE_NAMES.items():
            key = TABLE_COLUMNS[table][0][0]
            frames[collection] = conn.execute(f"SELECT * FROM {table} ORDER BY {key}").pl()
        return frames

    def load_from_connection(
        self,
        conn: duckdb.DuckDBPyConnection,
        strict: bool = False,
        snapshot_id: Optional[str] = None,
    ) -> Snapshot:
        start = time.perf_counter()
        frames = self.read_tables(conn)
        records = {name: frame_to_records(frame) for name, frame in frames.items()}
        snapshot = Snapshot.from_records(records, strict=strict, snapshot_id=snapshot_id)
        logger.info(
            f"Loaded snapshot {snapshot.snapshot_id} from {self.db_path} "
            f"in {time.perf_counter() - start:.3f}s"
        )
        return snapshot

    def load(self, strict: bool = False, snapshot_id: Optional[str] = None) -> Snapshot:
        conn = self.connect()
        try:
            return self.load_from_connection(conn, strict=strict, snapshot_id=snapshot_id)
        finally:
            conn.close()


def load_snapshot(
    db_path: Optional[Union[str, Path]] = None,
    strict: bool = False,
) -> Snapshot:
    """Convenience wrapper around ``SnapshotLoader(db_path).load()``."""
    return SnapshotLoader(db_path).load(strict=strict)
