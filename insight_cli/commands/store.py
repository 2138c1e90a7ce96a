"""
Store commands for the insight CLI

Create the DuckDB snapshot store, optionally seed it with the demo dataset,
and check an existing store for missing tables and dangling references.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import duckdb
import typer

from insight_engine.exceptions import InsightError
from insight_engine.store import (
    SAMPLE_AS_OF,
    SnapshotLoader,
    initialize_store,
    load_sample_data,
    validate_store,
)

from ..ui import (
    console,
    render_counts,
    render_issues,
    show_error_message,
    show_success_message,
    show_warning_message,
)
from ..utils.config_helpers import find_default_database


def init_database(database: Optional[Path], sample: bool, fresh: bool) -> None:
    """Create the snapshot tables, optionally with the demo dataset."""
    db_path = database or find_default_database()
    db_path.parent.mkdir(parents=True, exist_ok=True)

    try:
        conn = duckdb.connect(str(db_path))
        try:
            if sample:
                load_sample_data(conn, fresh=True)
            else:
                initialize_store(conn, fresh=fresh)
            counts = validate_store(conn)
        finally:
            conn.close()
    except (duckdb.Error, InsightError) as e:
        show_error_message(f"Failed to initialize {db_path}: {e}")
        raise typer.Exit(1)

    show_success_message(f"Snapshot store ready at {db_path}")
    render_counts("Snapshot tables", counts)
    if sample:
        console.print(
            f"💡 Demo data is consistent as of [bold]{SAMPLE_AS_OF.isoformat()}[/bold]; "
            f"try [cyan]insight departments --as-of {SAMPLE_AS_OF.isoformat()}[/cyan]"
        )


def validate_database(database: Optional[Path], strict: bool) -> None:
    """Check tables and referential integrity of a snapshot store."""
    loader = SnapshotLoader(database or find_default_database())

    try:
        conn = loader.connect()
        try:
            counts = validate_store(conn)
            snapshot = loader.load_from_connection(conn, strict=strict)
        finally:
            conn.close()
    except InsightError as e:
        show_error_message(e.message)
        issues = getattr(e, "issues", None)
        if issues:
            render_issues(list(issues))
        raise typer.Exit(1)

    render_counts(f"Snapshot store {loader.db_path}", counts)
    issues = snapshot.integrity_issues
    if issues:
        show_warning_message(
            f"{len(issues)} dangling references; affected records are excluded from reports"
        )
        render_issues(list(issues))
    else:
        show_success_message("No integrity issues found")
